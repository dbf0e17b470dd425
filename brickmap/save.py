"""Save document generation.

Wraps the emitted bricks with the header, owner and asset tables a save
needs and writes the result as JSON.
"""

import json
import logging
import pathlib
import uuid
from typing import List

from .constants import (BRICK_ASSETS, DEFAULT_OWNER_ID, MATERIALS,
                        SAVE_DESCRIPTION, SAVE_MAP)
from .models import Brick

logger = logging.getLogger(__name__)


def parse_owner_id(owner_id: str) -> str:
    """Canonical UUID string, or the default owner id if it does not parse."""
    try:
        return str(uuid.UUID(str(owner_id)))
    except ValueError:
        logger.warning(f"Invalid owner id {owner_id!r}, using {DEFAULT_OWNER_ID}")
        return DEFAULT_OWNER_ID


def bricks_to_save(bricks: List[Brick], owner_id: str, owner_name: str) -> dict:
    owner = parse_owner_id(owner_id)
    return {
        "header1": {
            "map": SAVE_MAP,
            "author": {"id": owner, "name": owner_name},
            "description": SAVE_DESCRIPTION,
        },
        "header2": {
            "brick_assets": list(BRICK_ASSETS),
            "materials": list(MATERIALS),
            "brick_owners": [
                {"id": owner, "name": owner_name, "bricks": len(bricks)},
            ],
        },
        "bricks": [b.to_dict() for b in bricks],
    }


def write_save(path, data: dict) -> None:
    path = pathlib.Path(path)
    with open(path, "w") as f:
        json.dump(data, f)
    size_mb = path.stat().st_size / 1024 / 1024
    logger.info(f"Save written: {path.name} "
                f"({len(data['bricks'])} bricks, {size_mb:.1f} MB)")


def read_save(path) -> dict:
    with open(path) as f:
        return json.load(f)
