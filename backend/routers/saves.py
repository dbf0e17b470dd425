import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config
from backend.models import SaveInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/saves", tags=["saves"])

SAVE_SUFFIX = ".brs.json"


@router.get("", response_model=List[SaveInfo])
async def list_saves():
    """Return metadata for every save in the output directory."""
    output_dir = Path(config.OUTPUT_DIR)
    if not output_dir.exists():
        return []

    saves: list[SaveInfo] = []
    for save_file in sorted(output_dir.glob(f"*{SAVE_SUFFIX}")):
        stem = save_file.name[:-len(SAVE_SUFFIX)]
        saves.append(
            SaveInfo(
                name=stem.replace("-", " ").title(),
                filename=save_file.name,
                size_bytes=save_file.stat().st_size,
            )
        )
    return saves


@router.get("/{filename}")
async def get_save(filename: str):
    """Serve a save or preview file from the output directory."""
    output_dir = Path(config.OUTPUT_DIR).resolve()
    file_path = (output_dir / filename).resolve()
    if file_path.parent != output_dir or not file_path.is_file():
        raise HTTPException(status_code=404, detail="Save file not found")

    media_type = ("model/gltf-binary" if file_path.suffix == ".glb"
                  else "application/json")
    return FileResponse(
        path=str(file_path),
        media_type=media_type,
        filename=filename,
    )
