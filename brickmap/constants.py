"""Configuration constants, output-format limits and paths."""

import os
import pathlib
import logging

from dotenv import load_dotenv

# ── Output-format limits ───────────────────────────────────────────
# Bricks are described with half-extents; a footprint may not exceed
# MAX_BRICK_SIZE and a single brick may not be thicker than MAX_BRICK_HEIGHT.
MAX_BRICK_SIZE = 500
MAX_BRICK_HEIGHT = 250

# Bricks snap to a 4-unit vertical grid when snapping is enabled
SNAP_GRID = 4

# Extra thickness given to feature layers sitting on a nonzero offset
LAYER_CORRECTION = 4

# Minimum thickness unit per style
MIN_UNIT_STUD = 5
MIN_UNIT_DEFAULT = 2

# One stud is 5 output units wide
STUD_UNITS = 5

# Run merging usually settles within this many passes (progress only)
RUN_MERGE_PROGRESS_PASSES = 5

# ── Save metadata ──────────────────────────────────────────────────
DEFAULT_OWNER_ID = "a1b16aca-9627-4a16-a160-67fa9adbb7b6"
DEFAULT_OWNER_NAME = "Generator"
SAVE_MAP = "https://github.com/brickadia-community"
SAVE_DESCRIPTION = "Save generated from heightmap file"

BRICK_ASSETS = [
    "PB_DefaultBrick",       # 0: cube
    "PB_DefaultTile",        # 1: tile
    "PB_DefaultMicroBrick",  # 2: micro
    "PB_DefaultStudded",     # 3: stud
]
MATERIALS = ["BMC_Plastic", "BMC_Glow"]

# Load environment variables
load_dotenv()

# Configure base paths
BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
INPUT_DIR = pathlib.Path(os.environ.get("BRICKMAP_INPUT_DIR", BASE_DIR / "input"))
OUTPUT_DIR = pathlib.Path(os.environ.get("BRICKMAP_OUTPUT_DIR", BASE_DIR / "output"))

OWNER_ID = os.environ.get("BRICKMAP_OWNER_ID", DEFAULT_OWNER_ID)
OWNER_NAME = os.environ.get("BRICKMAP_OWNER_NAME", DEFAULT_OWNER_NAME)

logger = logging.getLogger(__name__)
