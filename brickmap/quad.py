"""Power-of-two quad merging.

At level ``n`` every aligned 2x2 block of ``2^n``-sized tiles with equal
color and elevation collapses into its top-left tile.
"""

import logging
import math

from .constants import MAX_BRICK_SIZE
from .grid import TileGrid

logger = logging.getLogger(__name__)


def merge_at_scale(grid: TileGrid, level: int) -> int:
    """Merge 2x2 blocks of ``2^level`` tiles. Returns the number of tiles removed."""
    count = 0
    space = 2 ** level
    step = space * 2
    tiles = grid.tiles
    height = grid.height

    for x in range(0, grid.width - space, step):
        for y in range(0, height - space, step):
            top_left = tiles[y + x * height]
            top_right = tiles[y + (x + space) * height]
            bottom_left = tiles[y + space + x * height]
            bottom_right = tiles[y + space + (x + space) * height]

            if (top_left.extent != (space, space)
                    or not top_left.similar_quad(top_right)
                    or not top_left.similar_quad(bottom_left)
                    or not top_left.similar_quad(bottom_right)):
                continue

            top_left.extent = (space * 2, space * 2)
            top_left.absorb(top_right)
            top_left.absorb(bottom_left)
            top_left.absorb(bottom_right)
            count += 3

    return count


def max_quad_levels(unit_size: int) -> int:
    """Number of levels whose merged tiles stay under the size limit."""
    if unit_size < 1:
        raise ValueError(f"Unit size must be at least 1, got {unit_size}")
    level = 0
    while 2 ** (level + 1) * unit_size < MAX_BRICK_SIZE:
        level += 1
    return level


def quad_progress(level: int, unit_size: int) -> float:
    """Fraction of the quad stage done before ``level`` runs."""
    return level / math.log2(MAX_BRICK_SIZE / unit_size)
