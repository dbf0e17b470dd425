"""Run merging: collapse horizontal or vertical lines of similar tiles."""

import logging
from typing import List

from .constants import MAX_BRICK_SIZE
from .grid import TileGrid

logger = logging.getLogger(__name__)


def merge_line(grid: TileGrid, start_i: int, children: List[int]) -> None:
    """Fold ``children`` into the tile at ``start_i`` along their shared axis."""
    if not children:
        return

    start = grid.tiles[start_i]
    vertical = grid.tiles[children[0]].center[0] == start.center[0]

    grown = 0
    for i in children:
        child = grid.tiles[i]
        grown += child.extent[1] if vertical else child.extent[0]
        start.absorb(child)

    w, h = start.extent
    start.extent = (w, h + grown) if vertical else (w + grown, h)


def _horizontal_run(grid: TileGrid, x: int, y: int, unit_size: int) -> List[int]:
    start = grid.tile_at(x, y)
    run = []
    sx = start.extent[0]
    while x + sx < grid.width:
        i = grid.index(x + sx, y)
        t = grid.tiles[i]
        if (sx + t.extent[0]) * unit_size > MAX_BRICK_SIZE or not start.similar_line(t):
            break
        run.append(i)
        sx += t.extent[0]
    return run


def _vertical_run(grid: TileGrid, x: int, y: int, unit_size: int) -> List[int]:
    start = grid.tile_at(x, y)
    run = []
    sy = start.extent[1]
    while y + sy < grid.height:
        i = grid.index(x, y + sy)
        t = grid.tiles[i]
        if (sy + t.extent[1]) * unit_size > MAX_BRICK_SIZE or not start.similar_line(t):
            break
        run.append(i)
        sy += t.extent[1]
    return run


def merge_runs(grid: TileGrid, unit_size: int) -> int:
    """One run-merge pass over every live tile in grid order.

    The longer of the horizontal and vertical runs is merged; a tie
    goes to the vertical run. Returns the number of tiles absorbed.
    """
    count = 0
    for x in range(grid.width):
        for y in range(grid.height):
            start_i = grid.index(x, y)
            if not grid.tiles[start_i].live:
                continue

            horizontal = _horizontal_run(grid, x, y, unit_size)
            vertical = _vertical_run(grid, x, y, unit_size)

            if len(horizontal) > len(vertical):
                count += len(horizontal)
                merge_line(grid, start_i, horizontal)
            else:
                count += len(vertical)
                merge_line(grid, start_i, vertical)

    return count
