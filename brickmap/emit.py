"""Expand live tiles into stacks of size-bounded bricks."""

import logging
from typing import List, Optional

from .constants import LAYER_CORRECTION, MAX_BRICK_HEIGHT, SNAP_GRID
from .grid import HeightLayer, Tile, TileGrid
from .models import Brick, Collision, GenOptions

logger = logging.getLogger(__name__)


def _snap_up(value: int) -> int:
    # always moves to the next grid line, even when already aligned
    return value + SNAP_GRID - value % SNAP_GRID


def tile_bricks(tile: Tile, options: GenOptions,
                vertical_offset: Optional[int] = None,
                layered: bool = False) -> List[Brick]:
    """Bricks for one tile, stacked from its top surface downwards.

    Thickness grows with the drop from the tile to ``vertical_offset``
    (or to its lowest neighbour when no offset is given).
    """
    if layered and tile.elevation == 0:
        z = 0
    else:
        z = options.scale * tile.elevation

    if vertical_offset is None:
        reference = min(tile.neighbor_elevations, default=0)
    else:
        reference = vertical_offset
    raw_height = max(tile.elevation - reference + 1, 2)
    desired = max(raw_height * options.scale // 2, 2)

    if layered and vertical_offset:
        desired += LAYER_CORRECTION

    if options.snap:
        z = _snap_up(z)
        desired = _snap_up(desired)

    unit = options.min_unit
    w, h = tile.extent
    cx, cy = tile.center
    collision = Collision.from_options(options)
    cube_pixels = options.img and options.micro

    bricks = []
    while desired > 0:
        thickness = min(max(desired, unit), MAX_BRICK_HEIGHT)
        thickness = -(-thickness // unit) * unit

        bricks.append(Brick(
            asset_name_index=options.asset,
            size=(w * options.size, h * options.size,
                  options.size if cube_pixels else thickness),
            position=((cx * 2 + w) * options.size,
                      (cy * 2 + h) * options.size,
                      z - thickness + 2),
            color=tuple(tile.color),
            collision=collision,
            material_index=int(options.glow),
        ))

        desired -= thickness
        z -= thickness * 2

    return bricks


def emit(grid: TileGrid, options: GenOptions,
         vertical_offset: Optional[int] = None, *,
         layered: bool = False, feature: bool = False) -> List[Brick]:
    """Bricks for every live tile of a grid, in tile order.

    Culling drops transparent tiles, and in a single-grid run also tiles
    at elevation 0. Elevation-0 tiles of a feature layer are placeholders
    and never emitted.
    """
    bricks = []
    for t in grid.tiles:
        if not t.live:
            continue
        if options.cull and (t.color[3] == 0 or not layered and t.elevation == 0):
            continue
        if feature and t.elevation == 0:
            continue
        bricks.extend(tile_bricks(t, options, vertical_offset, layered))
    return bricks


def emit_layer(layer: HeightLayer, options: GenOptions) -> List[Brick]:
    return emit(layer.grid, options, layer.vertical_offset,
                layered=layer.layered, feature=not layer.base)
