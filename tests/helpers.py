import numpy as np

from brickmap.grid import TileGrid

OPAQUE = (120, 80, 40, 255)


def solid_colors(shape, color=OPAQUE):
    """``(h, w, 4)`` array filled with one color."""
    h, w = shape
    return np.tile(np.array(color, dtype=np.uint8), (h, w, 1))


def make_grid(elevations, colors=None) -> TileGrid:
    elev = np.asarray(elevations, dtype=np.int64)
    if colors is None:
        colors = solid_colors(elev.shape)
    return TileGrid.from_arrays(elev, colors)


def assert_partition(grid: TileGrid):
    """Every cell is covered by exactly one live tile."""
    assert (grid.coverage() == 1).all()
