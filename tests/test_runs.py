import numpy as np

from brickmap.quad import merge_at_scale
from brickmap.runs import merge_line, merge_runs

from helpers import assert_partition, make_grid, solid_colors


def _run_to_fixpoint(grid, unit_size=5):
    total = 0
    while True:
        count = merge_runs(grid, unit_size)
        assert_partition(grid)
        if count == 0:
            return total
        total += count


def test_horizontal_row_merges_into_first_tile():
    grid = make_grid([[3, 3, 3]])
    assert merge_runs(grid, 5) == 2
    start = grid.tile_at(0, 0)
    assert start.extent == (3, 1)
    assert grid.tile_at(2, 0).merged_into == start.index
    assert_partition(grid)


def test_vertical_column_merges():
    grid = make_grid([[3], [3], [3], [3]])
    assert merge_runs(grid, 5) == 3
    assert grid.tile_at(0, 0).extent == (1, 4)


def test_run_stops_at_different_tile():
    grid = make_grid([[3, 3, 4, 3]])
    assert merge_runs(grid, 5) == 1
    assert grid.tile_at(0, 0).extent == (2, 1)
    assert grid.tile_at(2, 0).extent == (1, 1)
    assert grid.tile_at(3, 0).merged_into is None


def test_tie_prefers_vertical():
    grid = make_grid(np.full((2, 2), 1))
    assert merge_runs(grid, 5) == 2
    assert grid.tile_at(0, 0).extent == (1, 2)
    assert grid.tile_at(1, 0).extent == (1, 2)
    assert grid.tile_at(0, 1).merged_into == grid.tile_at(0, 0).index

    # the two columns share a row and a height, so they join next pass
    assert merge_runs(grid, 5) == 1
    assert grid.tile_at(0, 0).extent == (2, 2)
    assert merge_runs(grid, 5) == 0


def test_longer_horizontal_run_wins():
    grid = make_grid([[1, 1, 1],
                      [1, 2, 2]])
    merge_runs(grid, 5)
    assert grid.tile_at(0, 0).extent == (3, 1)
    assert grid.tile_at(0, 1).extent == (1, 1)


def test_mismatched_cross_size_is_not_line_similar():
    # after quad merging the 2x2 block cannot absorb the 1-high strip
    elev = np.full((3, 2), 1)
    grid = make_grid(elev)
    merge_at_scale(grid, 0)
    assert grid.tile_at(0, 0).extent == (2, 2)
    merge_runs(grid, 5)
    assert grid.tile_at(0, 2).extent == (2, 1)
    assert grid.tile_at(0, 0).extent == (2, 2)
    assert_partition(grid)


def test_size_limit_caps_run_length():
    grid = make_grid(np.full((1, 150), 1))
    assert merge_runs(grid, 5) == 148
    assert grid.tile_at(0, 0).extent == (100, 1)
    assert grid.tile_at(100, 0).extent == (50, 1)
    # 100 + 50 tiles of 5 units would exceed 500
    assert merge_runs(grid, 5) == 0
    assert grid.live_count() == 2


def test_unit_size_scales_limit():
    grid = make_grid(np.full((1, 30), 1))
    merge_runs(grid, 25)
    assert grid.tile_at(0, 0).extent == (20, 1)


def test_fixpoint_is_idempotent():
    rng = np.random.default_rng(7)
    grid = make_grid(rng.integers(0, 3, size=(12, 9)))
    _run_to_fixpoint(grid)
    assert merge_runs(grid, 5) == 0
    assert merge_runs(grid, 5) == 0


def test_random_grid_stays_partitioned_and_sound():
    rng = np.random.default_rng(42)
    elev = rng.integers(0, 3, size=(16, 16))
    colors = solid_colors(elev.shape)
    colors[..., 0] = rng.integers(0, 2, size=elev.shape)
    grid = make_grid(elev, colors)

    before = grid.live_count()
    for level in range(3):
        removed = merge_at_scale(grid, level)
        assert removed % 3 == 0
        assert_partition(grid)
    removed = _run_to_fixpoint(grid)
    assert grid.live_count() <= before

    for tile in grid.live_tiles():
        x, y = tile.center
        w, h = tile.extent
        assert (elev[y:y + h, x:x + w] == tile.elevation).all()
        assert (colors[y:y + h, x:x + w] == np.array(tile.color)).all()


def test_merge_line_ignores_empty_children():
    grid = make_grid([[1, 1]])
    merge_line(grid, 0, [])
    assert grid.tile_at(0, 0).extent == (1, 1)
    assert grid.live_count() == 2
