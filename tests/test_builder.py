import json

import numpy as np
import pytest

from brickmap import (BrickBuilder, ConversionCancelled, DimensionMismatchError,
                      GenOptions, InputDecodeError, gen_opt_heightmap)
from brickmap.maps import ColormapArray, HeightmapArray

from helpers import solid_colors


def _maps(elev, colors=None):
    elev = np.asarray(elev)
    if colors is None:
        colors = solid_colors(elev.shape)
    return HeightmapArray(elev), ColormapArray(colors)


class TestGenOptHeightmap:
    def test_uniform_2x2_gives_one_brick(self):
        heightmap, colormap = _maps(np.full((2, 2), 5))
        bricks = gen_opt_heightmap(heightmap, colormap, GenOptions(size=5))
        assert len(bricks) == 1
        brick = bricks[0]
        assert brick.size == (10, 10, 2)
        assert brick.position == (10, 10, 5)

    def test_progress_is_monotonic_and_complete(self):
        seen = []

        def _progress(value):
            seen.append(value)
            return True

        heightmap, colormap = _maps(np.random.default_rng(1).integers(0, 4, (10, 10)))
        gen_opt_heightmap(heightmap, colormap, GenOptions(), progress_callback=_progress)
        assert seen[0] == 0.0
        assert seen[-1] == 1.0
        assert seen == sorted(seen)
        assert all(0.0 <= v <= 1.0 for v in seen)
        assert 0.2 in seen and 0.7 in seen and 0.95 in seen

    def test_progress_without_quadtree(self):
        seen = []
        heightmap, colormap = _maps(np.full((2, 2), 5))
        gen_opt_heightmap(heightmap, colormap, GenOptions(quadtree=False),
                          progress_callback=lambda v: seen.append(v) or True)
        assert 0.7 not in seen
        # first two run passes after the build checkpoint
        assert seen[2:4] == [pytest.approx(0.2 + 0.75 / 5), pytest.approx(0.2 + 0.75 * 2 / 5)]

    def test_cancel_stops_at_checkpoint(self):
        heightmap, colormap = _maps(np.full((4, 4), 1))
        with pytest.raises(ConversionCancelled) as exc:
            gen_opt_heightmap(heightmap, colormap, GenOptions(),
                              progress_callback=lambda v: v < 0.2)
        assert exc.value.progress == 0.2

    def test_dimension_mismatch(self):
        heightmap = HeightmapArray(np.zeros((2, 2)))
        colormap = ColormapArray(solid_colors((2, 3)))
        with pytest.raises(DimensionMismatchError):
            gen_opt_heightmap(heightmap, colormap, GenOptions())

    def test_merged_bricks_cover_same_footprint(self):
        # low relief keeps every tile to a single brick
        elev = np.random.default_rng(3).integers(1, 4, size=(8, 8))
        heightmap, colormap = _maps(elev)
        for quadtree in (True, False):
            bricks = gen_opt_heightmap(heightmap, colormap,
                                       GenOptions(size=5, quadtree=quadtree))
            assert len(bricks) <= 64
            assert sum(b.size[0] * b.size[1] for b in bricks) == 64 * 5 * 5

    def test_cull_removes_ground(self):
        elev = np.array([[0, 0], [0, 3]])
        heightmap, colormap = _maps(elev)
        bricks = gen_opt_heightmap(heightmap, colormap, GenOptions(cull=True))
        assert len(bricks) == 1

    def test_layered_run(self):
        elev = np.array([[0, 0, 9, 9],
                         [0, 0, 9, 9]])
        colors = solid_colors(elev.shape, (0, 0, 200, 255))
        colors[:, 2:] = (0, 150, 0, 255)
        heightmap, colormap = _maps(elev, colors)
        bricks = gen_opt_heightmap(heightmap, colormap,
                                   GenOptions(layer_threshold=5))
        # flattened base layer plus the raised block; the feature layer's
        # empty half is never emitted
        assert len(bricks) == 2
        tops = sorted(b.position[2] + b.size[2] - 2 for b in bricks)
        assert tops == [0, 9]


class TestBrickBuilder:
    def test_run_writes_save(self, heightmap_png, tmp_path):
        out = tmp_path / "out" / "terrain.brs.json"
        builder = BrickBuilder(GenOptions(), owner_name="Tester")
        result = builder.run([heightmap_png], out)
        assert result["bricks"] == 1
        data = json.loads(out.read_text())
        assert len(data["bricks"]) == 1
        assert data["header2"]["brick_owners"][0]["name"] == "Tester"

    def test_run_writes_preview(self, heightmap_png, tmp_path):
        result = BrickBuilder().run([heightmap_png], tmp_path / "a.brs.json",
                                    preview_path=tmp_path / "a.ply")
        assert (tmp_path / "a.ply").exists()
        assert result["preview_path"].endswith("a.ply")

    def test_cancelled_run_writes_nothing(self, heightmap_png, tmp_path):
        out = tmp_path / "never.brs.json"
        with pytest.raises(ConversionCancelled):
            BrickBuilder().run([heightmap_png], out,
                               progress_callback=lambda v: v < 0.5)
        assert not out.exists()

    def test_image_mode_uses_flat_heightmap(self, write_png, tmp_path):
        pixels = solid_colors((2, 2), (255, 0, 0, 255))
        pixels[0, 0] = (0, 0, 255, 255)
        path = write_png("img.png", pixels)
        heightmap, colormap = BrickBuilder(GenOptions(img=True)).load_maps([path])
        assert heightmap.at(0, 0) == 1
        assert heightmap.size() == colormap.size()

    def test_rejects_unsupported_formats(self, tmp_path):
        builder = BrickBuilder()
        with pytest.raises(InputDecodeError, match="Unsupported colormap"):
            builder.load_maps([tmp_path / "height.png"], tmp_path / "color.jpg")
        with pytest.raises(InputDecodeError, match="Unsupported heightmap"):
            builder.load_maps([tmp_path / "height.tif"], tmp_path / "color.png")

    def test_requires_heightmap(self):
        with pytest.raises(InputDecodeError):
            BrickBuilder().load_maps([])
