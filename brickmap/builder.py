"""Heightmap conversion, a thin orchestrator over the grid, merge and emit modules."""

import logging
import math
import pathlib
import time
from typing import Callable, List, Optional, Sequence

from .constants import OWNER_ID, OWNER_NAME, RUN_MERGE_PROGRESS_PASSES
from .emit import emit_layer
from .errors import ConversionCancelled, InputDecodeError
from .grid import build_layers
from .maps import ColormapPNG, HeightmapFlat, HeightmapPNG, file_ext
from .models import Brick, GenOptions
from .quad import max_quad_levels, merge_at_scale, quad_progress
from .runs import merge_runs
from . import mesh as mesh_mod
from . import save as save_mod

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], bool]


def gen_opt_heightmap(heightmap, colormap, options: GenOptions,
                      progress_callback: Optional[ProgressCallback] = None) -> List[Brick]:
    """Convert samples into an optimized brick list.

    progress_callback receives a fraction in [0, 1] at fixed checkpoints
    and returns False to cancel, which raises ConversionCancelled.
    """
    def _progress(value: float):
        if progress_callback is not None and not progress_callback(value):
            raise ConversionCancelled(value)

    _progress(0.0)

    logger.info("Building initial tile grid")
    width, height = heightmap.size()
    area = width * height
    layers = build_layers(heightmap, colormap, options.layer_threshold)
    _progress(0.2)

    if options.quadtree:
        logger.info("Optimizing quadtree")
        for level in range(max_quad_levels(options.size)):
            _progress(0.2 + 0.5 * quad_progress(level, options.size))
            count = sum(merge_at_scale(layer.grid, level) for layer in layers)
            if count == 0:
                break
            logger.info(f"  Removed {count} {2 ** level}x bricks")
        _progress(0.7)
        prog_offset, prog_scale = 0.7, 0.25
    else:
        prog_offset, prog_scale = 0.2, 0.75

    logger.info("Optimizing linear")
    i = 0
    while True:
        i += 1
        count = sum(merge_runs(layer.grid, options.size) for layer in layers)
        _progress(prog_offset + prog_scale * min(i / RUN_MERGE_PROGRESS_PASSES, 1.0))
        if count == 0:
            break
        logger.info(f"  Removed {count} bricks")

    _progress(0.95)

    bricks = []
    for layer in layers:
        bricks.extend(emit_layer(layer, options))

    if area:
        logger.info(f"Reduced {area} to {len(bricks)} "
                    f"({math.floor(100 - len(bricks) / area * 100)}%; "
                    f"-{area - len(bricks)} bricks)")

    _progress(1.0)
    return bricks


class BrickBuilder:
    def __init__(self, options: Optional[GenOptions] = None,
                 owner_id: str = OWNER_ID, owner_name: str = OWNER_NAME):
        self.options = options or GenOptions()
        self.owner_id = owner_id
        self.owner_name = owner_name

    def load_maps(self, heightmap_files: Sequence, colormap_file=None):
        """Open the heightmap and colormap providers.

        The colormap defaults to the first heightmap image. In image mode
        the heightmap is replaced by a flat one the size of the colormap.
        """
        if not heightmap_files:
            raise InputDecodeError("At least one heightmap image is required")
        colormap_file = colormap_file or heightmap_files[0]

        ext = file_ext(colormap_file)
        if ext != "png":
            raise InputDecodeError(f"Unsupported colormap format '{ext}' "
                                   f"for {colormap_file}")
        if not all(file_ext(f) == "png" for f in heightmap_files):
            raise InputDecodeError("Unsupported heightmap format")

        colormap = ColormapPNG(colormap_file, lrgb=self.options.lrgb)
        if self.options.img:
            heightmap = HeightmapFlat(colormap.size())
        else:
            heightmap = HeightmapPNG(list(heightmap_files), hdmap=self.options.hdmap)
        return heightmap, colormap

    def convert(self, heightmap_files: Sequence, colormap_file=None,
                progress_callback: Optional[ProgressCallback] = None) -> List[Brick]:
        logger.info("Reading image files")
        heightmap, colormap = self.load_maps(heightmap_files, colormap_file)
        t0 = time.perf_counter()
        bricks = gen_opt_heightmap(heightmap, colormap, self.options,
                                   progress_callback=progress_callback)
        logger.info(f"Generated {len(bricks)} bricks in "
                    f"{time.perf_counter() - t0:.1f}s")
        return bricks

    def write_save(self, bricks: List[Brick], output_path) -> pathlib.Path:
        """Write the save document. Returns the resolved path."""
        path = pathlib.Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Writing save to {path}")
        data = save_mod.bricks_to_save(bricks, self.owner_id, self.owner_name)
        save_mod.write_save(path, data)
        return path

    def export_preview(self, bricks: List[Brick], output_path) -> pathlib.Path:
        path = pathlib.Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        mesh_mod.export_mesh(bricks, path)
        return path

    def run(self, heightmap_files: Sequence, output_path, colormap_file=None,
            preview_path=None,
            progress_callback: Optional[ProgressCallback] = None) -> dict:
        """Convert and write all outputs. Nothing is written if conversion fails."""
        bricks = self.convert(heightmap_files, colormap_file,
                              progress_callback=progress_callback)
        result = {
            "bricks": len(bricks),
            "save_path": str(self.write_save(bricks, output_path)),
        }
        if preview_path and bricks:
            result["preview_path"] = str(self.export_preview(bricks, preview_path))
        return result
