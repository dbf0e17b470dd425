"""Tile grid and grid construction from sample providers.

A grid holds one tile per input sample in a flat list addressed
column-major (``index = y + x * height``). Merge passes mutate tiles in
place: a merged tile points at the tile that absorbed it through
``merged_into`` and the absorbing tile grows its ``extent``.

With vertical layering enabled the domain becomes a base layer plus one
feature layer per distinct elevation above the threshold.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .errors import DimensionMismatchError

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


@dataclass(eq=False)
class Tile:
    index: int
    center: tuple
    extent: tuple = (1, 1)
    color: tuple = TRANSPARENT
    elevation: int = 0
    neighbor_elevations: set = field(default_factory=set)
    merged_into: Optional[int] = None

    @property
    def live(self) -> bool:
        return self.merged_into is None

    def similar_quad(self, other: "Tile") -> bool:
        """Same extent, color and elevation, and neither merged."""
        return (self.extent == other.extent
                and self.color == other.color
                and self.elevation == other.elevation
                and self.live
                and other.live)

    def similar_line(self, other: "Tile") -> bool:
        """Same color and elevation, aligned on one axis with a matching
        size across that axis, and neither merged."""
        same_column = self.center[0] == other.center[0]
        same_row = self.center[1] == other.center[1]
        return ((same_column and self.extent[0] == other.extent[0]
                 or same_row and self.extent[1] == other.extent[1])
                and self.color == other.color
                and self.elevation == other.elevation
                and self.live
                and other.live)

    def absorb(self, other: "Tile") -> None:
        """Take over another tile's neighbor heights and mark it merged."""
        self.neighbor_elevations |= other.neighbor_elevations
        other.merged_into = self.index


class TileGrid:
    """Flat column-major array of tiles over a ``width`` x ``height`` domain."""

    def __init__(self, width: int, height: int, tiles: List[Tile]):
        if len(tiles) != width * height:
            raise ValueError(f"Expected {width * height} tiles, got {len(tiles)}")
        self.width = width
        self.height = height
        self.tiles = tiles

    @classmethod
    def from_arrays(cls, elevations, colors) -> "TileGrid":
        """Build a 1:1 grid from ``(h, w)`` elevations and ``(h, w, 4)`` colors.

        Each tile records the distinct elevations of its in-bounds
        4-neighbours.
        """
        elev = np.asarray(elevations)
        height, width = elev.shape
        elev_rows = elev.tolist()
        color_rows = np.asarray(colors).tolist()

        tiles = []
        for x in range(width):
            for y in range(height):
                neighbors = set()
                for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
                    if 0 <= nx < width and 0 <= ny < height:
                        neighbors.add(int(elev_rows[ny][nx]))
                tiles.append(Tile(
                    index=y + x * height,
                    center=(x, y),
                    color=tuple(int(c) for c in color_rows[y][x]),
                    elevation=int(elev_rows[y][x]),
                    neighbor_elevations=neighbors,
                ))
        return cls(width, height, tiles)

    def index(self, x: int, y: int) -> int:
        return y + x * self.height

    def tile_at(self, x: int, y: int) -> Tile:
        return self.tiles[y + x * self.height]

    def live_tiles(self) -> List[Tile]:
        return [t for t in self.tiles if t.live]

    def live_count(self) -> int:
        return sum(1 for t in self.tiles if t.live)

    def coverage(self) -> np.ndarray:
        """Number of live tiles covering each cell, shaped ``(h, w)``."""
        counts = np.zeros((self.height, self.width), dtype=np.int32)
        for t in self.live_tiles():
            x, y = t.center
            w, h = t.extent
            counts[y:y + h, x:x + w] += 1
        return counts


@dataclass
class HeightLayer:
    """One independently merged grid plus how to emit it.

    vertical_offset is the reference elevation thickness is measured
    from; None means each tile uses its lowest neighbour.
    """
    grid: TileGrid
    elevation: int = 0
    color: tuple = TRANSPARENT
    basin: bool = False
    base: bool = True
    layered: bool = False
    vertical_offset: Optional[int] = None


def sample_arrays(heightmap, colormap):
    """Read every sample into ``(h, w)`` elevation and ``(h, w, 4)`` color arrays."""
    h_size = tuple(heightmap.size())
    c_size = tuple(colormap.size())
    if h_size != c_size:
        raise DimensionMismatchError(h_size, c_size)

    width, height = h_size
    elev = np.zeros((height, width), dtype=np.int64)
    colors = np.zeros((height, width, 4), dtype=np.uint8)
    for x in range(width):
        for y in range(height):
            elev[y, x] = heightmap.at(x, y)
            colors[y, x] = colormap.at(x, y)
    return elev, colors


def _scan_layers(elev, colors):
    """Distinct elevations with one representative color each, plus the
    colors seen at elevation 0. Scans in grid order, first color wins."""
    height, width = elev.shape
    representative = {}
    zero_colors = set()
    elev_rows = elev.tolist()
    color_rows = colors.tolist()
    for x in range(width):
        for y in range(height):
            e = elev_rows[y][x]
            color = tuple(color_rows[y][x])
            if e not in representative:
                representative[e] = color
            if e == 0:
                zero_colors.add(color)
    return representative, zero_colors


def retained_elevations(elevations, threshold: int) -> List[int]:
    """Highest elevation at or below the threshold plus everything above it,
    ascending."""
    below = [e for e in elevations if e <= threshold]
    above = sorted(e for e in elevations if e > threshold)
    return ([max(below)] if below else []) + above


def build_layers(heightmap, colormap, threshold: int = 0) -> List[HeightLayer]:
    """Build the tile grid(s) for a conversion run.

    threshold 0 gives a single grid. A positive threshold gives a base
    layer clamped to the lowest retained elevation followed by one
    feature layer per retained elevation above it.
    """
    elev, colors = sample_arrays(heightmap, colormap)

    if threshold <= 0:
        return [HeightLayer(grid=TileGrid.from_arrays(elev, colors))]

    representative, zero_colors = _scan_layers(elev, colors)
    retained = retained_elevations(representative.keys(), threshold)
    base_elev = retained[0]
    base_color = np.array(representative[base_elev], dtype=np.uint8)

    clamped = elev > base_elev
    layer_elev = np.where(clamped, base_elev, elev)
    layer_colors = np.where(clamped[..., None], base_color, colors)
    layers = [HeightLayer(
        grid=TileGrid.from_arrays(layer_elev, layer_colors),
        elevation=base_elev,
        color=representative[base_elev],
        base=True,
        layered=True,
        vertical_offset=0,
    )]

    for prev, h in zip(retained, retained[1:]):
        color = representative[h]
        basin = color in zero_colors
        if basin:
            qualifies = (elev == h) & np.all(colors == np.array(color, dtype=np.uint8), axis=-1)
        else:
            qualifies = elev >= h
        layer_elev = np.where(qualifies, h, 0)
        layer_colors = np.where(qualifies[..., None],
                                np.array(color, dtype=np.uint8),
                                np.array(TRANSPARENT, dtype=np.uint8))
        layers.append(HeightLayer(
            grid=TileGrid.from_arrays(layer_elev, layer_colors),
            elevation=h,
            color=color,
            basin=basin,
            base=False,
            layered=True,
            vertical_offset=h if basin else prev,
        ))
        logger.info(f"  Layer at {h} ({'basin' if basin else 'raised'}): "
                    f"{int(qualifies.sum())} cells")

    logger.info(f"Split heightmap into {len(layers)} layers "
                f"(threshold {threshold})")
    return layers
