"""Elevation and color sample providers backed by images.

Providers expose ``at(x, y)`` and ``size()``; images are decoded once with
Pillow into numpy arrays indexed ``[y, x]``.
"""

import logging
import pathlib
from typing import Protocol, Sequence

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import InputDecodeError

logger = logging.getLogger(__name__)


class Heightmap(Protocol):
    def at(self, x: int, y: int) -> int: ...

    def size(self) -> tuple: ...


class Colormap(Protocol):
    def at(self, x: int, y: int) -> tuple: ...

    def size(self) -> tuple: ...


def to_linear_rgb(rgba: np.ndarray) -> np.ndarray:
    """Convert sRGB bytes to linear-light bytes. Alpha is kept as-is.

    Works on a single ``[r, g, b, a]`` pixel or an ``(h, w, 4)`` array.
    """
    rgba = np.asarray(rgba, dtype=np.uint8)
    cf = rgba[..., :3].astype(np.float64) / 255.0
    linear = np.where(cf > 0.04045,
                      np.power(cf / 1.055 + 0.0521327, 2.4),
                      cf / 12.192) * 255.0
    out = rgba.copy()
    out[..., :3] = np.clip(np.floor(linear), 0, 255).astype(np.uint8)
    return out


def _open_rgba(path) -> np.ndarray:
    try:
        with Image.open(path) as img:
            return np.asarray(img.convert("RGBA"), dtype=np.uint8)
    except (OSError, UnidentifiedImageError) as e:
        raise InputDecodeError(f"Could not open image {path}: {e}") from e


class HeightmapPNG:
    """Sum of one or more equally sized images.

    In 8-bit mode the red channel is the elevation. In high-detail mode
    the four RGBA bytes are read as one big-endian 32-bit integer.
    """

    def __init__(self, images: Sequence, hdmap: bool = False):
        if not images:
            raise InputDecodeError("HeightmapPNG requires at least one image")

        maps = [_open_rgba(path) for path in images]
        shape = maps[0].shape
        for m in maps:
            if m.shape != shape:
                raise InputDecodeError("Mismatched heightmap sizes")

        total = np.zeros(shape[:2], dtype=np.uint64)
        for m in maps:
            if hdmap:
                total += np.ascontiguousarray(m).view(">u4")[..., 0].astype(np.uint64)
            else:
                total += m[..., 0]
        self.hdmap = hdmap
        self.values = total
        logger.info(f"Loaded {len(maps)} heightmap image(s), "
                    f"{shape[1]}x{shape[0]}, max elevation {int(total.max())}")

    def at(self, x: int, y: int) -> int:
        return int(self.values[y, x])

    def size(self) -> tuple:
        return (self.values.shape[1], self.values.shape[0])


class HeightmapFlat:
    """Constant elevation over a rectangle, used to render flat images."""

    def __init__(self, size: tuple, elevation: int = 1):
        self.width, self.height = size
        self.elevation = elevation

    def at(self, x: int, y: int) -> int:
        return self.elevation

    def size(self) -> tuple:
        return (self.width, self.height)


class ColormapPNG:
    """RGBA colors from a single image.

    Unless ``lrgb`` is set the image is treated as sRGB and converted to
    linear light once at load time.
    """

    def __init__(self, path, lrgb: bool = False):
        pixels = _open_rgba(path)
        self.lrgb = lrgb
        self.pixels = pixels if lrgb else to_linear_rgb(pixels)

    def at(self, x: int, y: int) -> tuple:
        return tuple(int(c) for c in self.pixels[y, x])

    def size(self) -> tuple:
        return (self.pixels.shape[1], self.pixels.shape[0])


class ColormapArray:
    """Colormap over an in-memory ``(h, w, 4)`` array, already linear."""

    def __init__(self, pixels):
        self.pixels = np.asarray(pixels, dtype=np.uint8)

    def at(self, x: int, y: int) -> tuple:
        return tuple(int(c) for c in self.pixels[y, x])

    def size(self) -> tuple:
        return (self.pixels.shape[1], self.pixels.shape[0])


class HeightmapArray:
    """Heightmap over an in-memory ``(h, w)`` integer array."""

    def __init__(self, values):
        self.values = np.asarray(values, dtype=np.uint64)

    def at(self, x: int, y: int) -> int:
        return int(self.values[y, x])

    def size(self) -> tuple:
        return (self.values.shape[1], self.values.shape[0])


def file_ext(filename) -> str:
    """Lowercase extension without the dot, '' when there is none."""
    return pathlib.Path(str(filename)).suffix.lower().lstrip(".")
