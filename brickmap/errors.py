"""Exceptions raised by the conversion pipeline."""


class BrickmapError(Exception):
    """Base class for every conversion failure."""


class DimensionMismatchError(BrickmapError):
    """Heightmap and colormap cover different domains."""

    def __init__(self, heightmap_size, colormap_size):
        super().__init__(
            f"Heightmap and colormap must have same dimensions "
            f"(heightmap {heightmap_size[0]}x{heightmap_size[1]}, "
            f"colormap {colormap_size[0]}x{colormap_size[1]})")
        self.heightmap_size = heightmap_size
        self.colormap_size = colormap_size


class ConversionCancelled(BrickmapError):
    """The progress callback asked the run to stop."""

    def __init__(self, progress: float):
        super().__init__(f"Stopped by user at {progress * 100:.0f}%")
        self.progress = progress


class InputDecodeError(BrickmapError):
    """A sample provider could not be built from its source."""
