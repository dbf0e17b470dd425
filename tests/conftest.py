import numpy as np
import pytest
from PIL import Image

from helpers import solid_colors


@pytest.fixture
def write_png(tmp_path):
    """Write an ``(h, w, 4)`` uint8 array as a PNG and return its path."""
    def _write(name, pixels):
        path = tmp_path / name
        Image.fromarray(np.asarray(pixels, dtype=np.uint8)).save(path)
        return path
    return _write


@pytest.fixture
def heightmap_png(write_png):
    """2x2 opaque image with red channel 5 everywhere."""
    return write_png("terrain.png", solid_colors((2, 2), (5, 100, 200, 255)))
