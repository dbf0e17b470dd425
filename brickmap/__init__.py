"""Brickmap package: converts heightmap and colormap images into brick saves."""

from brickmap.builder import BrickBuilder, gen_opt_heightmap
from brickmap.errors import (BrickmapError, ConversionCancelled,
                             DimensionMismatchError, InputDecodeError)
from brickmap.models import Brick, BrickStyle, GenOptions
