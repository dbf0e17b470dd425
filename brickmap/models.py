"""Data classes for generation options and output bricks."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional

from .constants import MIN_UNIT_DEFAULT, MIN_UNIT_STUD, STUD_UNITS


class BrickStyle(int, Enum):
    """Brick shape; the value is the asset index in the save."""
    DEFAULT = 0
    TILE = 1
    MICRO = 2
    STUD = 3

    @classmethod
    def from_flags(cls, tile: bool = False, micro: bool = False,
                   stud: bool = False) -> "BrickStyle":
        """Resolve CLI style flags. Stud wins, then tile, then micro."""
        if stud:
            return cls.STUD
        if tile:
            return cls.TILE
        if micro:
            return cls.MICRO
        return cls.DEFAULT


@dataclass
class GenOptions:
    """Options controlling how tiles become bricks.

    size: footprint unit in output units (5 per stud, 1 for micro bricks)
    scale: vertical multiplier applied to elevations
    layer_threshold: elevations above this get their own layer (0 disables)
    micro: micro flag as given, defaults to the micro style; image mode
        renders micro bricks as cubes
    """
    size: int = STUD_UNITS
    scale: int = 1
    style: BrickStyle = BrickStyle.DEFAULT
    cull: bool = False
    snap: bool = False
    img: bool = False
    glow: bool = False
    hdmap: bool = False
    lrgb: bool = False
    nocollide: bool = False
    quadtree: bool = True
    layer_threshold: int = 0
    micro: Optional[bool] = None

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"Unit size must be at least 1, got {self.size}")
        # micro stays set under a winning tile or stud style
        if self.micro is None:
            self.micro = self.style is BrickStyle.MICRO

    @classmethod
    def from_cli(cls, studs: int = 1, tile: bool = False, micro: bool = False,
                 stud: bool = False, **kwargs) -> "GenOptions":
        """Build options from stud-based CLI values."""
        style = BrickStyle.from_flags(tile=tile, micro=micro, stud=stud)
        size = studs * STUD_UNITS
        # micro bricks are a fifth of a stud; a stud flag keeps the micro size
        if micro and not tile:
            size //= STUD_UNITS
        return cls(size=size, style=style, micro=micro, **kwargs)

    @property
    def asset(self) -> int:
        return int(self.style)

    @property
    def min_unit(self) -> int:
        return MIN_UNIT_STUD if self.style is BrickStyle.STUD else MIN_UNIT_DEFAULT


@dataclass
class Collision:
    player: bool = True
    weapon: bool = True
    interaction: bool = True
    tool: bool = True

    @classmethod
    def from_options(cls, options: GenOptions) -> "Collision":
        solid = not options.nocollide
        return cls(player=solid, weapon=solid, interaction=solid, tool=True)


@dataclass
class Brick:
    """One output brick. Size is in half-extents, position is the center."""
    asset_name_index: int
    size: tuple
    position: tuple
    color: tuple
    collision: Collision = field(default_factory=Collision)
    owner_index: int = 1
    material_index: int = 0
    material_intensity: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["size"] = list(self.size)
        data["position"] = list(self.position)
        data["color"] = list(self.color)
        return data
