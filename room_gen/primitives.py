"""Primitive geometry types for blueprint generation.

Everything spatial in the generator is expressed with these few types:
a 3-component vector, an axis-aligned center+size box, and the enums that
tag nodes for downstream systems.

Coordinate convention:
    - Y-up, the floor plane is X-Z
    - SimpleBounds is center + full size (not half-extents)
    - Rotations are Euler degrees; walls only ever rotate around Y

Facing convention for perimeter walls:
    - North is +Z, South is -Z, East is +X, West is -X
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class Vec3(NamedTuple):
    x: float
    y: float
    z: float


ZERO = Vec3(0.0, 0.0, 0.0)
ONE = Vec3(1.0, 1.0, 1.0)


class ContainerKind(Enum):
    """What role a node plays for downstream systems (wall carving, door rigs)."""

    UNKNOWN = "unknown"
    REGION = "region"
    FLOOR = "floor"
    CEILING = "ceiling"
    WALL = "wall"
    CORNER = "corner"
    DOOR = "door"
    WINDOW = "window"
    TABLE = "table"
    CHAIR = "chair"
    PASSAGE = "passage"
    STAIR = "stair"
    SHELF = "shelf"
    DECOR = "decor"
    CUSTOM = "custom"


class Facing(Enum):
    NONE = "none"
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"
    UP = "up"
    DOWN = "down"


class PlacementType(Enum):
    """How a generation rule places its children."""

    FIXED = "fixed"  # one child at the rule's local offset
    SCATTER = "scatter"  # rejection-sampled points around the parent
    STACK = "stack"  # declared, not dispatched


# Y rotation (degrees) for a wall on each side of a room. The wall's front
# faces into the room.
WALL_ROTATIONS: dict[Facing, float] = {
    Facing.SOUTH: 0.0,
    Facing.WEST: 90.0,
    Facing.NORTH: 180.0,
    Facing.EAST: 270.0,
}


@dataclass(frozen=True)
class SimpleBounds:
    """Axis-aligned box, the unit of spatial negotiation between containers.

    Attributes:
        center: Box center (x, y, z)
        size: Full extent along each axis
    """

    center: Vec3 = ZERO
    size: Vec3 = ZERO

    @classmethod
    def of(cls, center, size) -> SimpleBounds:
        """Build from any two 3-sequences."""
        return cls(Vec3(*map(float, center)), Vec3(*map(float, size)))

    @property
    def min_x(self) -> float:
        return self.center.x - self.size.x / 2

    @property
    def max_x(self) -> float:
        return self.center.x + self.size.x / 2

    @property
    def min_z(self) -> float:
        return self.center.z - self.size.z / 2

    @property
    def max_z(self) -> float:
        return self.center.z + self.size.z / 2

    @property
    def bottom(self) -> float:
        return self.center.y - self.size.y / 2

    @property
    def floor_area(self) -> float:
        """X-Z area, used for density-based rule counts."""
        return self.size.x * self.size.z

    @property
    def is_empty(self) -> bool:
        return self.size == ZERO

    def fits(self, footprint: Vec3) -> bool:
        """True if *footprint* fits on both planar axes."""
        return self.size.x >= footprint.x and self.size.z >= footprint.z

    def halves(self, along_x: bool) -> tuple[SimpleBounds, SimpleBounds]:
        """Split into two halves along X (vertical cut) or Z (horizontal cut).

        Each half keeps the full extent on the other axes and is shifted
        toward its side by a quarter of the split axis width.
        """
        c, s = self.center, self.size
        if along_x:
            half = s.x / 2
            size = Vec3(half, s.y, s.z)
            return (
                SimpleBounds(Vec3(c.x - half / 2, c.y, c.z), size),
                SimpleBounds(Vec3(c.x + half / 2, c.y, c.z), size),
            )
        half = s.z / 2
        size = Vec3(s.x, s.y, half)
        return (
            SimpleBounds(Vec3(c.x, c.y, c.z - half / 2), size),
            SimpleBounds(Vec3(c.x, c.y, c.z + half / 2), size),
        )


def planar_distance(a: Vec3, b: Vec3) -> float:
    """Distance between two points projected onto the X-Z plane."""
    return math.hypot(a.x - b.x, a.z - b.z)
