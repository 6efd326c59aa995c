"""Room structure — floor tiles and perimeter walls.

Both passes tile a rectangle on a regular grid stepped by the item's
footprint. Stepping continues while the next tile's start coordinate is
strictly less than the far edge, so when the span is not a whole multiple
of the tile size the last row/column overhangs the room. No randomness:
identical inputs give identical nodes.

Usage:
    structure = StructureGenerator(catalogue)
    bounds = SimpleBounds.of((0, 0, 0), (10, 2, 10))
    floor = structure.generate_floor(bounds, "FloorTile")   # 100 tiles
    walls = structure.generate_walls(bounds, "Wall", skip_east=True)
"""

from __future__ import annotations

import logging

from room_gen.blueprint import PropNode
from room_gen.library import ConfigurationError, ItemLibrary
from room_gen.primitives import (
    WALL_ROTATIONS,
    ContainerKind,
    Facing,
    SimpleBounds,
    Vec3,
)

log = logging.getLogger(__name__)


def _grid_starts(start: float, end: float, step: float) -> list[float]:
    """Start coordinates start, start+step, ... while strictly < end.

    Index-based so long runs don't accumulate float drift.
    """
    starts = []
    i = 0
    while True:
        v = start + i * step
        if v >= end:
            return starts
        starts.append(v)
        i += 1


class StructureGenerator:
    """Emits floor and wall nodes for a rectangular room."""

    def __init__(self, library: ItemLibrary):
        if library is None:
            raise ConfigurationError("StructureGenerator requires an item library")
        self.library = library

    def generate_floor(
        self, bounds: SimpleBounds, floor_item_id: str
    ) -> list[PropNode]:
        """Tile the X-Z rectangle of *bounds* starting at its minimum corner.

        Each tile's top surface touches the bottom face of *bounds*:
        y = bottom - tile_height / 2.
        """
        tile = self.library.get_item_size(floor_item_id)
        if tile.x <= 0 or tile.z <= 0:
            log.debug("Floor item %r has no footprint, skipping floor", floor_item_id)
            return []

        y = bounds.bottom - tile.y / 2
        nodes = []
        for i, x in enumerate(_grid_starts(bounds.min_x, bounds.max_x, tile.x)):
            for j, z in enumerate(_grid_starts(bounds.min_z, bounds.max_z, tile.z)):
                pos = Vec3(x, y, z)
                nodes.append(
                    PropNode(
                        instance_id=f"{floor_item_id}_{i}_{j}",
                        item_id=floor_item_id,
                        position=pos,
                        container_kind=ContainerKind.FLOOR,
                        facing=Facing.UP,
                        logical_bounds=SimpleBounds(pos, tile),
                    )
                )
        return nodes

    def generate_walls(
        self,
        bounds: SimpleBounds,
        wall_item_id: str,
        skip_north: bool = False,
        skip_south: bool = False,
        skip_east: bool = False,
        skip_west: bool = False,
    ) -> list[PropNode]:
        """Perimeter wall segments on every side not skipped.

        Segments run along the side in steps of the wall's width (size.x)
        and sit half a wall thickness (size.z) outside the room edge, on the
        room's floor level. North/South walls step along X, East/West
        along Z.
        """
        wall = self.library.get_item_size(wall_item_id)
        if wall.x <= 0:
            log.debug("Wall item %r has no width, skipping walls", wall_item_id)
            return []

        width = wall.x
        half_t = wall.z / 2
        sides = (
            (Facing.SOUTH, skip_south),
            (Facing.NORTH, skip_north),
            (Facing.WEST, skip_west),
            (Facing.EAST, skip_east),
        )

        nodes = []
        for facing, skip in sides:
            if skip:
                continue
            if facing == Facing.SOUTH or facing == Facing.NORTH:
                if facing == Facing.SOUTH:
                    z = bounds.min_z - half_t
                else:
                    z = bounds.max_z + half_t
                for k, x in enumerate(_grid_starts(bounds.min_x, bounds.max_x, width)):
                    nodes.append(
                        self._wall_node(
                            wall_item_id, wall, k, x + width / 2, z, bounds, facing
                        )
                    )
            else:
                if facing == Facing.WEST:
                    x = bounds.min_x - half_t
                else:
                    x = bounds.max_x + half_t
                for k, z in enumerate(_grid_starts(bounds.min_z, bounds.max_z, width)):
                    nodes.append(
                        self._wall_node(
                            wall_item_id, wall, k, x, z + width / 2, bounds, facing
                        )
                    )
        return nodes

    @staticmethod
    def _wall_node(
        item_id: str,
        size: Vec3,
        index: int,
        x: float,
        z: float,
        bounds: SimpleBounds,
        facing: Facing,
    ) -> PropNode:
        pos = Vec3(x, bounds.bottom, z)
        return PropNode(
            instance_id=f"{item_id}_{facing.name}_{index}",
            item_id=item_id,
            position=pos,
            rotation=Vec3(0.0, WALL_ROTATIONS[facing], 0.0),
            container_kind=ContainerKind.WALL,
            facing=facing,
            logical_bounds=SimpleBounds(pos, size),
        )
