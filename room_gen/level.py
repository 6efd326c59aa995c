"""Level assembly — a row of rooms joined by doors.

Rooms are generated in their own local frame (centered on the origin,
floor at y=0) and laid out along +X by the host using ``world_offset``.
Consecutive rooms share a wall plane: room A's east side and room B's
west side. Connecting them keeps one side's walls, knocks out the single
segment nearest the middle for a door, and drops the other side's walls
on that plane so the opening isn't doubled.

Usage:
    director = LevelDirector(RoomGenerator(default_catalogue()))
    level = director.generate_level(seed=7)
    for room in level.rooms:
        print(room.name, room.world_offset, len(room.blueprint))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from room_gen.blueprint import PropNode, RoomBlueprint
from room_gen.config import LevelConfig
from room_gen.generator import RoomGenerator
from room_gen.postprocess import is_wall, remove_door_wall_overlaps
from room_gen.primitives import ContainerKind, Facing, SimpleBounds, Vec3

log = logging.getLogger(__name__)


@dataclass
class LevelRoom:
    name: str
    blueprint: RoomBlueprint
    world_offset: Vec3


@dataclass
class Level:
    rooms: list[LevelRoom] = field(default_factory=list)

    def room(self, name: str) -> LevelRoom:
        """Get a room by name. Raises KeyError if not found."""
        for r in self.rooms:
            if r.name == name:
                return r
        raise KeyError(name)


def walls_on_plane(
    blueprint: RoomBlueprint,
    plane_x: float,
    epsilon: float,
    facing: Facing | None = None,
) -> list[PropNode]:
    """Wall nodes whose X lies within *epsilon* of the plane x = plane_x.

    With *facing*, only walls on that side count, which excludes the
    north/south segments ending next to the plane.
    """
    return [
        n
        for n in blueprint.nodes
        if is_wall(n)
        and abs(n.position.x - plane_x) <= epsilon
        and (facing is None or n.facing == facing)
    ]


def remove_all_walls_on_plane(
    blueprint: RoomBlueprint,
    plane_x: float,
    epsilon: float,
    facing: Facing | None = None,
) -> int:
    doomed = {
        n.instance_id for n in walls_on_plane(blueprint, plane_x, epsilon, facing)
    }
    blueprint.nodes = [n for n in blueprint.nodes if n.instance_id not in doomed]
    return len(doomed)


def remove_single_wall_on_plane(
    blueprint: RoomBlueprint,
    plane_x: float,
    epsilon: float,
    facing: Facing | None = None,
) -> bool:
    """Remove the wall on the plane closest to z=0. False if there is none."""
    candidates = walls_on_plane(blueprint, plane_x, epsilon, facing)
    if not candidates:
        return False
    target = min(candidates, key=lambda n: abs(n.position.z))
    blueprint.nodes = [n for n in blueprint.nodes if n is not target]
    return True


class LevelDirector:
    """Generates and connects a row of themed rooms."""

    def __init__(self, generator: RoomGenerator, config: LevelConfig | None = None):
        self.generator = generator
        self.config = config or LevelConfig()
        library = generator.library
        self._footprint = getattr(library, "footprint", library.get_item_size)

    @property
    def room_bounds(self) -> SimpleBounds:
        sx, sy, sz = self.config.room_size
        return SimpleBounds.of((0.0, sy / 2, 0.0), (sx, sy, sz))

    def generate_level(
        self,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> Level:
        """Generate every room, connect neighbours, then sanitise each room."""
        if seed is not None:
            rng = np.random.default_rng(seed)
        elif rng is None:
            rng = np.random.default_rng()

        cfg = self.config
        log.info("Generating level: %d x %r rooms", cfg.rooms, cfg.theme)

        level = Level()
        bounds = self.room_bounds
        for i in range(cfg.rooms):
            blueprint = self.generator.generate_from_theme(bounds, cfg.theme, rng=rng)
            level.rooms.append(
                LevelRoom(
                    name=f"Room_{i}",
                    blueprint=blueprint,
                    world_offset=Vec3(i * bounds.size.x, 0.0, 0.0),
                )
            )

        for room_a, room_b in zip(level.rooms, level.rooms[1:]):
            self.connect(room_a, room_b)

        for room in level.rooms:
            remove_door_wall_overlaps(
                room.blueprint, self._footprint, cfg.door_wall_tolerance
            )

        log.info("Level complete: %d rooms", len(level.rooms))
        return level

    def connect(self, room_a: LevelRoom, room_b: LevelRoom) -> bool:
        """Open a doorway between room_a's east side and room_b's west side.

        Returns False (with a warning) when neither room has walls there.
        """
        cfg = self.config
        eps = cfg.plane_epsilon
        plane_a = self.room_bounds.size.x / 2
        plane_b = -plane_a

        walls_a = walls_on_plane(room_a.blueprint, plane_a, eps, Facing.EAST)
        walls_b = walls_on_plane(room_b.blueprint, plane_b, eps, Facing.WEST)
        if not walls_a and not walls_b:
            log.warning(
                "No walls on shared plane between %s and %s", room_a.name, room_b.name
            )
            return False

        # Keep the side that has walls, room A first
        if walls_a:
            keeper, other = room_a, room_b
            keep_plane, other_plane = plane_a, plane_b
            facing, other_facing = Facing.EAST, Facing.WEST
        else:
            keeper, other = room_b, room_a
            keep_plane, other_plane = plane_b, plane_a
            facing, other_facing = Facing.WEST, Facing.EAST

        removed_other = remove_all_walls_on_plane(
            other.blueprint, other_plane, eps, other_facing
        )
        removed_one = remove_single_wall_on_plane(
            keeper.blueprint, keep_plane, eps, facing
        )
        log.info(
            "Connecting %s <-> %s: kept %s, removed_one=%s, removed_other=%d",
            room_a.name,
            room_b.name,
            keeper.name,
            removed_one,
            removed_other,
        )

        door_pos = Vec3(keep_plane, 0.0, 0.0)
        door_size = self._footprint(cfg.door_item_id)
        keeper.blueprint.nodes.append(
            PropNode(
                instance_id=f"Door_{keeper.name}_{other.name}",
                item_id=cfg.door_item_id,
                position=door_pos,
                rotation=Vec3(0.0, 90.0, 0.0),
                container_kind=ContainerKind.DOOR,
                facing=facing,
                logical_bounds=SimpleBounds(door_pos, door_size),
            )
        )
        key_pos = Vec3(0.0, 1.0, 0.0)
        key_size = self._footprint(cfg.key_item_id)
        keeper.blueprint.nodes.append(
            PropNode(
                instance_id=f"Key_{keeper.name}_{other.name}",
                item_id=cfg.key_item_id,
                position=key_pos,
                container_kind=ContainerKind.DECOR,
                logical_bounds=SimpleBounds(key_pos, key_size),
            )
        )
        keeper.blueprint.regroup()
        other.blueprint.regroup()
        return True
