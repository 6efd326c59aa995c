"""Tests for level assembly: room layout, doorway cutting and wall cleanup."""

import logging

import pytest

from room_gen import RoomGenerator, default_catalogue
from room_gen.blueprint import GROUP_IDS, PropNode, RoomBlueprint
from room_gen.config import LevelConfig
from room_gen.level import (
    Level,
    LevelDirector,
    LevelRoom,
    remove_all_walls_on_plane,
    remove_single_wall_on_plane,
    walls_on_plane,
)
from room_gen.primitives import ContainerKind, Facing, Vec3

EPS = 0.5


def _wall(iid, x, z, facing=Facing.NONE):
    return PropNode(
        instance_id=iid,
        item_id="Wall",
        position=Vec3(x, 0.0, z),
        container_kind=ContainerKind.WALL,
        facing=facing,
    )


def _room(name, nodes=()):
    return LevelRoom(name, RoomBlueprint(list(nodes)), Vec3(0.0, 0.0, 0.0))


@pytest.fixture
def director():
    generator = RoomGenerator(default_catalogue())
    return LevelDirector(generator, LevelConfig.for_smoketest())


@pytest.fixture
def level(director):
    return director.generate_level(seed=42)


class TestPlaneHelpers:
    def test_walls_on_plane_filters_by_x_and_item(self):
        bp = RoomBlueprint(
            [
                _wall("w0", 3.1, 0.5),
                _wall("w1", 2.0, 0.5),
                PropNode("lamp", "Lamp", position=Vec3(3.0, 0.0, 0.0)),
            ]
        )
        assert [n.instance_id for n in walls_on_plane(bp, 3.0, EPS)] == ["w0"]

    def test_walls_on_plane_filters_by_facing(self):
        bp = RoomBlueprint(
            [
                _wall("east", 3.1, 0.5, Facing.EAST),
                _wall("north_corner", 2.5, 3.1, Facing.NORTH),
            ]
        )
        assert len(walls_on_plane(bp, 3.0, EPS)) == 2
        found = walls_on_plane(bp, 3.0, EPS, Facing.EAST)
        assert [n.instance_id for n in found] == ["east"]

    def test_remove_all(self):
        bp = RoomBlueprint([_wall("a", 3.1, 0), _wall("b", 3.1, 1), _wall("c", 0, 0)])
        assert remove_all_walls_on_plane(bp, 3.0, EPS) == 2
        assert [n.instance_id for n in bp.nodes] == ["c"]

    def test_remove_single_nearest_middle(self):
        bp = RoomBlueprint(
            [_wall("far", 3.1, 2.5), _wall("near", 3.1, -0.5), _wall("tie", 3.1, 0.5)]
        )
        assert remove_single_wall_on_plane(bp, 3.0, EPS)
        assert [n.instance_id for n in bp.nodes] == ["far", "tie"]

    def test_remove_single_without_walls(self):
        bp = RoomBlueprint([_wall("w", 0.0, 0.0)])
        assert not remove_single_wall_on_plane(bp, 3.0, EPS)
        assert len(bp) == 1


class TestLevelLayout:
    def test_room_count_and_offsets(self, level):
        assert [r.name for r in level.rooms] == ["Room_0", "Room_1"]
        assert level.rooms[0].world_offset == Vec3(0.0, 0.0, 0.0)
        assert level.rooms[1].world_offset == Vec3(6.0, 0.0, 0.0)

    def test_room_lookup(self, level):
        assert level.room("Room_1") is level.rooms[1]
        with pytest.raises(KeyError):
            level.room("Room_9")

    def test_room_bounds_floor_at_zero(self, director):
        bounds = director.room_bounds
        assert bounds.bottom == pytest.approx(0.0)
        assert bounds.center.x == 0.0 and bounds.center.z == 0.0

    def test_rooms_are_valid(self, level):
        for room in level.rooms:
            assert room.blueprint.find_problems() == []

    def test_seeded_levels_match(self, director):
        a = director.generate_level(seed=3)
        b = director.generate_level(seed=3)
        for ra, rb in zip(a.rooms, b.rooms):
            assert [n.instance_id for n in ra.blueprint.nodes] == [
                n.instance_id for n in rb.blueprint.nodes
            ]

    def test_single_room_level_has_no_door(self):
        director = LevelDirector(
            RoomGenerator(default_catalogue()), LevelConfig(rooms=1, theme="empty")
        )
        level = director.generate_level(seed=0)
        assert len(level.rooms) == 1
        assert level.rooms[0].blueprint.of_kind(ContainerKind.DOOR) == []


class TestConnection:
    def test_door_cut_into_first_room(self, level):
        room0 = level.room("Room_0").blueprint
        doors = room0.of_kind(ContainerKind.DOOR)
        assert len(doors) == 1
        door = doors[0]
        assert door.instance_id == "Door_Room_0_Room_1"
        assert door.item_id == "DoorSystem"
        assert door.position == Vec3(3.0, 0.0, 0.0)
        assert door.rotation.y == 90.0
        assert door.facing == Facing.EAST

    def test_key_placed_with_door(self, level):
        room0 = level.room("Room_0").blueprint
        keys = room0.with_item("Key")
        assert [k.instance_id for k in keys] == ["Key_Room_0_Room_1"]
        assert keys[0].position == Vec3(0.0, 1.0, 0.0)

    def test_one_segment_removed_from_keeper(self, level):
        room0 = level.room("Room_0").blueprint
        assert len(walls_on_plane(room0, 3.0, EPS, Facing.EAST)) == 5
        # West side untouched
        assert len(walls_on_plane(room0, -3.0, EPS, Facing.WEST)) == 6

    def test_other_side_cleared(self, level):
        room1 = level.room("Room_1").blueprint
        assert walls_on_plane(room1, -3.0, EPS, Facing.WEST) == []
        assert len(walls_on_plane(room1, 3.0, EPS, Facing.EAST)) == 6
        assert room1.of_kind(ContainerKind.DOOR) == []

    @pytest.mark.parametrize("name", ["Room_0", "Room_1"])
    @pytest.mark.parametrize("facing", [Facing.NORTH, Facing.SOUTH])
    def test_outer_walls_survive(self, level, name, facing):
        walls = level.room(name).blueprint.of_kind(ContainerKind.WALL)
        xs = sorted(n.position.x for n in walls if n.facing == facing)
        assert xs == pytest.approx([-2.5, -1.5, -0.5, 0.5, 1.5, 2.5])

    def test_group_tree_matches_nodes(self, level):
        for room in level.rooms:
            bp = room.blueprint
            flat_ids = {n.instance_id for n in bp.groups[0].flatten()} - GROUP_IDS
            assert flat_ids == {n.instance_id for n in bp.nodes}
        room0 = level.room("Room_0").blueprint
        furniture = room0.groups[0].children[2]
        top_level = [c.instance_id for c in furniture.children]
        assert "Door_Room_0_Room_1" in top_level
        assert "Key_Room_0_Room_1" in top_level

    def test_cleanup_orders_doors_before_walls(self, level):
        nodes = level.room("Room_0").blueprint.nodes
        door_idx = next(i for i, n in enumerate(nodes) if n.item_id == "DoorSystem")
        wall_idx = [i for i, n in enumerate(nodes) if n.item_id == "Wall"]
        assert all(i > door_idx for i in wall_idx)

    def test_keeper_falls_back_to_second_room(self, director):
        generator = director.generator
        bounds = director.room_bounds
        room_a = LevelRoom(
            "A",
            generator.generate_from_theme(bounds, "empty", skip_east=True, seed=1),
            Vec3(0.0, 0.0, 0.0),
        )
        room_b = LevelRoom(
            "B",
            generator.generate_from_theme(bounds, "empty", seed=2),
            Vec3(6.0, 0.0, 0.0),
        )

        assert director.connect(room_a, room_b)

        doors = room_b.blueprint.of_kind(ContainerKind.DOOR)
        assert [d.instance_id for d in doors] == ["Door_B_A"]
        assert doors[0].facing == Facing.WEST
        assert doors[0].position == Vec3(-3.0, 0.0, 0.0)
        assert len(walls_on_plane(room_b.blueprint, -3.0, EPS, Facing.WEST)) == 5
        # Room A skipped its east side; its north/south corners are untouched
        assert len(room_a.blueprint.of_kind(ContainerKind.WALL)) == 18
        assert room_a.blueprint.of_kind(ContainerKind.DOOR) == []

    def test_no_walls_on_either_side(self, director, caplog):
        room_a, room_b = _room("A"), _room("B")
        with caplog.at_level(logging.WARNING):
            assert not director.connect(room_a, room_b)
        assert any(r.levelno == logging.WARNING for r in caplog.records)
        assert len(room_a.blueprint) == 0
        assert len(room_b.blueprint) == 0


def test_empty_level_object():
    assert Level().rooms == []
