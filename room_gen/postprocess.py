"""Blueprint sanitation passes run after generation."""

from __future__ import annotations

import logging
from collections.abc import Callable

from room_gen.blueprint import PropNode, RoomBlueprint
from room_gen.primitives import ZERO, Vec3

log = logging.getLogger(__name__)

FootprintLookup = Callable[[str], Vec3]


def _no_footprint(_item_id: str) -> Vec3:
    return ZERO


def is_door(node: PropNode) -> bool:
    return node.item_id is not None and "door" in node.item_id.lower()


def is_wall(node: PropNode) -> bool:
    return node.item_id is not None and "Wall" in node.item_id


def remove_door_wall_overlaps(
    blueprint: RoomBlueprint,
    footprint_lookup: FootprintLookup | None = None,
    tolerance: float = 0.05,
) -> int:
    """Drop walls that sit inside a door's footprint, then dedupe walls.

    Nodes are bucketed by item id: doors (case-insensitive "door"), walls
    (case-sensitive "Wall"), and everything else. A wall is dropped when
    both its X and Z lie within half the door's X/Z footprint plus
    *tolerance* of some door. The door footprint is taken unrotated.
    Remaining walls are deduplicated on (item_id, position rounded to
    3 decimals), first occurrence wins.

    The node list is rebuilt in place as [others, doors, walls]; order
    within each bucket is preserved.

    A blueprint that arrives with only a group tree is flattened first;
    the tree is rebuilt from the cleaned node list afterwards.

    Returns the number of wall nodes removed.
    """
    blueprint.ensure_nodes()
    if footprint_lookup is None:
        footprint_lookup = _no_footprint

    doors: list[PropNode] = []
    walls: list[PropNode] = []
    others: list[PropNode] = []
    for n in blueprint.nodes:
        if is_door(n):
            doors.append(n)
        elif is_wall(n):
            walls.append(n)
        else:
            others.append(n)

    door_extents = []
    for d in doors:
        size = footprint_lookup(d.item_id) or ZERO
        door_extents.append(
            (d.position, size.x / 2 + tolerance, size.z / 2 + tolerance)
        )

    kept: list[PropNode] = []
    for w in walls:
        overlaps = any(
            abs(w.position.x - pos.x) <= half_x and abs(w.position.z - pos.z) <= half_z
            for pos, half_x, half_z in door_extents
        )
        if not overlaps:
            kept.append(w)

    seen: set[tuple] = set()
    deduped: list[PropNode] = []
    for w in kept:
        key = (w.item_id, *(round(v, 3) for v in w.position))
        if key in seen:
            continue
        seen.add(key)
        deduped.append(w)

    removed = len(walls) - len(deduped)
    blueprint.nodes = [*others, *doors, *deduped]
    blueprint.regroup()
    if doors or removed:
        log.info(
            "Door/wall cleanup: doors=%d, walls %d -> %d (removed %d)",
            len(doors),
            len(walls),
            len(deduped),
            removed,
        )
    return removed
