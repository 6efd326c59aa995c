"""Blueprint — the scene graph handed to the host after generation.

A blueprint is an ordered list of PropNodes. Each node names a catalogue
item, where it sits, and (optionally) which other node it hangs off.
Nodes are produced once per generation pass and never mutated; the only
later edits drop wall nodes (post-processing, level connection) or append
door and key nodes.

An auxiliary group tree (Region_Room -> Group_Floor / Group_Wall /
Group_Furniture) may ride along for diagnostics. It mirrors the node list
but never rewrites its parent links; edits to the list call regroup().
"""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass, field

import numpy as np

from room_gen.primitives import (
    WALL_ROTATIONS,
    ZERO,
    ContainerKind,
    Facing,
    SimpleBounds,
    Vec3,
)

REGION_ID = "Region_Room"
FLOOR_GROUP_ID = "Group_Floor"
WALL_GROUP_ID = "Group_Wall"
FURNITURE_GROUP_ID = "Group_Furniture"
GROUP_IDS = frozenset((REGION_ID, FLOOR_GROUP_ID, WALL_GROUP_ID, FURNITURE_GROUP_ID))


def new_instance_id(item_id: str, rng: np.random.Generator) -> str:
    """Unique instance id drawn from *rng* so seeded runs reproduce ids."""
    return f"{item_id}_{uuid.UUID(bytes=rng.bytes(16), version=4).hex}"


@dataclass(frozen=True)
class PropNode:
    """One placed item.

    Attributes:
        instance_id: Unique within the blueprint
        item_id: Catalogue reference
        parent_id: instance_id of another node in the same blueprint, or None
        position: World position, or a local offset from the parent for
            rule-placed children (see is_local_offset)
        rotation: Euler degrees
        container_kind: Role tag for downstream systems
        facing: Cardinal tag for oriented primitives
        logical_bounds: Spatial allocation this node was resolved against.
            Zero-size for local-offset children.
    """

    instance_id: str
    item_id: str
    parent_id: str | None = None
    position: Vec3 = ZERO
    rotation: Vec3 = ZERO
    container_kind: ContainerKind = ContainerKind.UNKNOWN
    facing: Facing = Facing.NONE
    logical_bounds: SimpleBounds = SimpleBounds()

    @property
    def is_local_offset(self) -> bool:
        """True when position is relative to the parent, not a real allocation."""
        return self.parent_id is not None and self.logical_bounds.is_empty


@dataclass
class ContainerNode:
    """A node of the auxiliary group tree."""

    instance_id: str
    kind: ContainerKind = ContainerKind.REGION
    bounds: SimpleBounds = SimpleBounds()
    rotation: Vec3 = ZERO
    facing: Facing = Facing.NONE
    parent_id: str | None = None
    item_id: str | None = None
    children: list[ContainerNode] = field(default_factory=list)

    @classmethod
    def from_prop(cls, node: PropNode, parent_id: str | None) -> ContainerNode:
        return cls(
            instance_id=node.instance_id,
            kind=node.container_kind,
            bounds=node.logical_bounds,
            rotation=node.rotation,
            facing=node.facing,
            parent_id=parent_id,
            item_id=node.item_id,
        )

    def flatten(self) -> list[PropNode]:
        """Depth-first PropNodes for this subtree, parents before children.

        Position comes from the node's bounds center, so local-offset
        children flatten back to their offset.
        """
        result: list[PropNode] = []
        stack: list[ContainerNode] = [self]
        while stack:
            cur = stack.pop()
            result.append(
                PropNode(
                    instance_id=cur.instance_id,
                    item_id=cur.item_id or "",
                    parent_id=cur.parent_id,
                    position=cur.bounds.center,
                    rotation=cur.rotation,
                    container_kind=cur.kind,
                    facing=cur.facing,
                    logical_bounds=cur.bounds,
                )
            )
            stack.extend(reversed(cur.children))
        return result


@dataclass
class RoomBlueprint:
    """Generated scene graph: an ordered node list plus optional group tree."""

    nodes: list[PropNode] = field(default_factory=list)
    groups: list[ContainerNode] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def node_by_id(self) -> dict[str, PropNode]:
        return {n.instance_id: n for n in self.nodes}

    def of_kind(self, kind: ContainerKind) -> list[PropNode]:
        return [n for n in self.nodes if n.container_kind == kind]

    def with_item(self, item_id: str) -> list[PropNode]:
        return [n for n in self.nodes if n.item_id == item_id]

    def children_of(self, instance_id: str) -> list[PropNode]:
        return [n for n in self.nodes if n.parent_id == instance_id]

    def ensure_nodes(self) -> None:
        """Rebuild the node list from the group tree if it arrived empty."""
        if self.nodes or not self.groups:
            return
        self.nodes = self.groups[0].flatten()

    def regroup(self) -> None:
        """Rebuild the group tree from the current node list.

        No-op for blueprints generated without a tree. Nodes are bucketed
        by kind: floor, wall, and everything else (doors and keys included)
        under Group_Furniture.
        """
        if not self.groups:
            return
        floor_nodes: list[PropNode] = []
        wall_nodes: list[PropNode] = []
        other_nodes: list[PropNode] = []
        for n in self.nodes:
            if n.instance_id in GROUP_IDS:
                continue
            if n.container_kind == ContainerKind.FLOOR:
                floor_nodes.append(n)
            elif n.container_kind == ContainerKind.WALL:
                wall_nodes.append(n)
            else:
                other_nodes.append(n)
        self.groups[0] = build_group_tree(
            self.groups[0].bounds, floor_nodes, wall_nodes, other_nodes
        )

    def find_problems(self) -> list[str]:
        """Check blueprint invariants. Returns human-readable violations.

        Checks:
            - instance_id unique
            - every parent_id names an existing node
            - parent links never form a cycle
            - wall rotation.y matches its facing
        """
        problems: list[str] = []

        counts = Counter(n.instance_id for n in self.nodes)
        for iid, c in counts.items():
            if c > 1:
                problems.append(f"duplicate instance_id {iid!r} ({c}x)")

        by_id = self.node_by_id()
        for n in self.nodes:
            if n.parent_id is not None and n.parent_id not in by_id:
                problems.append(
                    f"{n.instance_id!r} has missing parent {n.parent_id!r}"
                )

        # Walk each chain once; nodes already proven acyclic are skipped
        acyclic: set[str] = set()
        for n in self.nodes:
            seen: set[str] = set()
            cur = n.parent_id
            while cur is not None and cur in by_id and cur not in acyclic:
                if cur in seen:
                    problems.append(f"parent cycle reached from {n.instance_id!r}")
                    break
                seen.add(cur)
                cur = by_id[cur].parent_id
            else:
                acyclic.update(seen)

        for n in self.of_kind(ContainerKind.WALL):
            expected = WALL_ROTATIONS.get(n.facing)
            if expected is not None and n.rotation.y != expected:
                problems.append(
                    f"wall {n.instance_id!r} facing {n.facing.name} has "
                    f"rotation.y={n.rotation.y}, expected {expected}"
                )

        return problems


def build_group_tree(
    bounds: SimpleBounds,
    floor_nodes: list[PropNode],
    wall_nodes: list[PropNode],
    furniture_nodes: list[PropNode],
) -> ContainerNode:
    """Region_Room -> Group_Floor / Group_Wall / Group_Furniture.

    Furniture whose parent is also furniture nests under that parent;
    everything else hangs directly off its group.
    """
    region = ContainerNode(REGION_ID, ContainerKind.REGION, bounds)

    def group(group_id: str, nodes: list[PropNode]) -> ContainerNode:
        g = ContainerNode(group_id, ContainerKind.REGION, bounds, parent_id=REGION_ID)
        by_id: dict[str, ContainerNode] = {}
        for n in nodes:
            by_id[n.instance_id] = ContainerNode.from_prop(n, parent_id=group_id)
        for n in nodes:
            child = by_id[n.instance_id]
            parent = by_id.get(n.parent_id) if n.parent_id else None
            if parent is not None:
                child.parent_id = parent.instance_id
                parent.children.append(child)
            else:
                g.children.append(child)
        return g

    region.children = [
        group(FLOOR_GROUP_ID, floor_nodes),
        group(WALL_GROUP_ID, wall_nodes),
        group(FURNITURE_GROUP_ID, furniture_nodes),
    ]
    return region


# ---------------------------------------------------------------------------
# Description
# ---------------------------------------------------------------------------

_STRUCTURAL = {ContainerKind.FLOOR, ContainerKind.WALL, ContainerKind.CEILING}


def describe_node(node: PropNode) -> str:
    """One-line description of a node."""
    p = node.position
    parent = f" <- {node.parent_id}" if node.parent_id else ""
    local = " (local)" if node.is_local_offset else ""
    return (
        f"{node.item_id} at ({p.x:+.2f}, {p.y:+.2f}, {p.z:+.2f}){local} "
        f"rot {node.rotation.y:.0f}°{parent}"
    )


def describe_blueprint(blueprint: RoomBlueprint, seed: int | None = None) -> str:
    """Multi-line textual description of a blueprint.

    Structural nodes (floor, walls) are summarised as counts; everything
    else gets its own line.

    Example output:
        Blueprint (seed=42)  104 nodes  [floor=100, unknown=4]
          [0] Table at (+0.00, +1.50, +0.00) rot 0°
          [1] Cup at (+0.00, +0.00, +0.00) (local) rot 0° <- Table_5f1c...
    """
    kinds = Counter(n.container_kind.value for n in blueprint.nodes)
    kind_str = ", ".join(f"{k}={v}" for k, v in sorted(kinds.items()))
    seed_str = f" (seed={seed})" if seed is not None else ""
    lines = [f"Blueprint{seed_str}  {len(blueprint.nodes)} nodes  [{kind_str}]"]

    i = 0
    for node in blueprint.nodes:
        if node.container_kind in _STRUCTURAL:
            continue
        lines.append(f"  [{i}] {describe_node(node)}")
        i += 1
    return "\n".join(lines)
