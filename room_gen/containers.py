"""Containers — composable policies that carve a volume and emit nodes.

Every container resolves ``(bounds, parent_id, rng)`` into a flat list of
PropNodes. Containers are transient: they are built for one generation
pass and hold no references to what they emitted.

The family is closed:
    - SplitContainer:     halve the bounds, resolve two children
    - ItemContainer:      one catalogue item plus its rule-driven children
    - PrimitiveContainer: one structural leaf (wall, corner, floor, ...)
    - RegionContainer:    optional grouping node over a list of children

Usage:
    layout = SplitContainer(
        ItemContainer("Table", catalogue),
        ItemContainer("Bookshelf", catalogue),
        along_x=True,
    )
    nodes = layout.resolve(room_bounds, None, rng)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from room_gen.blueprint import PropNode, new_instance_id
from room_gen.library import ConfigurationError, GenerationRule, ItemLibrary
from room_gen.primitives import (
    WALL_ROTATIONS,
    ZERO,
    ContainerKind,
    Facing,
    PlacementType,
    SimpleBounds,
    Vec3,
)
from room_gen.strategies import DEFAULT_MAX_ATTEMPTS, RandomScatterStrategy

log = logging.getLogger(__name__)

# Scatter spacing = this factor * target item width
SCATTER_SPACING_FACTOR = 1.5


class Container(Protocol):
    def resolve(
        self,
        bounds: SimpleBounds,
        parent_id: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[PropNode]: ...


def _rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


# ---------------------------------------------------------------------------
# Split
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SplitContainer:
    """Halve the bounds and resolve one child in each half.

    along_x=True is a vertical cut (halves side by side on X);
    along_x=False is a horizontal cut (halves on Z). Both children receive
    the same parent_id; the split itself never emits a node.
    """

    child_a: Container
    child_b: Container
    along_x: bool = True

    def resolve(
        self,
        bounds: SimpleBounds,
        parent_id: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[PropNode]:
        rng = _rng(rng)
        bounds_a, bounds_b = bounds.halves(self.along_x)
        return [
            *self.child_a.resolve(bounds_a, parent_id, rng),
            *self.child_b.resolve(bounds_b, parent_id, rng),
        ]


# ---------------------------------------------------------------------------
# Item
# ---------------------------------------------------------------------------


class ItemContainer:
    """A catalogue item centered in its bounds, plus rule-driven children.

    Resolution:
        1. Prune: if the bounds are smaller than the item's min footprint
           on X or Z, emit nothing.
        2. Emit the item itself at the bounds center.
        3. For each rule: roll its probability, compute a count, resolve the
           target (directly or by tag), then dispatch on placement type.
           FIXED emits one child at the rule offset, SCATTER runs a
           RandomScatterStrategy, STACK does nothing.

    Children are parented to the item and positioned in its local frame.
    """

    def __init__(
        self,
        item_id: str,
        library: ItemLibrary,
        kind: ContainerKind = ContainerKind.UNKNOWN,
        scatter_attempts: int = DEFAULT_MAX_ATTEMPTS,
        spacing_factor: float = SCATTER_SPACING_FACTOR,
    ):
        if library is None:
            raise ConfigurationError(f"ItemContainer({item_id!r}) requires a library")
        self.item_id = item_id
        self.library = library
        self.kind = kind
        self.scatter_attempts = scatter_attempts
        self.spacing_factor = spacing_factor

    def __repr__(self) -> str:
        return f"ItemContainer({self.item_id!r})"

    def resolve(
        self,
        bounds: SimpleBounds,
        parent_id: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[PropNode]:
        rng = _rng(rng)
        min_req = self.library.get_min_bounds(self.item_id)
        if not bounds.fits(min_req):
            log.debug(
                "Pruned %r: bounds %.2fx%.2f below min %.2fx%.2f",
                self.item_id,
                bounds.size.x,
                bounds.size.z,
                min_req.x,
                min_req.z,
            )
            return []

        self_id = new_instance_id(self.item_id, rng)
        nodes = [
            PropNode(
                instance_id=self_id,
                item_id=self.item_id,
                parent_id=parent_id,
                position=bounds.center,
                container_kind=self.kind,
                logical_bounds=bounds,
            )
        ]

        for rule in self.library.get_rules(self.item_id):
            nodes.extend(self._apply_rule(rule, bounds, self_id, rng))
        return nodes

    def _apply_rule(
        self,
        rule: GenerationRule,
        bounds: SimpleBounds,
        self_id: str,
        rng: np.random.Generator,
    ) -> list[PropNode]:
        if rng.random() > rule.probability:
            return []

        if rule.use_density:
            count = int(bounds.floor_area * rule.density)
            count = int(np.clip(count, rule.min_count, rule.max_count))
        else:
            count = int(rng.integers(rule.min_count, rule.max_count + 1))
        if count <= 0:
            return []

        target = rule.target
        if rule.use_tag:
            target = self.library.get_random_item_id_by_tag(rule.target, rng)
            if not target:
                log.debug(
                    "Rule tag %r on %r resolved to nothing", rule.target, self.item_id
                )
                return []

        if rule.placement == PlacementType.SCATTER:
            child_size = self.library.get_item_size(target)
            strategy = RandomScatterStrategy(
                radius=rule.radius,
                min_spacing=child_size.x * self.spacing_factor,
                rng=rng,
                max_attempts=self.scatter_attempts,
            )
            return strategy.generate(self_id, target, count)

        if rule.placement == PlacementType.FIXED:
            # Local offset from self: zero-size bounds mark it as such
            return [
                PropNode(
                    instance_id=new_instance_id(target, rng),
                    item_id=target,
                    parent_id=self_id,
                    position=rule.offset,
                    logical_bounds=SimpleBounds(rule.offset, ZERO),
                )
            ]

        # STACK is declared but has no placement behavior
        return []


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrimitiveContainer:
    """A one-node structural leaf placed at the bounds center."""

    item_id: str
    kind: ContainerKind
    facing: Facing = Facing.NONE
    rotation: Vec3 = ZERO

    def resolve(
        self,
        bounds: SimpleBounds,
        parent_id: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[PropNode]:
        rng = _rng(rng)
        return [
            PropNode(
                instance_id=new_instance_id(self.item_id, rng),
                item_id=self.item_id,
                parent_id=parent_id,
                position=bounds.center,
                rotation=self.rotation,
                container_kind=self.kind,
                facing=self.facing,
                logical_bounds=bounds,
            )
        ]


def _y_rot(facing: Facing) -> Vec3:
    return Vec3(0.0, WALL_ROTATIONS.get(facing, 0.0), 0.0)


def wall(item_id: str, facing: Facing) -> PrimitiveContainer:
    return PrimitiveContainer(item_id, ContainerKind.WALL, facing, _y_rot(facing))


def corner(item_id: str, facing: Facing = Facing.NONE) -> PrimitiveContainer:
    return PrimitiveContainer(item_id, ContainerKind.CORNER, facing, _y_rot(facing))


def floor(item_id: str) -> PrimitiveContainer:
    return PrimitiveContainer(item_id, ContainerKind.FLOOR, Facing.UP)


def ceiling(item_id: str) -> PrimitiveContainer:
    return PrimitiveContainer(item_id, ContainerKind.CEILING, Facing.DOWN)


def door(item_id: str, facing: Facing) -> PrimitiveContainer:
    return PrimitiveContainer(item_id, ContainerKind.DOOR, facing, _y_rot(facing))


def window(item_id: str, facing: Facing) -> PrimitiveContainer:
    return PrimitiveContainer(item_id, ContainerKind.WINDOW, facing, _y_rot(facing))


# ---------------------------------------------------------------------------
# Region
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegionContainer:
    """Resolve every child against the same bounds, optionally grouped.

    With emit_self, one REGION node is emitted and becomes the parent of
    every child; otherwise parent_id passes straight through.
    """

    children: Sequence[Container] = ()
    emit_self: bool = True
    item_id: str = "Region"
    facing: Facing = Facing.NONE

    def resolve(
        self,
        bounds: SimpleBounds,
        parent_id: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[PropNode]:
        rng = _rng(rng)
        nodes: list[PropNode] = []
        child_parent = parent_id
        if self.emit_self:
            region_id = new_instance_id(self.item_id, rng)
            nodes.append(
                PropNode(
                    instance_id=region_id,
                    item_id=self.item_id,
                    parent_id=parent_id,
                    position=bounds.center,
                    container_kind=ContainerKind.REGION,
                    facing=self.facing,
                    logical_bounds=bounds,
                )
            )
            child_parent = region_id

        for child in self.children:
            nodes.extend(child.resolve(bounds, child_parent, rng))
        return nodes


# ---------------------------------------------------------------------------
# Auto layout
# ---------------------------------------------------------------------------


def build_auto_split_layout(
    item_ids: Sequence[str],
    library: ItemLibrary,
    rng: np.random.Generator | None = None,
    scatter_attempts: int = DEFAULT_MAX_ATTEMPTS,
    spacing_factor: float = SCATTER_SPACING_FACTOR,
) -> Container | None:
    """Binary split tree over *item_ids*.

    One item becomes an ItemContainer; longer lists split at the midpoint
    into two subtrees joined by a SplitContainer with a random axis. Depth
    is ceil(log2(n)). Returns None for an empty list.
    """
    if not item_ids:
        return None
    rng = _rng(rng)

    def build(items: Sequence[str]) -> Container:
        if len(items) == 1:
            return ItemContainer(
                items[0],
                library,
                scatter_attempts=scatter_attempts,
                spacing_factor=spacing_factor,
            )
        mid = len(items) // 2
        left = build(items[:mid])
        right = build(items[mid:])
        return SplitContainer(left, right, along_x=bool(rng.integers(2) == 0))

    return build(list(item_ids))
