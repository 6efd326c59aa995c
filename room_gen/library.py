"""Item catalogue — the lookup service the generator consumes.

The generator only talks to the ``ItemLibrary`` protocol. ``ItemCatalogue``
is the in-memory implementation: a dict of item definitions plus a dict of
room themes.

Usage:
    catalogue = ItemCatalogue(
        items=[
            ItemDefinition("Table", size=(1.2, 1.0, 1.2)),
            ItemDefinition("Cup", size=(0.3, 0.3, 0.3), tag="tableware"),
        ],
        themes=[RoomTheme("dining", items=("Table",))],
    )
    catalogue.get_item_size("Table")      # Vec3(1.2, 1.0, 1.2)
    catalogue.get_items_in_theme("dining")  # ["Table"]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from room_gen.primitives import ONE, ZERO, PlacementType, Vec3


class ConfigurationError(ValueError):
    """A required collaborator or catalogue entry is missing or malformed."""


@dataclass(frozen=True)
class GenerationRule:
    """Declarative rule: which children an item spawns and how.

    Attributes:
        target: Item id, or a tag when use_tag is True
        placement: FIXED, SCATTER or STACK
        use_tag: Resolve target through a random tag lookup
        use_density: Count = clamp(area * density, min_count, max_count)
        density: Children per square meter of the parent's bounds
        min_count: Lower count bound (inclusive)
        max_count: Upper count bound (inclusive)
        probability: Chance the rule fires at all, in [0, 1]
        offset: Local offset for FIXED children
        radius: Half-width of the square SCATTER domain
    """

    target: str
    placement: PlacementType = PlacementType.FIXED
    use_tag: bool = False
    use_density: bool = False
    density: float = 0.0
    min_count: int = 1
    max_count: int = 1
    probability: float = 1.0
    offset: Vec3 = ZERO
    radius: float = 0.5

    def __post_init__(self):
        if self.min_count < 0 or self.max_count < self.min_count:
            raise ConfigurationError(
                f"Rule for {self.target!r}: bad count range "
                f"[{self.min_count}, {self.max_count}]"
            )
        if not 0.0 <= self.probability <= 1.0:
            raise ConfigurationError(
                f"Rule for {self.target!r}: probability {self.probability} "
                f"outside [0, 1]"
            )
        # Accept plain tuples for offset
        object.__setattr__(self, "offset", Vec3(*map(float, self.offset)))


class ItemLibrary(Protocol):
    """Read-only item lookup consumed by the generator."""

    def get_min_bounds(self, item_id: str) -> Vec3: ...

    def get_item_size(self, item_id: str) -> Vec3: ...

    def get_rules(self, item_id: str) -> list[GenerationRule]: ...

    def get_random_item_id_by_tag(
        self, tag: str, rng: np.random.Generator | None = None
    ) -> str | None: ...

    def get_items_in_theme(self, theme_id: str) -> list[str]: ...


@dataclass(frozen=True)
class ItemDefinition:
    """One catalogue entry.

    Attributes:
        item_id: Unique id referenced by nodes and rules
        size: Logical size (x, y, z) in meters
        min_bounds: Smallest container footprint the item accepts
        tag: Category tag for tag-based rule targets
        rules: Child generation rules
    """

    item_id: str
    size: Vec3 = ONE
    min_bounds: Vec3 = ZERO
    tag: str = ""
    rules: tuple[GenerationRule, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "size", Vec3(*map(float, self.size)))
        object.__setattr__(self, "min_bounds", Vec3(*map(float, self.min_bounds)))
        object.__setattr__(self, "rules", tuple(self.rules))


@dataclass(frozen=True)
class RoomTheme:
    """A named list of items to place in a room."""

    theme_id: str
    items: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))


@dataclass
class ItemCatalogue:
    """In-memory ItemLibrary backed by item definitions and themes.

    Unknown items fall back to size (1, 1, 1), zero min bounds and no
    rules, so a half-filled catalogue still generates something.
    """

    items: Iterable[ItemDefinition] = ()
    themes: Iterable[RoomTheme] = ()
    _items: dict[str, ItemDefinition] = field(init=False, repr=False)
    _themes: dict[str, RoomTheme] = field(init=False, repr=False)

    def __post_init__(self):
        self._items = {}
        for item in self.items:
            if item.item_id in self._items:
                raise ConfigurationError(f"Duplicate item id {item.item_id!r}")
            self._items[item.item_id] = item
        self._themes = {}
        for theme in self.themes:
            if theme.theme_id in self._themes:
                raise ConfigurationError(f"Duplicate theme id {theme.theme_id!r}")
            self._themes[theme.theme_id] = theme
        self.items = tuple(self._items.values())
        self.themes = tuple(self._themes.values())

    @classmethod
    def from_dict(cls, data: Mapping) -> ItemCatalogue:
        """Build from plain data.

        Expected shape::

            {
                "items": {
                    "Table": {"size": [1.2, 1, 1.2], "tag": "furniture",
                              "rules": [{"target": "Cup", "placement": "fixed"}]},
                },
                "themes": {"dining": ["Table"]},
            }
        """
        items = []
        for item_id, fields in data.get("items", {}).items():
            fields = dict(fields)
            rules = []
            for r in fields.pop("rules", ()):
                r = dict(r)
                if "placement" in r:
                    r["placement"] = PlacementType(r["placement"])
                if "offset" in r:
                    r["offset"] = Vec3(*r["offset"])
                rules.append(GenerationRule(**r))
            items.append(ItemDefinition(item_id, rules=tuple(rules), **fields))
        themes = [
            RoomTheme(theme_id, tuple(item_ids))
            for theme_id, item_ids in data.get("themes", {}).items()
        ]
        return cls(items, themes)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._items

    def get(self, item_id: str) -> ItemDefinition | None:
        return self._items.get(item_id)

    def list_items(self) -> list[str]:
        return sorted(self._items)

    def list_themes(self) -> list[str]:
        return sorted(self._themes)

    # -------------------------------------------------------------------
    # ItemLibrary
    # -------------------------------------------------------------------

    def get_min_bounds(self, item_id: str) -> Vec3:
        item = self._items.get(item_id)
        return item.min_bounds if item else ZERO

    def get_item_size(self, item_id: str) -> Vec3:
        item = self._items.get(item_id)
        return item.size if item else ONE

    def get_rules(self, item_id: str) -> list[GenerationRule]:
        item = self._items.get(item_id)
        return list(item.rules) if item else []

    def get_random_item_id_by_tag(
        self, tag: str, rng: np.random.Generator | None = None
    ) -> str | None:
        """Uniform pick among items carrying *tag*, or None."""
        candidates = [i.item_id for i in self._items.values() if i.tag == tag]
        if not candidates:
            return None
        if rng is None:
            rng = np.random.default_rng()
        return candidates[int(rng.integers(len(candidates)))]

    def get_items_in_theme(self, theme_id: str) -> list[str]:
        theme = self._themes.get(theme_id)
        return list(theme.items) if theme else []

    def footprint(self, item_id: str) -> Vec3:
        """Size lookup for the post-processor; unknown items have no footprint."""
        item = self._items.get(item_id)
        return item.size if item else ZERO
