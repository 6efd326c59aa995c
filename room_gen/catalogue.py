"""Built-in demo catalogue — a small furniture set with room themes.

Sizes are logical (x, y, z) extents in meters. Rules show each placement
type: desks pin a monitor and chair at fixed offsets, tables scatter
tableware picked by tag, bookshelves declare a stack of books (no-op).

Usage:
    catalogue = default_catalogue()
    catalogue.get_items_in_theme("office")
"""

from __future__ import annotations

from room_gen.library import GenerationRule, ItemCatalogue, ItemDefinition, RoomTheme
from room_gen.primitives import PlacementType, Vec3

# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

STRUCTURE = (
    ItemDefinition("FloorTile", size=(1.0, 0.2, 1.0)),
    ItemDefinition("Wall", size=(1.0, 3.0, 0.2)),
    ItemDefinition("DoorSystem", size=(1.6, 2.5, 0.3), tag="door"),
    ItemDefinition("Key", size=(0.2, 0.05, 0.1), tag="pickup"),
)

SMALL_ITEMS = (
    ItemDefinition("Cup", size=(0.1, 0.12, 0.1), tag="tableware"),
    ItemDefinition("Plate", size=(0.25, 0.03, 0.25), tag="tableware"),
    ItemDefinition("Vase", size=(0.2, 0.4, 0.2), tag="decor"),
    ItemDefinition("Candle", size=(0.08, 0.2, 0.08), tag="decor"),
    ItemDefinition("Book", size=(0.2, 0.3, 0.05), tag="book"),
    ItemDefinition("Monitor", size=(0.6, 0.4, 0.2)),
    ItemDefinition("Lamp", size=(0.3, 1.6, 0.3), tag="light"),
    ItemDefinition("Plant", size=(0.4, 1.0, 0.4), tag="decor"),
)

FURNITURE = (
    ItemDefinition(
        "Couch",
        size=(2.0, 0.9, 0.9),
        min_bounds=(2.2, 0.0, 1.0),
        rules=(
            GenerationRule(
                "light",
                PlacementType.FIXED,
                use_tag=True,
                probability=0.6,
                offset=Vec3(1.3, 0.0, 0.0),
            ),
        ),
    ),
    ItemDefinition(
        "CoffeeTable",
        size=(1.0, 0.45, 0.6),
        min_bounds=(1.2, 0.0, 0.8),
        rules=(
            GenerationRule(
                "tableware",
                PlacementType.SCATTER,
                use_tag=True,
                min_count=1,
                max_count=3,
                radius=0.3,
            ),
        ),
    ),
    ItemDefinition(
        "DiningTable",
        size=(1.8, 0.75, 0.9),
        min_bounds=(2.0, 0.0, 1.5),
        rules=(
            GenerationRule(
                "Plate",
                PlacementType.SCATTER,
                use_density=True,
                density=0.25,
                min_count=2,
                max_count=6,
                radius=0.7,
            ),
            GenerationRule(
                "decor",
                PlacementType.FIXED,
                use_tag=True,
                probability=0.5,
                offset=Vec3(0.0, 0.75, 0.0),
            ),
        ),
    ),
    ItemDefinition(
        "Desk",
        size=(1.4, 0.75, 0.7),
        min_bounds=(1.5, 0.0, 1.6),
        rules=(
            GenerationRule("Monitor", offset=Vec3(0.0, 0.75, 0.15)),
            GenerationRule("Chair", offset=Vec3(0.0, 0.0, -0.8)),
        ),
    ),
    ItemDefinition("Chair", size=(0.5, 0.9, 0.5), min_bounds=(0.6, 0.0, 0.6)),
    ItemDefinition(
        "Bookshelf",
        size=(1.0, 2.0, 0.35),
        min_bounds=(1.1, 0.0, 0.5),
        rules=(
            GenerationRule("book", PlacementType.STACK, use_tag=True, max_count=8),
        ),
    ),
    ItemDefinition("TVStand", size=(1.5, 0.5, 0.45), min_bounds=(1.6, 0.0, 0.6)),
    ItemDefinition(
        "Rug",
        size=(2.0, 0.02, 1.4),
        min_bounds=(2.0, 0.0, 1.4),
        rules=(
            GenerationRule(
                "decor",
                PlacementType.SCATTER,
                use_tag=True,
                min_count=0,
                max_count=2,
                probability=0.5,
                radius=0.8,
            ),
        ),
    ),
    ItemDefinition("Bed", size=(1.6, 0.6, 2.1), min_bounds=(1.8, 0.0, 2.3)),
    ItemDefinition(
        "Nightstand",
        size=(0.5, 0.55, 0.4),
        min_bounds=(0.6, 0.0, 0.5),
        rules=(
            GenerationRule(
                "light", use_tag=True, probability=0.8, offset=Vec3(0.0, 0.55, 0.0)
            ),
        ),
    ),
    ItemDefinition("Fridge", size=(0.8, 1.9, 0.7), min_bounds=(0.9, 0.0, 0.9)),
    ItemDefinition(
        "KitchenCounter",
        size=(2.0, 0.9, 0.6),
        min_bounds=(2.0, 0.0, 0.8),
        rules=(
            GenerationRule(
                "tableware",
                PlacementType.SCATTER,
                use_tag=True,
                min_count=0,
                max_count=3,
                radius=0.5,
            ),
        ),
    ),
)

# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------

THEMES = (
    RoomTheme("living_room", ("Couch", "CoffeeTable", "TVStand", "Rug", "Plant")),
    RoomTheme("office", ("Desk", "Bookshelf", "Plant", "Lamp")),
    RoomTheme("dining_room", ("DiningTable", "Chair", "Chair", "Bookshelf")),
    RoomTheme("kitchen", ("KitchenCounter", "Fridge", "DiningTable")),
    RoomTheme("bedroom", ("Bed", "Nightstand", "Nightstand", "Rug", "Lamp")),
    RoomTheme("empty", ()),
)


def default_catalogue() -> ItemCatalogue:
    """A fresh catalogue with every built-in item and theme."""
    return ItemCatalogue(items=(*STRUCTURE, *SMALL_ITEMS, *FURNITURE), themes=THEMES)


def list_themes() -> list[str]:
    return sorted(t.theme_id for t in THEMES)
