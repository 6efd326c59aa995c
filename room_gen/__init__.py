"""Procedural room blueprint generation.

Turns a declarative item catalogue and a room theme into a blueprint: a
flat list of PropNodes (floor tiles, perimeter walls, furniture and their
rule-driven children) that a host engine instantiates. Furniture is laid
out by recursively splitting the room among the theme's items.

Usage:
    from room_gen import (
        RoomGenerator, SimpleBounds, default_catalogue, describe_blueprint,
    )

    generator = RoomGenerator(default_catalogue())
    bounds = SimpleBounds.of((0, 1.5, 0), (10, 3, 10))
    blueprint = generator.generate_from_theme(bounds, "office", seed=42)
    print(describe_blueprint(blueprint, seed=42))
"""

from room_gen.blueprint import PropNode, RoomBlueprint, describe_blueprint
from room_gen.catalogue import default_catalogue
from room_gen.generator import RoomGenerator
from room_gen.library import (
    ConfigurationError,
    GenerationRule,
    ItemCatalogue,
    ItemDefinition,
    RoomTheme,
)
from room_gen.primitives import ContainerKind, Facing, PlacementType, SimpleBounds, Vec3

__all__ = [
    "RoomGenerator",
    "RoomBlueprint",
    "PropNode",
    "SimpleBounds",
    "Vec3",
    "ContainerKind",
    "Facing",
    "PlacementType",
    "GenerationRule",
    "ItemCatalogue",
    "ItemDefinition",
    "RoomTheme",
    "ConfigurationError",
    "default_catalogue",
    "describe_blueprint",
]
