"""Generate blueprints from the built-in catalogue and print them.

Usage:
    python -m room_gen.preview                          # random living room
    python -m room_gen.preview --theme office --seed 42
    python -m room_gen.preview --rooms 3 --seed 7       # connected level
    python -m room_gen.preview --theme bedroom --skip-east --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np

from room_gen.blueprint import describe_blueprint
from room_gen.catalogue import default_catalogue, list_themes
from room_gen.config import GeneratorConfig, LevelConfig
from room_gen.generator import RoomGenerator
from room_gen.level import LevelDirector
from room_gen.primitives import SimpleBounds

log = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    """Configure root logger level and format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)-7s %(name)s: %(message)s",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--theme", default="living_room", choices=list_themes())
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--size",
        type=float,
        nargs=3,
        default=(10.0, 3.0, 10.0),
        metavar=("X", "Y", "Z"),
        help="Room size in meters",
    )
    parser.add_argument(
        "--rooms", type=int, default=1, help="Generate a connected level of N rooms"
    )
    parser.add_argument("--no-walls", action="store_true")
    for side in ("north", "south", "east", "west"):
        parser.add_argument(f"--skip-{side}", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.verbose)

    seed = args.seed
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**32))
        log.info("No --seed given, using %d", seed)

    catalogue = default_catalogue()

    if args.rooms > 1:
        config = LevelConfig(
            rooms=args.rooms, room_size=tuple(args.size), theme=args.theme
        )
        log.debug("Level config: %s", config.to_flat_dict())
        generator = RoomGenerator(catalogue, config=config.generator)
        level = LevelDirector(generator, config).generate_level(seed=seed)
        for room in level.rooms:
            o = room.world_offset
            print(f"{room.name} @ ({o.x:g}, {o.y:g}, {o.z:g})")
            print(describe_blueprint(room.blueprint, seed=seed))
            print()
        return 0

    sx, sy, sz = args.size
    bounds = SimpleBounds.of((0.0, sy / 2, 0.0), (sx, sy, sz))
    generator = RoomGenerator(catalogue, config=GeneratorConfig())
    blueprint = generator.generate_from_theme(
        bounds,
        args.theme,
        skip_north=args.skip_north,
        skip_south=args.skip_south,
        skip_east=args.skip_east,
        skip_west=args.skip_west,
        walls=not args.no_walls,
        seed=seed,
    )
    print(describe_blueprint(blueprint, seed=seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
