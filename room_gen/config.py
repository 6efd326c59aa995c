"""
Centralized configuration for blueprint generation.

All generation settings in one place.
Converts to a flat dict for logging alongside a run.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from room_gen.library import ConfigurationError


@dataclass
class GeneratorConfig:
    """Single-room generation settings."""

    floor_item_id: str = "FloorTile"
    wall_item_id: str = "Wall"

    # Scatter rules
    scatter_attempts: int = 10  # Retries per requested placement
    scatter_spacing_factor: float = 1.5  # Spacing = factor * target item width

    build_group_tree: bool = True  # Attach Region_Room -> Group_* tree
    validate: bool = True  # Log invariant violations after generation

    def __post_init__(self):
        if self.scatter_attempts < 1:
            raise ConfigurationError("scatter_attempts must be >= 1")
        if self.scatter_spacing_factor < 0:
            raise ConfigurationError("scatter_spacing_factor must be >= 0")

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LevelConfig:
    """Multi-room level settings."""

    rooms: int = 3
    room_size: tuple[float, float, float] = (10.0, 3.0, 10.0)
    theme: str = "living_room"

    # Connection between consecutive rooms
    door_item_id: str = "DoorSystem"
    key_item_id: str = "Key"
    plane_epsilon: float = 0.5  # Max |x - plane| for a wall to count as on it
    door_wall_tolerance: float = 0.05  # Slack around door footprints

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    def __post_init__(self):
        if self.rooms < 1:
            raise ConfigurationError("rooms must be >= 1")
        if any(s <= 0 for s in self.room_size):
            raise ConfigurationError(f"room_size must be positive: {self.room_size}")

    @classmethod
    def for_smoketest(cls) -> LevelConfig:
        """Two small rooms, enough to exercise a connection."""
        return cls(rooms=2, room_size=(6.0, 3.0, 6.0))

    def to_flat_dict(self) -> dict:
        """
        Convert to flat dict for logging.

        Generator keys are prefixed: floor_item_id -> "generator/floor_item_id"
        """
        result = asdict(self)
        for key, value in result.pop("generator").items():
            result[f"generator/{key}"] = value
        return result
