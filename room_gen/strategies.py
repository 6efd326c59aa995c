"""Placement strategies — turn (parent, item, count) into child nodes."""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np

from room_gen.blueprint import PropNode, new_instance_id
from room_gen.primitives import SimpleBounds, Vec3, planar_distance

log = logging.getLogger(__name__)

# Retry budget per requested placement
DEFAULT_MAX_ATTEMPTS = 10


class PlacementStrategy(Protocol):
    def generate(
        self, parent_id: str | None, item_id: str, count: int
    ) -> list[PropNode]: ...


class RandomScatterStrategy:
    """Rejection-sample points around a parent with a minimum spacing.

    Candidates are drawn uniformly from the square [-radius, radius] on X
    and Z (a square, not a disk). A candidate is accepted when its planar
    distance to every point already accepted by this call is at least
    min_spacing. An item that exhausts its retry budget is dropped, so the
    result may hold fewer than *count* nodes.

    Points are local offsets from the parent (y = 0).
    """

    def __init__(
        self,
        radius: float,
        min_spacing: float,
        rng: np.random.Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.radius = radius
        self.min_spacing = min_spacing
        self.max_attempts = max_attempts
        self.rng = rng if rng is not None else np.random.default_rng()

    def generate(
        self, parent_id: str | None, item_id: str, count: int
    ) -> list[PropNode]:
        result: list[PropNode] = []
        accepted: list[Vec3] = []
        r = self.radius

        for _ in range(count):
            for _attempt in range(self.max_attempts):
                x, z = self.rng.uniform(-r, r, size=2)
                candidate = Vec3(float(x), 0.0, float(z))
                if self._is_clear(candidate, accepted):
                    accepted.append(candidate)
                    result.append(
                        PropNode(
                            instance_id=new_instance_id(item_id, self.rng),
                            item_id=item_id,
                            parent_id=parent_id,
                            position=candidate,
                            logical_bounds=SimpleBounds(candidate),
                        )
                    )
                    break

        if len(result) < count:
            log.debug(
                "Scatter placed %d/%d %r (radius=%.2f, spacing=%.2f)",
                len(result),
                count,
                item_id,
                self.radius,
                self.min_spacing,
            )
        return result

    def _is_clear(self, candidate: Vec3, others: list[Vec3]) -> bool:
        return all(
            planar_distance(candidate, other) >= self.min_spacing for other in others
        )
