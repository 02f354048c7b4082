"""Pulsing scale animation and turn-then-move steering."""

from __future__ import annotations

import math
from dataclasses import dataclass

from chainscape.core import Vec2


def _wrap(angle: float) -> float:
    return (angle + math.pi) % (2 * math.pi) - math.pi


@dataclass
class Squishy:
    """Scale oscillating between two extremes at a given frequency."""

    offset: float
    frequency: float
    scale_max: Vec2
    scale_min: Vec2

    def scale_at(self, elapsed: float) -> Vec2:
        """The scale at game time ``elapsed`` seconds."""
        if elapsed < self.offset:
            raise ValueError("elapsed time lies before the animation offset")
        wave = math.sin((elapsed - self.offset) * self.frequency * 2.0 * math.pi)
        return self.scale_min.lerp(self.scale_max, (wave + 1.0) / 2.0)


def rotate_towards(current: float, target: float, max_step: float) -> float:
    """Turn angle ``current`` towards ``target`` along the shorter way."""
    diff = _wrap(target - current)
    if abs(diff) <= 1e-4:
        return target
    share = min(max(max_step / abs(diff), -1.0), 1.0)
    return _wrap(current + diff * share)


@dataclass
class Movement:
    """Desired velocity plus the turn rate used to reach its heading."""

    target_velocity: Vec2
    angular_velocity: float

    def step(self, rotation: float, dt: float) -> tuple[float, Vec2]:
        """Return the new heading and the velocity along it after ``dt``."""
        new_rotation = rotate_towards(
            rotation, self.target_velocity.to_angle(), self.angular_velocity * dt
        )
        velocity = Vec2.from_angle(new_rotation) * self.target_velocity.length()
        return new_rotation, velocity