"""Arrows around the player that point towards distant targets."""

from __future__ import annotations

from dataclasses import dataclass

from chainscape.core import Color, Vec2

MARKER_SIZE = 32.0
MARKER_DISTANCE = 24.0
FADE_DISTANCE = 2048.0


@dataclass(frozen=True)
class Placement:
    """Where and how to draw a marker this frame."""

    position: Vec2
    rotation: float
    color: Color


@dataclass
class Marker:
    """Points from the player towards ``target``, fading out with distance."""

    target: Vec2
    color: Color

    def place(self, player_position: Vec2) -> Placement:
        """Position, heading and tint of the arrow for a player at ``player_position``."""
        direction = self.target - player_position
        if direction.length_squared() == 0.0:
            position, rotation = player_position, 0.0
        else:
            position = player_position + direction.normalize() * MARKER_DISTANCE
            rotation = direction.to_angle()

        nearness = 1.0 - min(direction.length(), FADE_DISTANCE) / FADE_DISTANCE
        alpha = 0.25 + 0.75 * nearness
        return Placement(position, rotation, self.color.with_alpha(alpha))