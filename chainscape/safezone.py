"""The safe zones that end the game with a win when the player reaches one."""

from __future__ import annotations

import math
from dataclasses import dataclass

from chainscape.core import Color, Vec2, oklch_to_srgb

COLOR = Color(*oklch_to_srgb(0.918, 0.238, 127.48))
SAFEZONE_SIZE = 128.0
HALF_EXTENT = 24.0
BORDER_RADIUS = 8.0
FADE_DISTANCE = 256.0


@dataclass
class Safezone:
    """A rounded square goal area."""

    position: Vec2
    color: Color = COLOR

    def alpha_for(self, player_position: Vec2) -> float:
        """Opacity of the zone; it grows more visible as the player approaches."""
        distance = self.position.distance(player_position)
        return 0.25 + 0.75 * (1.0 - min(distance, FADE_DISTANCE) / FADE_DISTANCE)

    def contains(self, point: Vec2, radius: float) -> bool:
        """Whether a circle of ``radius`` at ``point`` overlaps the zone."""
        if radius < 0:
            raise ValueError("radius must not be negative")
        dx = max(abs(point.x - self.position.x) - HALF_EXTENT, 0.0)
        dy = max(abs(point.y - self.position.y) - HALF_EXTENT, 0.0)
        return math.hypot(dx, dy) < BORDER_RADIUS + radius