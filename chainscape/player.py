"""The player character, its score, steering input and the following camera."""

from __future__ import annotations

from dataclasses import dataclass, field

from chainscape.core import VIEW_MIN_HEIGHT, VIEW_MIN_WIDTH, Color, Vec2, oklch_to_srgb
from chainscape.squishy import Movement, Squishy

PLAYER_SPEED = 130.0
PLAYER_RADIUS = 16.0
PLAYER_SIZE = 32.0
PLAYER_TURN_RATE = 8.0
PLAYER_COLOR = Color(*oklch_to_srgb(0.645, 0.260, 2.47))

KILL_SCORE_AWAKE = 15
KILL_SCORE_SLEEPING = 5
SAFEZONE_BONUS = 100


def _player_squishy() -> Squishy:
    return Squishy(
        offset=0.0,
        frequency=2.0,
        scale_min=Vec2(1.0, 0.9),
        scale_max=Vec2(1.0, 1.1),
    )


@dataclass
class Player:
    """The player: where it is, how it moves and what it has scored."""

    born: float = 0.0
    position: Vec2 = Vec2()
    rotation: float = 0.0
    velocity: Vec2 = Vec2()
    movement: Movement = field(
        default_factory=lambda: Movement(Vec2(), PLAYER_TURN_RATE)
    )
    squishy: Squishy = field(default_factory=_player_squishy)
    visible: bool = True
    safezone_reached: bool = False
    kill_count: int = 0
    _score: int = field(default=0, init=False, repr=False)

    def score(self, now: float) -> int:
        """Whole seconds survived plus collected points plus the safe zone bonus."""
        if now < self.born:
            raise ValueError("time lies before the player was born")
        age = int(now - self.born)
        bonus = SAFEZONE_BONUS if self.safezone_reached else 0
        return age + self._score + bonus

    def add_kill(self, awake: bool) -> int:
        """Count a kill and return the points it was worth."""
        self.kill_count += 1
        delta = KILL_SCORE_AWAKE if awake else KILL_SCORE_SLEEPING
        self._score += delta
        return delta

    def add_score(self, delta: int) -> int:
        if delta < 0:
            raise ValueError("score delta must not be negative")
        self._score += delta
        return delta


def steer_towards(position: Vec2, target: Vec2) -> Vec2 | None:
    """The velocity to head for ``target``, or None when it is the position itself."""
    direction = target - position
    if direction.length_squared() < 0.01:
        return None
    return direction.normalize() * PLAYER_SPEED


@dataclass
class Camera:
    """An orthographic camera that keeps a minimum visible area."""

    position: Vec2 = Vec2()
    min_width: float = VIEW_MIN_WIDTH
    min_height: float = VIEW_MIN_HEIGHT

    def scale_for(self, width: float, height: float) -> float:
        """World units per screen pixel for a window of the given size."""
        if width <= 0 or height <= 0:
            raise ValueError("window size must be positive")
        if width * self.min_height > self.min_width * height:
            return self.min_height / height
        return self.min_width / width

    def viewport_to_world(self, pos: Vec2, width: float, height: float) -> Vec2:
        """Convert a window position (origin top left, y down) to world space."""
        scale = self.scale_for(width, height)
        return self.position + Vec2(
            (pos.x - width / 2.0) * scale, (height / 2.0 - pos.y) * scale
        )