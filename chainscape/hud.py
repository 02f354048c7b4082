"""Score and statistics labels plus the floating "+N" score popups."""

from __future__ import annotations

from dataclasses import dataclass, field

from chainscape.core import Timer, Vec2
from chainscape.player import Player

FLOAT_LIFETIME = 1.0
FLOAT_ALPHA = 0.25
FLOAT_RISE_SPEED = 200.0
FLOAT_Z = 4.0


@dataclass(frozen=True)
class AddScore:
    """Points gained at a place in the world."""

    score: int
    position: Vec2


@dataclass
class ScoreFloat:
    """A fading label that drifts upwards from where points were gained."""

    score: int
    position: Vec2
    alpha: float = FLOAT_ALPHA
    lifetime: Timer = field(default_factory=lambda: Timer(FLOAT_LIFETIME))

    @property
    def text(self) -> str:
        return f"+{self.score}"

    def update(self, delta: float) -> bool:
        """Advance by ``delta`` seconds; return False once the label is gone."""
        if self.lifetime.finished or self.lifetime.tick(delta).just_finished:
            return False

        rise = FLOAT_RISE_SPEED * self.lifetime.fraction() * delta
        self.position = Vec2(self.position.x, self.position.y + rise)
        self.alpha = self.lifetime.fraction_remaining() ** 2 * FLOAT_ALPHA
        return True


def score_text(player: Player, now: float) -> str:
    return f"score: {player.score(now)}"


def stats_text(awake: int, killed: int) -> str:
    return f"awake: {awake}, killed: {killed}"