"""The game world: spawning a round, running its rules and ending it."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping

from chainscape.core import Clock, Screen, Timer, Vec2
from chainscape.enemy import (
    ENEMY_COLLIDER,
    Enemy,
    EnemyState,
    advance_awaking,
    avoid_collisions,
    hunt_player,
    new_enemy,
    restrict_awake,
    update_collider_flags,
    wake_nearby,
)
from chainscape.highscore import (
    MAX_ENTRIES,
    HighscoreClient,
    HighscoreError,
    HighscoreItem,
    HighscoreState,
    sort_highscore,
)
from chainscape.hud import ScoreFloat
from chainscape.markers import Marker
from chainscape.player import PLAYER_RADIUS, Player, steer_towards
from chainscape.rand import Generate, Noise, NoiseType, Rand, weighted_by_noise
from chainscape.safezone import COLOR as SAFEZONE_COLOR
from chainscape.safezone import Safezone

log = logging.getLogger(__name__)

WORLD_RADIUS = 4096.0
MIN_SPAWN_RADIUS = 256.0
OUTER_STEP_DEGREES = 10.0
OUTER_SEGMENTS = 36
POWERUP_RADIUS = 24.0
ENEMY_MASS = ENEMY_COLLIDER * ENEMY_COLLIDER
EXPLOSION_DELAY = 2.0
EXPLOSION_FADE = 0.25


class Powerup(Enum):
    SPEED = auto()
    EXPLOSION = auto()
    COIN = auto()


@dataclass
class DelayedExplosion:
    """A bomb carried by the player that goes off when the timer runs out."""

    timer: Timer = field(default_factory=lambda: Timer(EXPLOSION_DELAY))

    @property
    def label(self) -> str:
        return f"boom in {self.timer.remaining_secs():.2f}s"


@dataclass
class Explosion:
    """The fading circle left behind by an explosion."""

    position: Vec2
    radius: float
    alpha: float = 0.75
    timer: Timer = field(default_factory=lambda: Timer(EXPLOSION_FADE))

    def update(self, delta: float) -> bool:
        """Advance the fade; return False once it is gone."""
        if self.timer.finished or self.timer.tick(delta).just_finished:
            return False
        self.alpha = self.timer.fraction_remaining() ** 2
        return True


@dataclass(frozen=True)
class Segment:
    """One static wall piece of the outer rim."""

    position: Vec2
    rotation: float
    half_length: float


def spawn_outer_area(radius: float = WORLD_RADIUS) -> list[Segment]:
    """The wall segments that fence in the play area."""
    half_length = radius / (2.0 * math.pi)
    return [
        Segment(
            Vec2.from_angle(angle) * radius,
            angle,
            half_length,
        )
        for angle in (
            math.radians(index * OUTER_STEP_DEGREES) for index in range(OUTER_SEGMENTS)
        )
    ]


def player_name(environ: Mapping[str, str] | None = None) -> str:
    """The name reported with the highscore: $USER unless blank, else "Test"."""
    env = os.environ if environ is None else environ
    name = env.get("USER")
    if name and not name.isspace():
        return name
    return "Test"


def _confine(position: Vec2, limit: float) -> Vec2:
    length = position.length()
    if length > limit > 0:
        return position * (limit / length)
    return position


class World:
    """All entities of a round and the rules that drive them."""

    def __init__(
        self,
        rand: Rand | None = None,
        highscore: HighscoreClient | None = None,
        environ: Mapping[str, str] | None = None,
        enemy_count: int = 4096,
        powerup_count: int = 128,
        safezone_count: int = 3,
        radius: float = WORLD_RADIUS,
    ) -> None:
        self.rand = rand or Rand(1)
        self.highscore = highscore
        self.environ = environ
        self.enemy_count = enemy_count
        self.powerup_count = powerup_count
        self.safezone_count = safezone_count
        self.radius = radius
        self.clock = Clock()
        self.screen = Screen.default()
        self.paused = False
        self.enemy_noise = Noise(frequency=0.1)
        self.outer_area = spawn_outer_area(radius)
        self.player = Player()
        self.enemies: list[Enemy] = []
        self.powerups: list[tuple[Vec2, Powerup]] = []
        self.safezones: list[Safezone] = []
        self.markers: list[Marker] = []
        self.floats: list[ScoreFloat] = []
        self.explosions: list[Explosion] = []
        self.delayed: DelayedExplosion | None = None
        self.highscore_state = HighscoreState.default()
        self.highscore_entries: list[HighscoreItem] = []

    @property
    def now(self) -> float:
        return self.clock.elapsed

    def reset(self) -> None:
        """Start a fresh round."""
        self.clock.unpause()
        self.paused = False
        self.screen = Screen.GAMEPLAY
        self.player = Player(born=self.clock.elapsed)
        self.floats = []
        self.explosions = []
        self.delayed = None
        self.highscore_state = HighscoreState.CLOSED
        self.highscore_entries = []

        rand = self.rand
        generator = Generate(self.radius, MIN_SPAWN_RADIUS, Vec2())

        def random_pos(radius: float) -> Vec2:
            return rand.vec2() * radius

        zones = generator.generate(random_pos, self.safezone_count, 128.0)
        self.safezones = [Safezone(pos) for pos in zones]
        self.markers = [Marker(pos, SAFEZONE_COLOR) for pos in zones]

        kinds = list(Powerup)
        self.powerups = [
            (pos, rand.choice(kinds))
            for pos in generator.generate(random_pos, self.powerup_count, 128.0)
        ]

        noise = Noise(seed=1, frequency=0.001, noise_type=NoiseType.CELLULAR)
        self.enemies = [
            new_enemy(rand, pos)
            for pos in generator.generate(
                weighted_by_noise(rand, noise), self.enemy_count, 32.0
            )
        ]

    def click(self, target: Vec2) -> None:
        """A press at world position ``target``: close the scores or steer."""
        if self.highscore_state is not HighscoreState.CLOSED:
            self.highscore_state = HighscoreState.CLOSED
            if self.highscore is not None:
                self.highscore.cancel()
            self.reset()
            return
        if self.screen is not Screen.GAMEPLAY or self.paused:
            return

        velocity = steer_towards(self.player.position, target)
        if velocity is None:
            return
        self.player.movement.target_velocity = velocity
        self.paused = False

    def update(self, delta: float) -> None:
        """Run one frame of ``delta`` real seconds."""
        if self.screen is not Screen.GAMEPLAY:
            return
        dt = self.clock.advance(delta)
        now = self.clock.elapsed
        player = self.player

        update_collider_flags(self.enemies, player.position)
        wake_nearby(self.enemies, [player.position], now, self.rand)
        advance_awaking(self.enemies, now, dt, self.rand)
        hunt_player(self.enemies, [player.position], dt, self.rand)
        avoid_collisions(self.enemies)
        restrict_awake(self.enemies, player.position, now)

        if not self.paused:
            player.rotation, player.velocity = player.movement.step(player.rotation, dt)
        self._physics(dt)

        if not self.paused:
            self._player_collisions()
        self._collect_powerups()
        if not self.paused:
            self._check_safezones()

        for enemy in self.enemies:
            if enemy.squishy is not None:
                enemy.scale = enemy.squishy.scale_at(now)

        self.explosions = [e for e in self.explosions if e.update(dt)]
        self._handle_delayed_explosion(dt)
        self.floats = [f for f in self.floats if f.update(dt)]
        self._poll_highscore()

    def end_game(self, win: bool) -> None:
        """Report the score, pause the round and show the highscore table."""
        if self.paused:
            return
        score = self.player.score(self.clock.elapsed)
        if self.highscore is not None:
            self.highscore.post(player_name(self.environ), score)
            self.highscore_state = HighscoreState.LOADING
        else:
            self.highscore_state = HighscoreState.AVAILABLE
        if not win:
            self.player.visible = False
        self.paused = True
        self.clock.pause()

    def apply_powerup(self, powerup: Powerup) -> None:
        player = self.player
        if powerup is Powerup.SPEED:
            log.info("Double the players speed until the next turn.")
            player.movement.target_velocity = player.movement.target_velocity * 2.0
        elif powerup is Powerup.COIN:
            score = player.add_score(self.rand.random_int(3, 6) * 10)
            self.floats.append(ScoreFloat(score, player.position))
        else:
            self.delayed = DelayedExplosion()

    def _physics(self, dt: float) -> None:
        player = self.player
        player.position = _confine(
            player.position + player.velocity * dt, self.radius - PLAYER_RADIUS
        )
        for enemy in self.enemies:
            velocity = enemy.velocity + enemy.force * (dt / ENEMY_MASS)
            speed = velocity.length()
            if speed > enemy.max_speed:
                velocity = velocity * (enemy.max_speed / speed)
            enemy.velocity = velocity
            enemy.position = _confine(
                enemy.position + velocity * dt, self.radius - ENEMY_COLLIDER / 2
            )
            enemy.force = Vec2()

    def _player_collisions(self) -> None:
        player = self.player
        reach = PLAYER_RADIUS + ENEMY_COLLIDER / 2
        survivors = []
        for enemy in self.enemies:
            touching = (
                enemy.collider_enabled
                and enemy.position.distance(player.position) < reach
            )
            if not touching:
                survivors.append(enemy)
            elif enemy.state is EnemyState.AWAKE:
                self.end_game(False)
                return
            else:
                score = player.add_kill(False)
                self.floats.append(ScoreFloat(score, enemy.position))
        self.enemies = survivors

    def _collect_powerups(self) -> None:
        reach = POWERUP_RADIUS + PLAYER_RADIUS
        remaining = []
        for position, powerup in self.powerups:
            if position.distance(self.player.position) < reach:
                self.apply_powerup(powerup)
            else:
                remaining.append((position, powerup))
        self.powerups = remaining

    def _check_safezones(self) -> None:
        for zone in self.safezones:
            if zone.contains(self.player.position, PLAYER_RADIUS):
                self.player.safezone_reached = True
                self.end_game(True)
                return

    def _handle_delayed_explosion(self, dt: float) -> None:
        if self.delayed is None or not self.delayed.timer.tick(dt).just_finished:
            return
        self.delayed = None
        player = self.player
        blast_radius = self.rand.random_range(200.0, 300.0)
        survivors = []
        for enemy in self.enemies:
            if enemy.position.distance(player.position) > blast_radius:
                survivors.append(enemy)
                continue
            score = player.add_kill(enemy.state is EnemyState.AWAKE)
            self.floats.append(ScoreFloat(score, enemy.position))
        self.enemies = survivors
        self.explosions.append(Explosion(player.position, blast_radius))

    def _poll_highscore(self) -> None:
        if self.highscore_state is not HighscoreState.LOADING or self.highscore is None:
            return
        try:
            items = self.highscore.take()
        except HighscoreError as err:
            log.warning("%s", err)
            self.highscore_entries = []
            self.highscore_state = HighscoreState.AVAILABLE
            return
        if items is not None:
            self.highscore_entries = sort_highscore(items)[:MAX_ENTRIES]
            self.highscore_state = HighscoreState.AVAILABLE