"""Enemies that sleep, wake up when something comes near and hunt the player."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Sequence

from chainscape.core import Color, Timer, Vec2, oklch_to_srgb
from chainscape.rand import Noise, Rand
from chainscape.squishy import Squishy

ENEMY_SIZE = 48.0
ENEMY_COLLIDER = 20.0
COLLIDER_RANGE = 256.0
WAKE_COOLDOWN = 2.0
MAX_AWAKE = 256
AVOID_DISTANCE = 64.0
AVOID_FORCE = 1_000_000.0

COLOR_SLEEPING = Color(*oklch_to_srgb(0.668, 0.0, 36.99), 1.0)
COLOR_AWAKE = Color(*oklch_to_srgb(0.668, 0.224, 36.99), 0.75)


class EnemyState(Enum):
    SLEEPING = auto()
    AWAKING = auto()
    AWAKE = auto()


@dataclass
class Enemy:
    """One enemy and its behaviour state."""

    position: Vec2
    max_speed: float
    state: EnemyState = EnemyState.SLEEPING
    sleeping_since: float = 0.0
    collider_enabled: bool = False
    awaking: Timer | None = None
    awake_since: float = 0.0
    seed: float = 0.0
    reorient: Timer = field(default_factory=Timer)
    velocity: Vec2 = Vec2()
    angular_velocity: float = 0.0
    force: Vec2 = Vec2()
    squishy: Squishy | None = None
    scale: Vec2 = Vec2(1.0, 1.0)

    def color(self, now: float, noise: Noise) -> Color:
        """The tint for this enemy at game time ``now``."""
        if self.state is EnemyState.AWAKE:
            age = now - self.awake_since
            amount = (noise.get_noise_2d(self.seed, age) + 1.0) / 2.0
            return COLOR_AWAKE.with_alpha(amount * 0.3 + 0.5)
        if self.state is EnemyState.AWAKING and self.awaking is not None:
            return COLOR_SLEEPING.mix(COLOR_AWAKE, self.awaking.fraction() ** 3)
        return COLOR_SLEEPING


def new_enemy(rand: Rand, position: Vec2) -> Enemy:
    """A sleeping enemy at ``position`` with its collider switched off."""
    return Enemy(position=position, max_speed=rand.random_range(100.0, 140.0))


def _awake(enemies: Iterable[Enemy]) -> list[Enemy]:
    return [enemy for enemy in enemies if enemy.state is EnemyState.AWAKE]


def update_collider_flags(enemies: Iterable[Enemy], player_position: Vec2) -> None:
    """Only sleeping enemies near the player take part in collisions."""
    for enemy in enemies:
        if enemy.state is EnemyState.SLEEPING:
            enemy.collider_enabled = (
                enemy.position.distance(player_position) <= COLLIDER_RANGE
            )


def wake_nearby(
    enemies: Sequence[Enemy], player_positions: Iterable[Vec2], now: float, rand: Rand
) -> list[Enemy]:
    """Start waking sleeping enemies near a player or an awake enemy."""
    others = [(position, True) for position in player_positions]
    others.extend((enemy.position, False) for enemy in _awake(enemies))

    woken = []
    for enemy in enemies:
        if enemy.state is not EnemyState.SLEEPING:
            continue
        if now - enemy.sleeping_since <= WAKE_COOLDOWN:
            continue
        if not others:
            continue

        position, is_player = min(
            others, key=lambda other: other[0].distance(enemy.position)
        )
        max_distance, low, high = (64.0, 2.0, 3.0) if is_player else (128.0, 0.5, 1.0)
        if (position - enemy.position).length() > max_distance:
            continue

        enemy.state = EnemyState.AWAKING
        enemy.collider_enabled = True
        enemy.awaking = Timer(rand.random_range(low, high))
        enemy.squishy = Squishy(
            offset=now,
            frequency=1.0,
            scale_max=Vec2(1.1, 1.1),
            scale_min=Vec2(1.0, 1.0),
        )
        woken.append(enemy)
    return woken


def advance_awaking(
    enemies: Iterable[Enemy], now: float, delta: float, rand: Rand
) -> list[Enemy]:
    """Tick the wake-up timers; enemies whose timer ran out become awake."""
    awoken = []
    for enemy in enemies:
        if enemy.state is not EnemyState.AWAKING or enemy.awaking is None:
            continue
        if not enemy.awaking.tick(delta).just_finished:
            continue

        enemy.scale = Vec2(1.0, 1.0)
        enemy.state = EnemyState.AWAKE
        enemy.awaking = None
        enemy.collider_enabled = True
        enemy.awake_since = now
        enemy.seed = rand.random_range(0.0, 200.0)
        enemy.reorient = Timer()
        enemy.squishy = Squishy(
            offset=0.0,
            frequency=rand.random_range(1.8, 2.2),
            scale_min=Vec2(0.9, 1.0),
            scale_max=Vec2(1.09, 1.0),
        )
        awoken.append(enemy)
    return awoken


def hunt_player(
    enemies: Iterable[Enemy], player_positions: Iterable[Vec2], delta: float, rand: Rand
) -> None:
    """Point awake enemies at the nearest player whenever they reorient."""
    players = list(player_positions)
    for enemy in _awake(enemies):
        if not enemy.reorient.tick(delta).just_finished:
            continue

        enemy.reorient = Timer(rand.random_range(1.0, 2.0))
        if not players:
            continue

        player = min(players, key=lambda p: p.distance(enemy.position))
        target = player + rand.vec2() * 32.0
        offset = target - enemy.position
        speed = rand.random_range(100.0, 140.0)
        if offset.length_squared() == 0.0:
            enemy.velocity = Vec2()
        else:
            enemy.velocity = offset.normalize() * speed


def avoid_collisions(enemies: Iterable[Enemy]) -> None:
    """Push awake enemies apart when they come too close to each other."""
    awake = _awake(enemies)
    positions = [enemy.position for enemy in awake]
    for index, enemy in enumerate(awake):
        new_force = Vec2()
        for other_index, other in enumerate(positions):
            if other_index == index:
                continue
            distance = enemy.position.distance(other)
            if 0.0 < distance < AVOID_DISTANCE:
                direction = (enemy.position - other).normalize()
                new_force = new_force + direction * min(AVOID_FORCE / distance, AVOID_FORCE)
        enemy.force = enemy.force + new_force


def restrict_awake(
    enemies: Iterable[Enemy], player_position: Vec2, now: float
) -> list[Enemy]:
    """Send the awake enemies furthest from the player back to sleep."""
    awake = _awake(enemies)
    if len(awake) < MAX_AWAKE:
        return []

    awake.sort(key=lambda enemy: enemy.position.distance(player_position))
    sent_to_sleep = awake[MAX_AWAKE:]
    for enemy in sent_to_sleep:
        enemy.velocity = Vec2()
        enemy.angular_velocity = 0.0
        enemy.force = Vec2()
        enemy.state = EnemyState.SLEEPING
        enemy.sleeping_since = now
        enemy.collider_enabled = False
        enemy.squishy = None
    return sent_to_sleep