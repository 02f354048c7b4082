"""Seeded randomness, 2D noise and placement of non-overlapping points."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Sequence, TypeVar

from chainscape.core import Vec2

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_PRIME_X = 501125321
_PRIME_Y = 1136930381


class Rand:
    """The game's deterministic random number source."""

    def __init__(self, seed: int = 1) -> None:
        self._rng = random.Random(seed)

    def random(self) -> float:
        """A float in [0, 1)."""
        return self._rng.random()

    def random_range(self, low: float, high: float) -> float:
        """A float in the half-open range [low, high)."""
        if not low < high:
            raise ValueError(f"empty range {low}..{high}")
        value = low + (high - low) * self._rng.random()
        return value if value < high else low

    def random_int(self, low: int, high: int) -> int:
        """An integer in the closed range [low, high]."""
        if low > high:
            raise ValueError(f"empty range {low}..={high}")
        return self._rng.randint(low, high)

    def vec2(self) -> Vec2:
        """A random vector within the unit circle."""
        while True:
            vec = Vec2(self.random_range(-1.0, 1.0), self.random_range(-1.0, 1.0))
            if vec.length_squared() <= 1.0:
                return vec

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        return items[self._rng.randrange(len(items))]


class NoiseType(Enum):
    GRADIENT = auto()
    CELLULAR = auto()


def _hash(seed: int, x_primed: int, y_primed: int) -> int:
    value = (seed ^ x_primed ^ y_primed) & _MASK
    value = (value * 0x27D4EB2D) & _MASK
    return value ^ (value >> 15)


_GRADIENTS = tuple(Vec2.from_angle(k * math.pi / 4) for k in range(8))


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


@dataclass
class Noise:
    """Seeded coherent 2D noise returning values in [-1, 1]."""

    seed: int = 1337
    frequency: float = 0.01
    noise_type: NoiseType = NoiseType.GRADIENT

    def get_noise_2d(self, x: float, y: float) -> float:
        x *= self.frequency
        y *= self.frequency
        if self.noise_type is NoiseType.CELLULAR:
            return self._cellular(x, y)
        return self._gradient(x, y)

    def _cell_hash(self, xi: int, yi: int) -> int:
        return _hash(self.seed, (xi * _PRIME_X) & _MASK, (yi * _PRIME_Y) & _MASK)

    def _gradient(self, x: float, y: float) -> float:
        x0, y0 = math.floor(x), math.floor(y)
        fx, fy = x - x0, y - y0

        def corner(dx: int, dy: int) -> float:
            grad = _GRADIENTS[self._cell_hash(x0 + dx, y0 + dy) & 7]
            return grad.x * (fx - dx) + grad.y * (fy - dy)

        u, v = _fade(fx), _fade(fy)
        bottom = corner(0, 0) + (corner(1, 0) - corner(0, 0)) * u
        top = corner(0, 1) + (corner(1, 1) - corner(0, 1)) * u
        value = (bottom + (top - bottom) * v) * math.sqrt(2.0)
        return min(max(value, -1.0), 1.0)

    def _cellular(self, x: float, y: float) -> float:
        x0, y0 = math.floor(x), math.floor(y)
        nearest = math.inf
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                h = self._cell_hash(x0 + dx, y0 + dy)
                px = x0 + dx + (h & 0xFFFF) / 0xFFFF
                py = y0 + dy + (h >> 16) / 0xFFFF
                nearest = min(nearest, math.hypot(px - x, py - y))
        return min(nearest, 1.0) * 2.0 - 1.0


class Generate:
    """Places points in a ring around a centre, keeping them apart."""

    def __init__(self, max_radius: float, min_radius: float, center: Vec2 = Vec2()) -> None:
        self.center = center
        self.min_radius = min_radius
        self.max_radius = max_radius
        self._occupied: list[tuple[Vec2, float]] = []

    def generate(
        self, random_point: Callable[[float], Vec2], count: int, clearance: float
    ) -> list[Vec2]:
        """Draw ``count`` points, each at least ``clearance`` from earlier ones."""
        positions: list[Vec2] = []
        while len(positions) < count:
            offset = random_point(self.max_radius)
            if not self.min_radius <= offset.length() < self.max_radius:
                continue

            pos = self.center + offset
            if any(
                pos.distance(other) < max(clearance, other_clearance)
                for other, other_clearance in self._occupied
            ):
                continue

            positions.append(pos)
            self._occupied.append((pos, clearance))
        return positions


def weighted_by_noise(rand: Rand, noise: Noise) -> Callable[[float], Vec2]:
    """A point sampler that favours areas where the noise is high."""

    def sample(radius: float) -> Vec2:
        while True:
            threshold = rand.random()
            candidate = rand.vec2() * radius
            value = min(noise.get_noise_2d(candidate.x, candidate.y) + 1.0, 1.0)
            if threshold <= value * value:
                return candidate

    return sample