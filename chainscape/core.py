"""Shared value types: vectors, timers, the game clock, colours and states."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto

WINDOW_TITLE = "Chainscape"
VIEW_MIN_WIDTH = 512.0
VIEW_MIN_HEIGHT = 768.0


@dataclass(frozen=True, slots=True)
class Vec2:
    """An immutable two dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec2:
        return Vec2(self.x / divisor, self.y / divisor)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def distance(self, other: Vec2) -> float:
        return (self - other).length()

    def normalize(self) -> Vec2:
        """Return the unit vector in this direction; a zero vector has none."""
        length = self.length()
        if length == 0.0 or not math.isfinite(length):
            raise ValueError(f"cannot normalize vector {self!r}")
        return self / length

    def to_angle(self) -> float:
        """Angle of this vector from the positive x axis, in radians."""
        return math.atan2(self.y, self.x)

    def lerp(self, other: Vec2, t: float) -> Vec2:
        return Vec2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    @classmethod
    def from_angle(cls, angle: float) -> Vec2:
        """Unit vector pointing at ``angle`` radians."""
        return cls(math.cos(angle), math.sin(angle))


class TimerMode(Enum):
    ONCE = auto()
    REPEATING = auto()


@dataclass
class Timer:
    """A countdown measured in seconds that reports when it finishes."""

    duration: float = 0.0
    mode: TimerMode = TimerMode.ONCE
    elapsed: float = field(default=0.0, init=False)
    _finished: bool = field(default=False, init=False, repr=False)
    _times_finished: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError("timer duration must not be negative")

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def just_finished(self) -> bool:
        return self._times_finished > 0

    def tick(self, delta: float) -> Timer:
        """Advance the timer by ``delta`` seconds and return it."""
        if delta < 0:
            raise ValueError("cannot tick a timer backwards")
        if self.mode is TimerMode.ONCE and self._finished:
            self._times_finished = 0
            return self

        self.elapsed += delta
        self._finished = self.elapsed >= self.duration
        if not self._finished:
            self._times_finished = 0
        elif self.mode is TimerMode.REPEATING:
            if self.duration > 0:
                self._times_finished = max(1, int(self.elapsed // self.duration))
                self.elapsed %= self.duration
            else:
                self._times_finished = 1
                self.elapsed = 0.0
        else:
            self._times_finished = 1
            self.elapsed = self.duration
        return self

    def fraction(self) -> float:
        if self.duration == 0:
            return 1.0
        return self.elapsed / self.duration

    def fraction_remaining(self) -> float:
        return 1.0 - self.fraction()

    def remaining_secs(self) -> float:
        return self.duration - self.elapsed

    def reset(self) -> None:
        self.elapsed = 0.0
        self._finished = False
        self._times_finished = 0


@dataclass
class Clock:
    """Virtual game time that can be paused and clamps large frame steps."""

    elapsed: float = 0.0
    delta: float = 0.0
    paused: bool = False
    max_delta: float = 0.25

    def advance(self, delta: float) -> float:
        """Advance by a real frame step; return the virtual step applied."""
        if delta < 0:
            raise ValueError("cannot advance the clock backwards")
        self.delta = 0.0 if self.paused else min(delta, self.max_delta)
        self.elapsed += self.delta
        return self.delta

    def pause(self) -> None:
        self.paused = True

    def unpause(self) -> None:
        self.paused = False


@dataclass(frozen=True, slots=True)
class Color:
    """A gamma encoded sRGB colour with alpha, each channel in 0..1."""

    r: float
    g: float
    b: float
    alpha: float = 1.0

    @classmethod
    def srgb(cls, r: float, g: float, b: float, alpha: float = 1.0) -> Color:
        return cls(r, g, b, alpha)

    def with_alpha(self, alpha: float) -> Color:
        return Color(self.r, self.g, self.b, alpha)

    def mix(self, other: Color, t: float) -> Color:
        """Blend channel-wise towards ``other`` by ``t``."""

        def blend(a: float, b: float) -> float:
            return a + (b - a) * t

        return Color(
            blend(self.r, other.r),
            blend(self.g, other.g),
            blend(self.b, other.b),
            blend(self.alpha, other.alpha),
        )

    def to_rgba8(self) -> tuple[int, int, int, int]:
        def byte(value: float) -> int:
            return round(min(max(value, 0.0), 1.0) * 255)

        return byte(self.r), byte(self.g), byte(self.b), byte(self.alpha)


def _gamma_encode(value: float) -> float:
    magnitude = abs(value)
    if magnitude <= 0.0031308:
        encoded = magnitude * 12.92
    else:
        encoded = 1.055 * magnitude ** (1.0 / 2.4) - 0.055
    return math.copysign(encoded, value)


def oklch_to_srgb(lightness: float, chroma: float, hue: float) -> tuple[float, float, float]:
    """Convert an OKLCH colour (hue in degrees) to gamma encoded sRGB."""
    hue_rad = math.radians(hue)
    a = chroma * math.cos(hue_rad)
    b = chroma * math.sin(hue_rad)

    l_ = lightness + 0.3963377774 * a + 0.2158037573 * b
    m_ = lightness - 0.1055613458 * a - 0.0638541728 * b
    s_ = lightness - 0.0894841775 * a - 1.2914855480 * b
    l, m, s = l_**3, m_**3, s_**3

    red = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s
    green = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s
    blue = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s
    return _gamma_encode(red), _gamma_encode(green), _gamma_encode(blue)


class Screen(Enum):
    """The game's main screen states."""

    LOADING = auto()
    RESET = auto()
    GAMEPLAY = auto()

    @classmethod
    def default(cls) -> Screen:
        return cls.LOADING


class AppSystems(Enum):
    """Per-frame update phases, in the order they run."""

    TICK_TIMERS = auto()
    RECORD_INPUT = auto()
    UPDATE = auto()