"""Asset loading and tracking of resources that must be ready before play."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pygame

from chainscape.core import Screen

_ASSET_FILES = {
    "player": "player.png",
    "enemy": "enemy.png",
    "up_speed": "speed.png",
    "up_explosion": "explosion.png",
    "up_coin": "coin.png",
    "noise": "noise.png",
    "circle": "circle.png",
    "square": "square.png",
    "safezone": "safezone.png",
    "arrow": "arrow.png",
}


def asset_paths() -> dict[str, str]:
    """Map each asset name to its path relative to the asset directory."""
    return {name: f"images/{file}" for name, file in _ASSET_FILES.items()}


class ResourceHandles:
    """Resources waiting to load; each is inserted once it is ready."""

    def __init__(self) -> None:
        self._waiting: deque[tuple[str, Callable[[], bool], Callable[[], None]]] = deque()
        self._finished: list[str] = []

    @property
    def finished(self) -> tuple[str, ...]:
        return tuple(self._finished)

    def add(self, name: str, is_loaded: Callable[[], bool], insert: Callable[[], None]) -> None:
        self._waiting.append((name, is_loaded, insert))

    def update(self) -> list[str]:
        """Cycle once through the waiting resources; return those inserted."""
        done = []
        for _ in range(len(self._waiting)):
            entry = self._waiting.popleft()
            name, is_loaded, insert = entry
            if is_loaded():
                insert()
                self._finished.append(name)
                done.append(name)
            else:
                self._waiting.append(entry)
        return done

    def is_all_done(self) -> bool:
        return not self._waiting


@dataclass(frozen=True)
class GameAssets:
    """The images the game draws."""

    player: pygame.Surface
    enemy: pygame.Surface
    up_speed: pygame.Surface
    up_explosion: pygame.Surface
    up_coin: pygame.Surface
    noise: pygame.Surface
    circle: pygame.Surface
    square: pygame.Surface
    safezone: pygame.Surface
    arrow: pygame.Surface

    @classmethod
    def load(cls, directory: str | Path) -> GameAssets:
        """Load every image below ``directory``."""
        base = Path(directory)
        surfaces = {}
        for name, relative in asset_paths().items():
            path = base / relative
            if not path.is_file():
                raise FileNotFoundError(f"missing asset {path}")
            surfaces[name] = pygame.image.load(str(path))
        return cls(**surfaces)


def next_screen(handles: ResourceHandles) -> Screen | None:
    """The screen to leave the loading screen for, once everything is loaded."""
    return Screen.RESET if handles.is_all_done() else None