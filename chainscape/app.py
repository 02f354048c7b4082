"""The window, input handling and drawing of the game."""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path

import pygame

from chainscape.assets import GameAssets, ResourceHandles, next_screen
from chainscape.core import WINDOW_TITLE, Color, Screen, Vec2
from chainscape.enemy import ENEMY_SIZE
from chainscape.highscore import HighscoreClient, HighscoreState
from chainscape.hud import score_text, stats_text
from chainscape.markers import MARKER_SIZE
from chainscape.player import PLAYER_COLOR, PLAYER_SIZE, Camera
from chainscape.safezone import SAFEZONE_SIZE
from chainscape.squishy import Squishy
from chainscape.world import Powerup, World

log = logging.getLogger(__name__)

BACKGROUND = (24, 24, 28)
RIM_COLOR = Color.srgb(0.2, 0.2, 0.2)
POWERUP_SIZE = 48.0
_POWERUP_COLOR = Color(0.96, 0.78, 0.2)
_POWERUP_SQUISHY = Squishy(
    offset=0.0, frequency=0.5, scale_max=Vec2(1.2, 1.2), scale_min=Vec2(0.8, 0.8)
)
_POWERUP_IMAGES = {
    Powerup.SPEED: "up_speed",
    Powerup.EXPLOSION: "up_explosion",
    Powerup.COIN: "up_coin",
}
_CACHE_LIMIT = 512


class App:
    """Runs the game in a pygame window."""

    def __init__(
        self,
        world: World | None = None,
        assets_dir: str | Path | None = None,
        size: tuple[int, int] = (512, 768),
    ) -> None:
        self.world = world if world is not None else World(highscore=HighscoreClient())
        self.assets_dir = Path(assets_dir) if assets_dir is not None else None
        self.assets: GameAssets | None = None
        self.camera = Camera()
        self.size = size
        self.running = True
        self.handles = ResourceHandles()
        self.handles.add("assets", lambda: True, self._load_assets)
        self._cache: dict[tuple, pygame.Surface] = {}

    def _load_assets(self) -> None:
        if self.assets_dir is not None and self.assets_dir.is_dir():
            self.assets = GameAssets.load(self.assets_dir)

    def _scale(self) -> float:
        return self.camera.scale_for(*self.size)

    def _to_world(self, pos: Vec2) -> Vec2:
        return self.camera.viewport_to_world(pos, *self.size)

    def _to_screen(self, pos: Vec2) -> tuple[float, float]:
        scale = self._scale()
        width, height = self.size
        return (
            (pos.x - self.camera.position.x) / scale + width / 2.0,
            height / 2.0 - (pos.y - self.camera.position.y) / scale,
        )

    def handle_event(self, event: pygame.event.Event) -> bool:
        """React to one event; return False when the app should stop."""
        if event.type == pygame.QUIT:
            self.running = False
            return False
        if event.type == pygame.VIDEORESIZE:
            self.size = (max(event.w, 1), max(event.h, 1))
        elif event.type == pygame.MOUSEBUTTONDOWN:
            target = self._to_world(Vec2(*event.pos))
            overlay = self.world.highscore_state is not HighscoreState.CLOSED
            if overlay or event.button == 1:
                self.world.click(target)
        elif event.type == pygame.FINGERDOWN:
            width, height = self.size
            self.world.click(self._to_world(Vec2(event.x * width, event.y * height)))
        return True

    def run(self, max_frames: int | None = None) -> int:
        """Open the window and play until it closes; return the frames shown."""
        pygame.init()
        try:
            surface = pygame.display.set_mode(self.size, pygame.RESIZABLE)
            pygame.display.set_caption(WINDOW_TITLE)
            font = pygame.font.Font(None, 24)
            ticker = pygame.time.Clock()
            frames = 0
            while self.running and (max_frames is None or frames < max_frames):
                delta = ticker.tick(60) / 1000.0
                for event in pygame.event.get():
                    self.handle_event(event)
                if self.world.screen is Screen.LOADING:
                    self.handles.update()
                    if next_screen(self.handles) is Screen.RESET:
                        self.world.reset()
                else:
                    self.world.update(delta)
                self.camera.position = self.world.player.position
                self._draw(surface, font)
                pygame.display.flip()
                frames += 1
            return frames
        finally:
            pygame.quit()

    def _sprite(
        self,
        surface: pygame.Surface,
        name: str,
        position: Vec2,
        size: Vec2,
        color: Color,
        rotation: float = 0.0,
    ) -> None:
        scale = self._scale()
        width = max(int(size.x / scale), 1)
        height = max(int(size.y / scale), 1)
        center = self._to_screen(position)
        r, g, b, a = color.to_rgba8()
        if self.assets is None:
            pygame.draw.circle(surface, (r, g, b), center, max(width, height) / 2)
            return
        key = (name, width, height, r, g, b)
        image = self._cache.get(key)
        if image is None:
            if len(self._cache) > _CACHE_LIMIT:
                self._cache.clear()
            image = pygame.transform.scale(getattr(self.assets, name), (width, height))
            image = image.convert_alpha()
            image.fill((r, g, b, 255), special_flags=pygame.BLEND_RGBA_MULT)
            self._cache[key] = image
        if rotation:
            image = pygame.transform.rotate(image, math.degrees(rotation))
        image.set_alpha(a)
        surface.blit(image, image.get_rect(center=center))

    def _visible(self, position: Vec2, margin: float) -> bool:
        x, y = self._to_screen(position)
        width, height = self.size
        return -margin <= x <= width + margin and -margin <= y <= height + margin

    def _text(self, surface, font, text: str, pos, alpha: int = 255, anchor="topleft"):
        label = font.render(text, True, (255, 255, 255))
        label.set_alpha(alpha)
        surface.blit(label, label.get_rect(**{anchor: pos}))

    def _draw(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        surface.fill(BACKGROUND)
        world = self.world
        if world.screen is not Screen.GAMEPLAY:
            return
        now = world.now
        player = world.player
        scale = self._scale()
        rim = RIM_COLOR.to_rgba8()[:3]

        for segment in world.outer_area:
            side = Vec2.from_angle(segment.rotation + math.pi / 2) * segment.half_length
            pygame.draw.line(
                surface,
                rim,
                self._to_screen(segment.position + side),
                self._to_screen(segment.position - side),
                max(int(64 / scale), 1),
            )

        for zone in world.safezones:
            self._sprite(
                surface,
                "safezone",
                zone.position,
                Vec2(SAFEZONE_SIZE, SAFEZONE_SIZE),
                zone.color.with_alpha(zone.alpha_for(player.position)),
            )

        pulse = _POWERUP_SQUISHY.scale_at(now)
        for position, powerup in world.powerups:
            if self._visible(position, 64):
                self._sprite(
                    surface,
                    _POWERUP_IMAGES[powerup],
                    position,
                    pulse * POWERUP_SIZE,
                    _POWERUP_COLOR,
                )

        for enemy in world.enemies:
            if self._visible(enemy.position, 64):
                size = Vec2(ENEMY_SIZE * enemy.scale.x, ENEMY_SIZE * enemy.scale.y)
                self._sprite(
                    surface, "enemy", enemy.position, size, enemy.color(now, world.enemy_noise)
                )

        for explosion in world.explosions:
            diameter = 2.0 * explosion.radius * 1.1
            self._sprite(
                surface,
                "circle",
                explosion.position,
                Vec2(diameter, diameter),
                Color(1.0, 1.0, 1.0, 0.75 * explosion.alpha),
            )

        if player.visible:
            squish = player.squishy.scale_at(now)
            self._sprite(
                surface,
                "player",
                player.position,
                Vec2(PLAYER_SIZE * squish.x, PLAYER_SIZE * squish.y),
                PLAYER_COLOR,
                player.rotation,
            )

        for marker in world.markers:
            placement = marker.place(player.position)
            self._sprite(
                surface,
                "arrow",
                placement.position,
                Vec2(MARKER_SIZE, MARKER_SIZE),
                placement.color,
                placement.rotation,
            )

        for popup in world.floats:
            self._text(
                surface,
                font,
                popup.text,
                self._to_screen(popup.position),
                int(popup.alpha * 255),
                "midbottom",
            )

        if world.delayed is not None:
            x, y = self._to_screen(player.position + Vec2(24.0, 24.0))
            self._text(surface, font, world.delayed.label, (x, y), anchor="bottomleft")

        width, height = self.size
        awake = sum(1 for e in world.enemies if e.state.name == "AWAKE")
        self._text(surface, font, score_text(player, now), (width - 16, 16), anchor="topright")
        self._text(
            surface,
            font,
            stats_text(awake, player.kill_count),
            (width - 16, height - 16),
            anchor="bottomright",
        )
        self._draw_highscore(surface, font)

    def _draw_highscore(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        state = self.world.highscore_state
        if state is HighscoreState.CLOSED:
            return
        width, height = self.size
        shade = pygame.Surface((width, height), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 191))
        surface.blit(shade, (0, 0))
        column = min(320, width - 64)
        left = (width - column) / 2
        self._text(surface, font, "Highscore", (left, 32))
        if state is HighscoreState.LOADING:
            self._text(surface, font, "Loading...", (left, 64))
            return
        for row, entry in enumerate(self.world.highscore_entries):
            y = 64 + row * 24
            self._text(surface, font, entry.player, (left, y))
            self._text(surface, font, str(entry.score), (left + column, y), anchor="topright")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chainscape", description=WINDOW_TITLE)
    parser.add_argument("--assets", default="assets", help="directory holding images/")
    parser.add_argument("--frames", type=int, default=None, help="stop after N frames")
    parser.add_argument("--seed", type=int, default=1, help="random seed")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    from chainscape.rand import Rand

    world = World(rand=Rand(args.seed), highscore=HighscoreClient())
    App(world=world, assets_dir=args.assets).run(args.frames)
    return 0