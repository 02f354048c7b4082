import math
from concurrent.futures import Future

import pytest

from chainscape.core import Screen, Vec2
from chainscape.enemy import Enemy, EnemyState
from chainscape.highscore import HighscoreClient, HighscoreItem, HighscoreState
from chainscape.safezone import Safezone
from chainscape.world import (
    OUTER_SEGMENTS,
    WORLD_RADIUS,
    Powerup,
    World,
    player_name,
    spawn_outer_area,
)


class _InlineExecutor:
    def submit(self, fn, *args):
        future = Future()
        try:
            future.set_result(fn(*args))
        except Exception as err:  # noqa: BLE001
            future.set_exception(err)
        return future


def _empty_world(**kwargs):
    world = World(enemy_count=0, powerup_count=0, safezone_count=0, **kwargs)
    world.reset()
    return world


def test_reset_spawns_requested_counts():
    world = World(enemy_count=10, powerup_count=4, safezone_count=3)
    world.reset()
    assert world.screen is Screen.GAMEPLAY
    assert len(world.enemies) == 10
    assert len(world.powerups) == 4
    assert len(world.safezones) == 3
    assert [m.target for m in world.markers] == [z.position for z in world.safezones]
    for enemy in world.enemies:
        assert 256.0 <= enemy.position.length() < WORLD_RADIUS
        assert enemy.state is EnemyState.SLEEPING


def test_click_steers_at_fixed_speed():
    world = _empty_world()
    world.click(Vec2(100.0, 0.0))
    assert math.isclose(world.player.movement.target_velocity.length(), 130.0)
    assert world.player.movement.target_velocity.x > 0


def test_click_on_player_is_ignored():
    world = _empty_world()
    world.click(Vec2(0.0, 0.0))
    assert world.player.movement.target_velocity == Vec2()


def test_speed_powerup_doubles_velocity():
    world = _empty_world()
    world.click(Vec2(0.0, 50.0))
    world.apply_powerup(Powerup.SPEED)
    assert math.isclose(world.player.movement.target_velocity.length(), 260.0)


def test_coin_powerup_adds_score():
    world = _empty_world()
    world.apply_powerup(Powerup.COIN)
    gained = world.player.score(world.now)
    assert 30 <= gained <= 60 and gained % 10 == 0
    assert world.floats[0].score == gained


def test_explosion_kills_nearby_enemy():
    world = _empty_world()
    world.enemies = [Enemy(position=Vec2(150.0, 0.0), max_speed=120.0)]
    world.apply_powerup(Powerup.EXPLOSION)
    for _ in range(20):
        world.update(0.25)
        if world.delayed is None:
            break
    assert world.enemies == []
    assert world.player.kill_count == 1
    assert len(world.explosions) == 1
    assert 200.0 <= world.explosions[0].radius < 300.0


def test_touching_sleeping_enemy_kills_it():
    world = _empty_world()
    world.enemies = [Enemy(position=Vec2(20.0, 0.0), max_speed=120.0)]
    world.update(0.1)
    assert world.enemies == []
    assert world.player.kill_count == 1
    assert world.floats[0].score == 5


def test_touching_awake_enemy_ends_game():
    world = _empty_world()
    enemy = Enemy(position=Vec2(20.0, 0.0), max_speed=120.0)
    enemy.state = EnemyState.AWAKE
    enemy.collider_enabled = True
    world.enemies = [enemy]
    world.update(0.1)
    assert world.paused
    assert not world.player.visible


def test_reaching_safezone_wins():
    world = _empty_world()
    world.safezones = [Safezone(Vec2(0.0, 0.0))]
    world.update(0.1)
    assert world.player.safezone_reached
    assert world.paused
    assert world.player.visible


def test_end_game_posts_score():
    urls = []

    def fetch(url):
        urls.append(url)
        return 200, b'[{"player": "a", "score": 1}, {"player": "b", "score": 9}]'

    client = HighscoreClient(
        endpoint="https://scores.example.com/hs", fetch=fetch, executor=_InlineExecutor()
    )
    world = _empty_world(highscore=client, environ={"USER": "alice"})
    world.end_game(False)
    assert world.clock.paused
    assert world.highscore_state is HighscoreState.LOADING
    assert "player=alice" in urls[0]
    world.update(0.1)
    assert world.highscore_state is HighscoreState.AVAILABLE
    assert world.highscore_entries == [HighscoreItem("b", 9), HighscoreItem("a", 1)]


def test_click_after_game_over_resets():
    world = _empty_world()
    world.apply_powerup(Powerup.COIN)
    world.end_game(True)
    world.click(Vec2(10.0, 10.0))
    assert not world.paused
    assert not world.clock.paused
    assert world.highscore_state is HighscoreState.CLOSED
    assert world.player.score(world.now) == 0


def test_paused_world_does_not_move_player():
    world = _empty_world()
    world.click(Vec2(100.0, 0.0))
    world.end_game(True)
    world.update(0.2)
    assert world.player.position == Vec2()


def test_outer_area_ring():
    segments = spawn_outer_area(1000.0)
    assert len(segments) == OUTER_SEGMENTS
    for segment in segments:
        assert math.isclose(segment.position.length(), 1000.0)
        assert math.isclose(segment.half_length, 1000.0 / (2 * math.pi))


@pytest.mark.parametrize(
    "environ, expected",
    [({"USER": "alice"}, "alice"), ({"USER": "   "}, "Test"), ({}, "Test")],
)
def test_player_name(environ, expected):
    assert player_name(environ) == expected