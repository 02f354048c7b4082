import math

import pytest

from chainscape.core import Vec2
from chainscape.player import (
    KILL_SCORE_AWAKE,
    KILL_SCORE_SLEEPING,
    PLAYER_SPEED,
    SAFEZONE_BONUS,
    Camera,
    Player,
    steer_towards,
)


def test_score_counts_whole_seconds():
    player = Player(born=10.0)
    assert player.score(13.9) == 3
    assert player.score(10.0) == 0


def test_score_before_birth_raises():
    with pytest.raises(ValueError):
        Player(born=5.0).score(4.0)


def test_safezone_bonus_added():
    player = Player(born=0.0)
    without = player.score(7.5)
    player.safezone_reached = True
    assert player.score(7.5) - without == SAFEZONE_BONUS == 100


def test_add_kill_awake_and_sleeping():
    player = Player()
    assert player.add_kill(True) == KILL_SCORE_AWAKE == 15
    assert player.add_kill(False) == KILL_SCORE_SLEEPING == 5
    assert player.kill_count == 2
    assert player.score(0.0) == 20


def test_add_score_returns_delta_and_accumulates():
    player = Player()
    assert player.add_score(30) == 30
    assert player.add_score(40) == 40
    assert player.score(0.0) == 70


def test_add_score_negative_raises():
    with pytest.raises(ValueError):
        Player().add_score(-1)


def test_steer_towards_has_player_speed():
    velocity = steer_towards(Vec2(1.0, 1.0), Vec2(4.0, 5.0))
    assert velocity.length() == pytest.approx(PLAYER_SPEED)
    assert velocity.to_angle() == pytest.approx(math.atan2(4.0, 3.0))


def test_steer_towards_self_is_none():
    assert steer_towards(Vec2(2.0, 2.0), Vec2(2.05, 2.05)) is None


def test_camera_scale_tall_and_narrow():
    camera = Camera()
    assert camera.scale_for(512.0, 768.0) == pytest.approx(1.0)
    assert camera.scale_for(256.0, 768.0) == pytest.approx(2.0)


def test_camera_scale_wide_keeps_min_height():
    camera = Camera()
    assert camera.scale_for(2048.0, 768.0) == pytest.approx(camera.scale_for(512.0, 768.0))
    height = 400.0
    assert camera.scale_for(5000.0, height) * height == pytest.approx(camera.min_height)


def test_camera_scale_invalid_size():
    with pytest.raises(ValueError):
        Camera().scale_for(0.0, 100.0)


def test_viewport_center_is_camera_position():
    camera = Camera(position=Vec2(30.0, -12.0))
    assert camera.viewport_to_world(Vec2(400.0, 300.0), 800.0, 600.0) == camera.position


def test_viewport_corners_symmetric_and_y_flipped():
    camera = Camera(position=Vec2(5.0, 7.0))
    top_left = camera.viewport_to_world(Vec2(0.0, 0.0), 800.0, 600.0)
    bottom_right = camera.viewport_to_world(Vec2(800.0, 600.0), 800.0, 600.0)
    assert (top_left + bottom_right) / 2.0 == camera.position
    assert top_left.x < camera.position.x
    assert top_left.y > camera.position.y