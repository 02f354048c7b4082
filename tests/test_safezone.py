import pytest

from chainscape.core import Vec2
from chainscape.safezone import COLOR, FADE_DISTANCE, Safezone


def test_alpha_is_full_on_zone():
    zone = Safezone(Vec2(100.0, 100.0))
    assert zone.alpha_for(Vec2(100.0, 100.0)) == pytest.approx(1.0)


@pytest.mark.parametrize("distance", [FADE_DISTANCE, 1000.0])
def test_alpha_floor_far_away(distance):
    zone = Safezone(Vec2())
    assert zone.alpha_for(Vec2(distance, 0.0)) == pytest.approx(0.25)


def test_alpha_grows_when_approaching():
    zone = Safezone(Vec2())
    alphas = [zone.alpha_for(Vec2(d, 0.0)) for d in (250.0, 150.0, 50.0, 0.0)]
    assert all(a < b for a, b in zip(alphas, alphas[1:]))


def test_default_colour():
    zone = Safezone(Vec2())
    assert zone.color == COLOR
    assert zone.color.alpha == 1.0


def test_contains_centre_and_not_far_points():
    zone = Safezone(Vec2(50.0, -20.0))
    assert zone.contains(Vec2(50.0, -20.0), 0.0)
    assert not zone.contains(Vec2(500.0, -20.0), 16.0)


def test_contains_is_symmetric():
    zone = Safezone(Vec2(10.0, 10.0))
    for offset in (Vec2(30.0, 0.0), Vec2(-30.0, 0.0), Vec2(0.0, 30.0), Vec2(0.0, -30.0)):
        assert zone.contains(Vec2(10.0, 10.0) + offset, 0.0)
    for offset in (Vec2(40.0, 0.0), Vec2(-40.0, 0.0), Vec2(0.0, 40.0), Vec2(0.0, -40.0)):
        assert not zone.contains(Vec2(10.0, 10.0) + offset, 0.0)


def test_corners_are_rounded():
    zone = Safezone(Vec2())
    assert zone.contains(Vec2(31.0, 0.0), 0.0)
    assert not zone.contains(Vec2(31.0, 31.0), 0.0)


def test_larger_radius_reaches_further():
    zone = Safezone(Vec2())
    point = Vec2(45.0, 0.0)
    assert not zone.contains(point, 0.0)
    assert zone.contains(point, 16.0)


def test_negative_radius_rejected():
    with pytest.raises(ValueError):
        Safezone(Vec2()).contains(Vec2(), -1.0)