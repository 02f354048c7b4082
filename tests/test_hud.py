import pytest

from chainscape.core import Vec2
from chainscape.hud import FLOAT_ALPHA, AddScore, ScoreFloat, score_text, stats_text
from chainscape.player import Player


def make_float(score=15, position=Vec2(10.0, 20.0)):
    event = AddScore(score=score, position=position)
    return ScoreFloat(event.score, event.position)


def test_text_shows_points():
    assert make_float(score=15).text == "+15"


def test_update_rises_and_fades():
    popup = make_float()
    assert popup.update(0.1)
    assert popup.position.x == 10.0
    assert popup.position.y > 20.0
    assert 0.0 < popup.alpha < FLOAT_ALPHA


def test_alpha_decreases_over_time():
    popup = make_float()
    alphas = []
    while popup.update(0.1):
        alphas.append(popup.alpha)
    assert len(alphas) >= 5
    assert all(a > b for a, b in zip(alphas, alphas[1:]))


def test_popup_expires_after_lifetime():
    popup = make_float()
    assert not popup.update(1.0)
    assert not popup.update(0.1)


def test_rise_accelerates():
    popup = make_float(position=Vec2())
    popup.update(0.2)
    first = popup.position.y
    popup.update(0.2)
    second = popup.position.y - first
    assert second > first > 0.0


def test_score_text():
    player = Player(born=2.0)
    player.add_score(7)
    assert score_text(player, 2.0) == "score: 7"


def test_score_text_counts_kills():
    player = Player(born=0.0)
    points = player.add_kill(True)
    assert score_text(player, 0.0) == f"score: {points}"


def test_score_text_before_birth_fails():
    with pytest.raises(ValueError):
        score_text(Player(born=5.0), 1.0)


def test_stats_text():
    assert stats_text(3, 7) == "awake: 3, killed: 7"