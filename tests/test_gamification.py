from datetime import date
from types import SimpleNamespace

import pytest

from app.services.gamification import (
    apply_activity, compute_level, effective_streak, evaluate_badges, next_streak,
)

TODAY = date(2026, 10, 19)


@pytest.mark.parametrize(
    "xp, level, progress",
    [
        (0, 1, 0.0),
        (50, 1, 50.0),
        (100, 2, 0.0),
        (399, 2, 99.66),
        (400, 3, 0.0),
    ],
)
def test_level_curve(xp, level, progress):
    info = compute_level(xp, factor=100)
    assert info.level == level
    assert info.progress == progress


def test_level_progress_never_reaches_100():
    for xp in range(0, 2000, 7):
        assert 0 <= compute_level(xp, factor=100).progress < 100


def test_streak_continues_from_yesterday():
    assert next_streak(4, 6, date(2026, 10, 18), TODAY) == (5, 6, TODAY)


def test_streak_unchanged_on_same_day():
    assert next_streak(4, 6, TODAY, TODAY) == (4, 6, TODAY)


def test_streak_restarts_after_gap():
    assert next_streak(9, 9, date(2026, 10, 10), TODAY) == (1, 9, TODAY)
    assert next_streak(0, 0, None, TODAY) == (1, 1, TODAY)


def test_lapsed_streak_reads_as_zero():
    assert effective_streak(5, date(2026, 10, 17), TODAY) == 0
    assert effective_streak(5, date(2026, 10, 18), TODAY) == 5
    assert effective_streak(5, None, TODAY) == 0


def test_badges_are_awarded_once():
    profile = SimpleNamespace(xp=120, longest_streak=7, current_streak=7,
                              last_active_date=date(2026, 10, 18), badges=["first_log"])
    assert evaluate_badges(profile) == ["xp_100", "streak_7"]

    earned = apply_activity(profile, TODAY)

    assert earned == ["xp_100", "streak_7"]
    assert profile.current_streak == 8
    assert profile.badges == ["first_log", "xp_100", "streak_7"]
    assert apply_activity(profile, TODAY) == []
