import math
from datetime import date, timedelta
from typing import List, NamedTuple, Optional

from app.config import settings

# (badge id, predicate over the profile after the award)
BADGE_RULES = [
    ("first_log", lambda p: (p.xp or 0) > 0),
    ("xp_100", lambda p: (p.xp or 0) >= 100),
    ("xp_500", lambda p: (p.xp or 0) >= 500),
    ("xp_1000", lambda p: (p.xp or 0) >= 1000),
    ("streak_7", lambda p: (p.longest_streak or 0) >= 7),
    ("streak_30", lambda p: (p.longest_streak or 0) >= 30),
]


class LevelInfo(NamedTuple):
    level: int
    progress: float  # percent toward the next level, in [0, 100)


def compute_level(xp: int, factor: Optional[int] = None) -> LevelInfo:
    """level = floor(sqrt(xp / k)) + 1; level L starts at k * (L - 1)^2 xp."""
    k = factor or settings.LEVEL_XP_FACTOR
    xp = max(xp or 0, 0)
    level = math.isqrt(xp // k) + 1
    current_floor = k * (level - 1) ** 2
    next_floor = k * level ** 2
    progress = (xp - current_floor) / (next_floor - current_floor) * 100
    # floor to 2 decimals so rounding never reaches 100
    return LevelInfo(level, math.floor(progress * 100) / 100)


def next_streak(
    current: int,
    longest: int,
    last_active: Optional[date],
    today: date,
):
    """Returns (current, longest, last_active) after activity on `today`."""
    if last_active == today:
        current = max(current or 0, 1)
    elif last_active is not None and last_active == today - timedelta(days=1):
        current = (current or 0) + 1
    else:
        current = 1
    return current, max(longest or 0, current), today


def evaluate_badges(profile) -> List[str]:
    """Badge ids the profile qualifies for and does not hold yet."""
    held = set(profile.badges or [])
    return [badge for badge, rule in BADGE_RULES if badge not in held and rule(profile)]


def apply_activity(profile, today: date) -> List[str]:
    """Update streak counters and badges after profile.xp has been credited.

    Returns the newly earned badge ids.
    """
    profile.current_streak, profile.longest_streak, profile.last_active_date = next_streak(
        profile.current_streak, profile.longest_streak, profile.last_active_date, today
    )
    earned = evaluate_badges(profile)
    if earned:
        # new list so the JSON column registers the change
        profile.badges = list(profile.badges or []) + earned
    return earned


def effective_streak(current: int, last_active: Optional[date], today: date) -> int:
    """A streak not extended yesterday or today has lapsed, whatever is stored."""
    if last_active is None or last_active < today - timedelta(days=1):
        return 0
    return current or 0
