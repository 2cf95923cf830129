from sqlalchemy import func, select

from app.models.goal import Goal
from app.models.user import UserProfile
from app.services.seed import SEED_GOALS, seed_database
from app.utils.dates import utcnow


async def test_seed_populates_empty_database_once(db):
    assert await seed_database(db, utcnow()) is True
    assert await seed_database(db, utcnow()) is False

    goals = (await db.execute(select(Goal).order_by(Goal.sort_order))).scalars().all()
    assert len(goals) == len(SEED_GOALS)
    assert (await db.execute(select(func.count(UserProfile.id)))).scalar_one() == 2

    by_title = {g.title: g for g in goals}
    assert (by_title["Visibilita Locale"].current_value, by_title["Visibilita Locale"].target_value) == (3, 8)
    assert by_title["Woonkamer"].target_value == len(by_title["Woonkamer"].goal_metadata["items"])
    assert by_title["Sport per week"].period_start_date is not None
    assert by_title["Dagen samen"].is_auto_calculated
