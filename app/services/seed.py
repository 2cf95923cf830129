"""Starter data for an empty database: the couple's goal board and two profiles."""
import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.goal import Goal
from app.models.user import UserProfile
from app.services import progress
from app.services.periods import RESET_PERIODS

logger = logging.getLogger(__name__)

ROADMAP_STEPS = [
    "Businessplan", "Branding", "Website", "Product", "Social media",
    "Financiën + prijs", "Proefklant", "Eerste volwaardige klant",
]


def _roadmap(done: int) -> dict:
    return {"steps": [{"title": t, "completed": i < done} for i, t in enumerate(ROADMAP_STEPS)]}


def _room(*items) -> dict:
    return {"items": [{"title": title, "completed": completed} for title, completed in items]}


SEED_GOALS = [
    # lifestyle
    dict(title="Max wiet per week", category="lifestyle", type="counter", current_value=1, target_value=3,
         unit="g", icon="🌿", color="bg-green-500", reset_period="weekly"),
    dict(title="Alcohol per week", category="lifestyle", type="counter", current_value=2, target_value=5,
         unit="drinks", icon="🍷", color="bg-red-400", reset_period="weekly"),
    dict(title="Sport per week", category="lifestyle", type="counter", current_value=2, target_value=4,
         unit="workouts", icon="💪", color="bg-blue-500", reset_period="weekly"),
    dict(title="Budget boodschappen", category="lifestyle", type="progress", current_value=250, target_value=400,
         unit="€", icon="🛒", color="bg-orange-400", reset_period="monthly"),
    # savings
    dict(title="Tokio Trip", category="savings", type="progress", current_value=1200, target_value=5000,
         unit="€", icon="🇯🇵", color="bg-gradient-to-r from-pink-500 to-purple-500"),
    dict(title="Canada + New York", category="savings", type="progress", current_value=3000, target_value=8000,
         unit="€", icon="🍁", color="bg-gradient-to-r from-red-500 to-blue-500"),
    # business
    dict(title="Visibilita Locale", category="business", type="roadmap", icon="🚀", color="bg-indigo-500",
         metadata=_roadmap(3)),
    dict(title="Wine Import", category="business", type="roadmap", icon="🍇", color="bg-purple-600",
         metadata=_roadmap(1)),
    # casa
    dict(title="Woonkamer", category="casa", type="room", icon="🛋️", color="bg-stone-500",
         metadata=_room(("Schilderen", True), ("Nieuwe bank", True), ("Lampen ophangen", True),
                        ("Gordijnen", True), ("Kast opbouwen", False))),
    dict(title="Keuken", category="casa", type="room", icon="🍳", color="bg-stone-400",
         metadata=_room(("Tegels", True), ("Kraan vervangen", True), ("Kastjes", False),
                        ("Werkblad", False), ("Verlichting", False))),
    dict(title="Tuin", category="casa", type="room", icon="🌳", color="bg-green-600",
         metadata=_room(("Onkruid wieden", True), ("Terras", False), ("Schutting", False),
                        ("Planten", False), ("Tuinmeubels", False))),
    # milestones
    dict(title="Samenwonen", category="milestones", type="boolean", current_value=1, target_value=1,
         icon="🏠", color="bg-teal-500"),
    dict(title="Eerste huurder", category="milestones", type="boolean", current_value=0, target_value=1,
         icon="🔑", color="bg-yellow-500"),
    dict(title="Italiaans leren", category="milestones", type="boolean", current_value=0, target_value=1,
         icon="🇮🇹", color="bg-green-500"),
    # fun
    dict(title="Dagen samen", category="fun", type="counter", current_value=0, unit="days",
         icon="❤️", color="bg-red-500", is_auto_calculated=True),
    dict(title="Keer uit eten", category="fun", type="counter", current_value=42, unit="times",
         icon="🍽️", color="bg-orange-500"),
]

SEED_USERS = [
    dict(name="Partner 1", avatar="man"),
    dict(name="Partner 2", avatar="woman"),
]


def build_seed_goals(now: datetime):
    goals = []
    for position, fields in enumerate(SEED_GOALS):
        data = dict(fields)
        raw_metadata = data.pop("metadata", None)
        goal = Goal(**data, sort_order=position, created_at=now)
        if goal.type in progress.LEAF_TYPES:
            progress.sync_leaf_counts(goal, progress.parse_metadata(goal.type, raw_metadata))
        if goal.reset_period in RESET_PERIODS:
            goal.period_start_date = now
        goals.append(goal)
    return goals


async def seed_database(db: AsyncSession, now: datetime) -> bool:
    """Insert the starter goals and profiles. Returns False when goals already exist."""
    result = await db.execute(select(func.count(Goal.id)))
    if result.scalar_one():
        return False

    goals = build_seed_goals(now)
    db.add_all(goals)

    result = await db.execute(select(func.count(UserProfile.id)))
    if not result.scalar_one():
        db.add_all([UserProfile(**u, xp=0, badges=[], created_at=now) for u in SEED_USERS])

    await db.commit()
    logger.info("Seeded %d goals", len(goals))
    return True
