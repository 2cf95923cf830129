from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Date, JSON
from app.database import Base
from app.utils.dates import utcnow

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False)  # lifestyle, savings, business, casa, milestones, fun
    type = Column(String, nullable=False)      # counter, progress, boolean, room, roadmap
    current_value = Column(Integer, nullable=False, default=0)
    target_value = Column(Integer, nullable=True)
    unit = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)
    # {"items": [...]} for room goals, {"steps": [...]} for roadmap goals
    goal_metadata = Column("metadata", JSON, nullable=True)

    reset_period = Column(String, nullable=False, default="none")  # none, weekly, monthly
    period_start_date = Column(DateTime(timezone=True), nullable=True)
    target_date = Column(DateTime(timezone=True), nullable=True)

    # Value is the number of days since auto_start_date (or the configured default)
    is_auto_calculated = Column(Boolean, nullable=False, default=False)
    auto_start_date = Column(Date, nullable=True)

    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)

class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id"), nullable=True)
    value = Column(Integer, nullable=False)  # signed delta
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)

class PeriodHistory(Base):
    __tablename__ = "period_history"

    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    period_type = Column(String, nullable=False)  # weekly, monthly
    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False)
    final_value = Column(Integer, nullable=False)
    target_value = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
