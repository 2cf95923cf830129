from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from app.database import Base
from app.utils.dates import utcnow


class GoalNote(Base):
    __tablename__ = "goal_notes"

    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)




class MilestonePhoto(Base):
    __tablename__ = "milestone_photos"

    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id"), nullable=False)
    image_url = Column(Text, nullable=False)  # http(s) URL or data-URI
    caption = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
