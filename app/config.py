# app/config.py
from datetime import date
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    DATABASE_URL: str = Field("sqlite+aiosqlite:///./goals.db")
    SQL_ECHO: bool = Field(False)
    LOG_LEVEL: str = Field("INFO")

    # Seed goals and the two profiles when the goal table is empty
    SEED_ON_STARTUP: bool = Field(True)

    # Gamification
    LOG_XP_REWARD: int = Field(10)
    STEP_XP_REWARD: int = Field(25)
    GOAL_COMPLETE_XP_REWARD: int = Field(50)
    LEVEL_XP_FACTOR: int = Field(100)

    # Read windows
    ACTIVITY_FEED_LIMIT: int = Field(50)
    RECENT_LOGS_LIMIT: int = Field(100)

    # Reference start for auto-calculated goals without their own start date
    RELATIONSHIP_START_DATE: date = Field(date(2025, 10, 2))

    LIFESTYLE_WARNING_PERCENT: int = Field(30)

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        """
        Returns the async driver URL:
          - postgresql:// → postgresql+asyncpg://
          - anything else is used as given
        """
        url = self.DATABASE_URL or "sqlite+aiosqlite:///./goals.db"
        if url.startswith("postgresql://") and "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

settings = Settings()
