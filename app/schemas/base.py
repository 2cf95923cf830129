from datetime import datetime, timezone

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }

    @field_validator("*", mode="after")
    @classmethod
    def naive_datetimes_are_utc(cls, v):
        # SQLite drops tzinfo; every stored timestamp is UTC
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
