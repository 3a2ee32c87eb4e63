from datetime import datetime, timezone

from pydantic import BaseModel


def format_utc(dt: datetime) -> str:
    """ISO 8601 with millisecond precision and an explicit 'Z'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# Response models with datetimes inherit from this so SQLite's naive values
# and Postgres' aware values serialize the same way.
class BaseConfig(BaseModel):
    class Config:
        from_attributes = True
        json_encoders = {
            datetime: format_utc
        }
