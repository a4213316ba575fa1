from datetime import datetime, timezone
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import AfterValidator


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes (SQLite, HTML datetime-local inputs) are taken as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
