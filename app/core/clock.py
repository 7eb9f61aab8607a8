import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    # naive UTC everywhere, the database columns carry no timezone
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_secret_id() -> str:
    return str(uuid.uuid4())


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
