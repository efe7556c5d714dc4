from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware current time used as the default for timestamp columns."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base shared by every entity."""
