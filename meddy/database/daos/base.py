import uuid

from sqlalchemy.orm import Session


def as_uuid(value) -> uuid.UUID | None:
    """Coerce an identifier to ``UUID``; malformed identifiers yield ``None``."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def require_uuid(value, field: str) -> uuid.UUID:
    """Like `as_uuid`, but rejects malformed identifiers for rows about to be written."""
    parsed = as_uuid(value)
    if parsed is None:
        raise ValueError(f"Invalid {field}: {value!r}")
    return parsed


class BaseDao:
    """Holds the session every DAO operates on."""

    def __init__(self, session: Session):
        self.session = session
