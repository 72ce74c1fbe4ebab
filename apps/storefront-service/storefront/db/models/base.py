"""
Shared SQLAlchemy base and helpers.
"""
import uuid
from sqlalchemy.orm import declarative_base
from datetime import datetime, UTC


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


def new_id() -> str:
    """String primary keys keep ids portable between SQLite and Postgres."""
    return str(uuid.uuid4())


def as_utc(value):
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Base = declarative_base()
