import uuid

from sqlalchemy.orm import DeclarativeBase

from utils.dates import utcnow  # noqa: F401  column default for timestamps


def new_id() -> str:
     """Generate a new primary key (UUID4 string)."""
     return str(uuid.uuid4())


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Every model declares its own ``__tablename__``.
     """
