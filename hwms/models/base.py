# hwms/models/base.py
from enum import Enum as PyEnum

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    All hospitals share one set of tables; tenant-bound rows carry hospital_id.
    """

    pass


def enum_values(enum_cls: type[PyEnum]) -> list[str]:
    """Persist enum *values* (lower-case) rather than member names."""
    return [member.value for member in enum_cls]
