"""Declarative base for all database models.

Models register themselves on import; ``app.models`` imports every model
module so ``Base.metadata`` is complete once that package is loaded.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass
