"""
PayDesk - Base Model

Base model class and mixins for all SQLAlchemy models.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def generate_id() -> str:
    """Generate a document id (string UUID4)."""
    return str(uuid.uuid4())


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AuditMixin:
    """Mixin that adds audit fields for tracking who created/updated records."""

    created_by_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
    )
    updated_by_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
    )


class BaseModel(Base, TimestampMixin):
    """
    Abstract base model with a string document id and timestamps.
    All models should inherit from this class.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_id,
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
