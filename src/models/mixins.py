"""SQLAlchemy mixins for common timestamp and rating columns."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

DEFAULT_ELO = 1200


class CreatedAtMixin:
    """Insert timestamp populated by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class TimestampMixin(CreatedAtMixin):
    """Insert and last-update timestamps."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class EloRatingMixin:
    """Integer Elo rating column defaulting to the initial rating."""

    elo_rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_ELO,
        server_default=str(DEFAULT_ELO),
    )
