"""
Base model configuration for all SQLModel classes.
Provides common fields and utilities.
"""
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class TimestampedModel(SQLModel):
    """
    Base model with an update timestamp.

    All database models should inherit from this.
    """
    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False
    )
