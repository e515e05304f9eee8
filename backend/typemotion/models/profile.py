"""
User profile model - the single local profile record.
"""
from datetime import datetime

from sqlmodel import Field, SQLModel

from typemotion.models.base import TimestampedModel

PROFILE_KEY = "typeMotion_profile"


class UserProfileBase(SQLModel):
    """Shared profile properties."""
    name: str = Field(min_length=1, max_length=255, nullable=False)
    phone: str = Field(min_length=1, max_length=50, nullable=False)
    instagram: str = Field(default="", max_length=500)
    twitter: str = Field(default="", max_length=500)
    tiktok: str = Field(default="", max_length=500)


class UserProfile(UserProfileBase, TimestampedModel, table=True):
    """
    Profile database model.
    Table: profiles

    Holds at most one row, keyed by PROFILE_KEY.
    """
    __tablename__ = "profiles"

    key: str = Field(default=PROFILE_KEY, primary_key=True, max_length=50)


class UserProfileWrite(UserProfileBase):
    """Schema for saving the profile. Always a full record."""
    pass


class UserProfileRead(UserProfileBase):
    """Schema for reading the profile."""
    updated_at: datetime

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""
