"""Profile CRUD operations."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from typemotion.models import PROFILE_KEY, UserProfile, UserProfileRead, UserProfileWrite, utc_now


class ProfileCRUD:
    """Read and overwrite the single local profile record."""

    async def get(self, session: AsyncSession) -> Optional[UserProfileRead]:
        """Load the profile, or None if it was never saved."""
        profile = await session.get(UserProfile, PROFILE_KEY)
        if profile is None:
            return None
        return UserProfileRead.model_validate(profile, from_attributes=True)

    async def save(
        self, session: AsyncSession, data: UserProfileWrite
    ) -> UserProfileRead:
        """Create or replace the whole profile record."""
        profile = await session.get(UserProfile, PROFILE_KEY)
        if profile is None:
            profile = UserProfile(key=PROFILE_KEY, **data.model_dump())
            session.add(profile)
        else:
            for field, value in data.model_dump().items():
                setattr(profile, field, value)
            profile.updated_at = utc_now()
            session.add(profile)
        await session.commit()
        await session.refresh(profile)
        return UserProfileRead.model_validate(profile, from_attributes=True)


profile_crud = ProfileCRUD()
