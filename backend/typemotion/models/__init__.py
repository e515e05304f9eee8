"""
Models for the application.
All models are exported here for convenient imports:
    from typemotion.models import ViewState, UserProfile, GenerationRequest, ...
"""

from typemotion.models.enums import ViewState, ScreenMode, Panel
from typemotion.models.base import TimestampedModel, utc_now
from typemotion.models.profile import (
    PROFILE_KEY,
    UserProfile,
    UserProfileWrite,
    UserProfileRead,
)
from typemotion.models.generation import (
    GenerationRequest,
    GenerationResult,
    ImagePayload,
    ContentPart,
    OperationToken,
    OperationStatus,
)

__all__ = [
    # Enums
    "ViewState",
    "ScreenMode",
    "Panel",
    # Base
    "TimestampedModel",
    "utc_now",
    # Profile
    "PROFILE_KEY",
    "UserProfile",
    "UserProfileWrite",
    "UserProfileRead",
    # Generation
    "GenerationRequest",
    "GenerationResult",
    "ImagePayload",
    "ContentPart",
    "OperationToken",
    "OperationStatus",
]
