"""Session, creation form and sharing schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field, HttpUrl

from typemotion.config import settings
from typemotion.models import ViewState, ScreenMode, Panel


class GenerationCreateRequest(BaseModel):
    """Request body for starting a generation run."""

    text: str = Field(..., min_length=1, max_length=settings.max_text_length)
    style: str = Field(default="", max_length=2000)
    typography_prompt: str = Field(default="", max_length=1000)
    reference_image: Optional[str] = Field(
        default=None,
        description="Reference image as a base64 data URL (see /uploads/reference)",
    )
    content_url: str = Field(default="", max_length=2000)


class StyleSuggestionRequest(BaseModel):
    """Request to suggest a visual style for the product text."""

    text: str = Field(..., min_length=1, max_length=settings.max_text_length)


class StyleSuggestionResponse(BaseModel):
    style: str


class ReferenceImageResponse(BaseModel):
    """Uploaded reference image, ready to embed in a generation request."""

    data_url: str
    mime_type: str
    size_bytes: int


class ScreenChangeRequest(BaseModel):
    screen: ScreenMode


class KeySelectRequest(BaseModel):
    api_key: str = Field(..., min_length=1)


class KeyStatusResponse(BaseModel):
    has_selected_key: bool
    show_key_dialog: bool
    billing_docs_url: str


class SessionSnapshot(BaseModel):
    """Everything the frontend needs to render the current panel."""

    state: ViewState
    screen: ScreenMode
    panel: Panel
    status_message: str = ""
    caption: str = ""
    image_data_url: Optional[str] = None
    video_url: Optional[str] = None
    content_url: str = ""
    show_key_dialog: bool = False
    can_submit: bool = False
    copied: bool = False
    has_profile: bool = False
    profile_first_name: Optional[str] = None
    is_suggesting_style: bool = False


class ShareAction(BaseModel):
    """
    Result of a sharing action.

    The browser copies `clipboard_text` (when set) and opens `url`.
    """

    clipboard_text: Optional[str] = None
    url: Optional[str] = None
    notice: Optional[str] = None


class GalleryVideo(BaseModel):
    id: str
    title: str
    video_url: HttpUrl
    description: str


class GalleryResponse(BaseModel):
    videos: List[GalleryVideo]
    rotation_seconds: float
    current_index: int = 0


class TypographyPreset(BaseModel):
    id: str
    label: str
    prompt: str


class TypographyListResponse(BaseModel):
    presets: List[TypographyPreset]
