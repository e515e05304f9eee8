"""
Generation domain objects.

GenerationRequest is built from the creation form and frozen once
submitted. GenerationResult is filled in stage by stage.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from typemotion.config import settings


class GenerationRequest(BaseModel):
    """User input for one generation run."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., max_length=settings.max_text_length)
    style: str = ""
    typography_prompt: str = ""
    reference_image: Optional[str] = Field(
        default=None, description="Reference image as a base64 data URL"
    )
    content_url: str = ""

    @field_validator("style", "typography_prompt", "content_url", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def is_valid(self) -> bool:
        return bool(self.text.strip())


class ImagePayload(BaseModel):
    """Generated image as base64 data plus its mime type."""

    data: str
    mime_type: str = "image/png"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class GenerationResult(BaseModel):
    """Outputs of the current run."""

    caption: str = ""
    image: Optional[ImagePayload] = None
    video_url: Optional[str] = None


class ContentPart(BaseModel):
    """One part of a multimodal prompt or model response."""

    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @property
    def has_inline_data(self) -> bool:
        return self.data is not None


class OperationToken(BaseModel):
    """Opaque handle of a long-running video job."""

    model_config = ConfigDict(frozen=True)

    name: str


class OperationStatus(BaseModel):
    """Result of polling a long-running video job."""

    token: OperationToken
    done: bool = False
    video_uris: List[str] = Field(default_factory=list)
    error: Optional[str] = None
