"""
LangGraph state definition.
Defines the data that flows through the generation pipeline.
"""

from typing import Optional, TypedDict

from typemotion.models import GenerationRequest, ImagePayload


class GraphState(TypedDict, total=False):
    """State that flows through the LangGraph pipeline.

    Nodes return partial updates; the session controller applies each
    update as it is streamed.
    """

    # Input from user
    request: GenerationRequest
    style: str  # resolved style (user value or catalog pick)

    # Generated data (populated by nodes)
    caption: Optional[str]
    image: Optional[ImagePayload]
    video_url: Optional[str]

    # Error handling
    error: Optional[str]
    failed_stage: Optional[str]  # "image" or "video"
    current_step: str
