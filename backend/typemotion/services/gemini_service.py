"""
Generation client: caption, style suggestion, image and video.

Every provider call goes through a GenAIGateway. Style suggestion and
caption generation have mandatory fallbacks and never raise; image and
video generation raise GenerationFailure on an empty result.
"""
import asyncio
import base64
import random
import uuid
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

import httpx

from typemotion.config import settings
from typemotion.models import (
    ContentPart,
    GenerationRequest,
    ImagePayload,
    OperationStatus,
)
from typemotion.services.credentials import CredentialProvider
from typemotion.services.errors import CaptionFailure, GenerationFailure, SuggestionFailure
from typemotion.services.genai_gateway import GenAIGateway
from typemotion.utils.logging import get_logger
from typemotion.utils.media import clean_base64, create_blank_image, split_data_url

logger = get_logger(__name__)

DEFAULT_STYLE_SUGGESTION = "minimalist cinematic scene, dramatic lighting"
DEFAULT_TYPOGRAPHY = "High-quality luxury typography."
MIN_CAPTION_LENGTH = 5
MAX_CAPTION_LENGTH = 160

FALLBACK_CAPTIONS = [
    "🔥 OFERTA! Confira agora esse incrível {text}. Qualidade garantida e preço especial hoje! 🚀",
    "⚡ ACHADINHO: Acabamos de encontrar o melhor {text} para você. Aproveite antes que acabe! 😍",
    "🚨 PROMOÇÃO! {text} com o visual que você sempre quis. Design e performance únicos! ✅",
    "✨ NOVIDADE! O {text} que é tendência absoluta chegou. Garanta o seu com exclusividade! 💎",
]

Sleep = Callable[[float], Awaitable[None]]


def fallback_caption(text: str, rng: Optional[random.Random] = None) -> str:
    """
    Pick one of the built-in promotional templates.

    Long product text is shortened so the caption stays within
    MAX_CAPTION_LENGTH.
    """
    template = (rng or random).choice(FALLBACK_CAPTIONS)
    room = MAX_CAPTION_LENGTH - len(template.format(text=""))
    if len(text) > room:
        text = text[: room - 1].rstrip() + "…"
    return template.format(text=text)


def build_style_prompt(text: str) -> str:
    return (
        "Write a 10-word cinematic visual description for a text animation of: "
        f'"{text}". Focus on lighting, materials and environment. '
        "Answer with the description only."
    )


def build_caption_prompt(text: str, style: str, language: str) -> str:
    return f"""Write a short, high-impact viral advertisement in {language} for the product: "{text}".
The visual style is: "{style}".
CRITICAL RULE: the text must have AT MOST 150 characters so emojis fit.
Do not include the link in the text, it will be added later.
Use urgency or quality triggers.
Only the advertisement text."""


def build_image_prompt(
    text: str, style: str, typography: str, with_reference: bool
) -> str:
    if with_reference:
        return (
            f'Create a cinematic image with the text "{text}" written in it. '
            "Match the environment and palette of the provided image. "
            f"Typography: {typography}. Visual style: {style}."
        )
    return (
        f'A hyper-realistic cinematic 8k image featuring the text "{text}". '
        f"Typography: {typography}. Environment style: {style}. "
        "Dramatic lighting, professional design."
    )


def build_video_prompt(text: str, style: str, caption: str) -> str:
    return f"""A high-end cinematic product commercial for "{text}".
The video features elegant, non-aggressive advertising legends displaying the text: "{caption}".
The typography materializes softly within the scene, integrated into the {style} environment.
The legends are comfortable, minimalist, and aesthetically pleasing, not distracting from the product.
Extreme focus on the craftsmanship and details of the product.
Smooth, professional camera motion. {style}. High definition."""


class GenerationClient:
    """Stable local interface over the text, image and video models."""

    def __init__(
        self,
        gateway: GenAIGateway,
        credentials: CredentialProvider,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
        poll_interval: Optional[float] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        static_dir: Optional[Path] = None,
    ):
        self.gateway = gateway
        self.credentials = credentials
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.poll_interval = (
            settings.video_poll_interval_seconds if poll_interval is None else poll_interval
        )
        self.http_transport = http_transport
        self.static_base = Path(static_dir or settings.static_dir)
        self.output_dir = self.static_base / "videos"

    async def suggest_style(self, text: str) -> str:
        """
        Suggest a short cinematic style description.

        Never raises: any failure yields DEFAULT_STYLE_SUGGESTION.
        """
        try:
            answer = await self.gateway.generate_text(
                settings.text_model, build_style_prompt(text)
            )
            suggestion = (answer or "").strip()
            if not suggestion:
                raise SuggestionFailure("Empty style suggestion")
            return suggestion
        except Exception as e:
            logger.warning("Style suggestion failed, using default", error=str(e))
            return DEFAULT_STYLE_SUGGESTION

    async def generate_caption(self, text: str, style: str, link: str = "") -> str:
        """
        Generate the promotional caption.

        The link is never part of the caption; sharing appends it.
        Never raises: a failed or too short answer yields a template.
        """
        try:
            answer = await self.gateway.generate_text(
                settings.text_model,
                build_caption_prompt(text, style, settings.caption_language),
            )
            caption = (answer or "").strip()[:MAX_CAPTION_LENGTH]
            if len(caption) < MIN_CAPTION_LENGTH:
                raise CaptionFailure("Caption empty or too short")
            logger.info("Caption generated", length=len(caption), has_link=bool(link))
            return caption
        except Exception as e:
            logger.warning("Caption generation failed, using template", error=str(e))
            return fallback_caption(text, self.rng)

    async def generate_image(self, request: GenerationRequest, style: str) -> ImagePayload:
        """
        Generate the still image with the product text rendered in it.

        Raises:
            GenerationFailure: The model answered without an image part.
        """
        typography = request.typography_prompt.strip() or DEFAULT_TYPOGRAPHY
        parts: List[ContentPart] = []

        if request.reference_image:
            mime_type, payload = split_data_url(request.reference_image)
            parts.append(ContentPart(data=base64.b64decode(payload), mime_type=mime_type))
            parts.append(
                ContentPart(text=build_image_prompt(request.text, style, typography, True))
            )
        else:
            parts.append(
                ContentPart(text=build_image_prompt(request.text, style, typography, False))
            )

        logger.info(
            "Generating image",
            text_preview=request.text[:30],
            with_reference=bool(request.reference_image),
        )

        response_parts = await self.gateway.generate_image(
            settings.image_model,
            parts,
            aspect_ratio=settings.image_aspect_ratio,
            image_size=settings.image_size,
        )

        for part in response_parts:
            if part.has_inline_data and part.data:
                return ImagePayload(
                    data=base64.b64encode(part.data).decode("utf-8"),
                    mime_type=part.mime_type or "image/png",
                )

        raise GenerationFailure("image")

    async def wait_for_operation(self, status: OperationStatus) -> OperationStatus:
        """
        Poll the video job until it reports completion.

        Fixed interval, no backoff, no timeout. Transport errors propagate.
        """
        polls = 0
        while not status.done:
            await self.sleep(self.poll_interval)
            status = await self.gateway.poll(status.token)
            polls += 1
            logger.debug("Video operation polled", operation=status.token.name, polls=polls)
        return status

    async def generate_video(
        self, text: str, image: ImagePayload, style: str, caption: str
    ) -> str:
        """
        Animate the generated image into a short clip.

        The generated image is the last frame; a blank frame opens the clip.

        Returns:
            str: Public URL of the stored video

        Raises:
            GenerationFailure: The finished job carries no video.
        """
        start_frame = ContentPart(
            data=base64.b64decode(
                create_blank_image(settings.start_frame_width, settings.start_frame_height)
            ),
            mime_type="image/png",
        )
        last_frame = ContentPart(
            data=base64.b64decode(clean_base64(image.data)),
            mime_type=image.mime_type,
        )

        token = await self.gateway.submit_video(
            settings.video_model,
            build_video_prompt(text, style, caption),
            start_frame=start_frame,
            last_frame=last_frame,
            number_of_videos=1,
            resolution=settings.video_resolution,
            aspect_ratio=settings.video_aspect_ratio,
        )

        status = await self.wait_for_operation(OperationStatus(token=token))

        if status.error:
            raise GenerationFailure("video", status.error)
        if not status.video_uris:
            raise GenerationFailure("video")

        return await self.download_video(status.video_uris[0])

    async def download_video(self, uri: str) -> str:
        """Fetch the finished video and store it under the static directory."""
        # The URI carries its own query (alt=media); the key is added to it
        url = httpx.URL(uri).copy_merge_params({"key": self.credentials.api_key})
        async with httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            follow_redirects=True,
            transport=self.http_transport,
        ) as client:
            r = await client.get(url)
            r.raise_for_status()
            content = r.content

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / f"{uuid.uuid4().hex}.mp4"
        output_path.write_bytes(content)
        logger.info("Video stored", path=str(output_path), size=len(content))

        relative_path = output_path.relative_to(self.static_base)
        return "/static/" + str(relative_path).replace("\\", "/")

    def release_video(self, video_url: Optional[str]) -> None:
        """Delete a stored video that is no longer displayed."""
        if not video_url or not video_url.startswith("/static/"):
            return
        path = self.static_base / video_url[len("/static/"):]
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to release video", path=str(path), error=str(e))
