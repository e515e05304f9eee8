"""
Gateway to the Google generative AI service.

Wraps the google-genai async client behind plain request/response types
so the generation client never touches SDK objects and tests can swap
in a double.
"""
from typing import Dict, List, Optional, Protocol

from google import genai
from google.genai import types

from typemotion.config import settings
from typemotion.models import ContentPart, OperationStatus, OperationToken
from typemotion.services.credentials import CredentialProvider
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)


class GenAIGateway(Protocol):
    """Model calls used by the generation client."""

    async def generate_text(self, model: str, prompt: str) -> Optional[str]: ...

    async def generate_image(
        self,
        model: str,
        parts: List[ContentPart],
        aspect_ratio: str,
        image_size: str,
    ) -> List[ContentPart]: ...

    async def submit_video(
        self,
        model: str,
        prompt: str,
        start_frame: ContentPart,
        last_frame: ContentPart,
        number_of_videos: int,
        resolution: str,
        aspect_ratio: str,
    ) -> OperationToken: ...

    async def poll(self, token: OperationToken) -> OperationStatus: ...


def _to_sdk_part(part: ContentPart) -> types.Part:
    if part.has_inline_data:
        return types.Part.from_bytes(data=part.data, mime_type=part.mime_type or "image/png")
    return types.Part.from_text(text=part.text or "")


def _to_sdk_image(part: ContentPart) -> types.Image:
    return types.Image(image_bytes=part.data, mime_type=part.mime_type or "image/png")


def _status_from_operation(
    token: OperationToken, operation: types.GenerateVideosOperation
) -> OperationStatus:
    uris: List[str] = []
    if operation.response and operation.response.generated_videos:
        for generated in operation.response.generated_videos:
            if generated.video and generated.video.uri:
                uris.append(generated.video.uri)

    error = None
    if operation.error:
        error = str(operation.error.get("message") or operation.error)

    return OperationStatus(
        token=token,
        done=bool(operation.done),
        video_uris=uris,
        error=error,
    )


class GoogleGenAIGateway:
    """GenAIGateway backed by google-genai."""

    def __init__(self, credentials: CredentialProvider):
        self.credentials = credentials
        self._clients: Dict[str, genai.Client] = {}

    def _client(self) -> genai.Client:
        # The selected key can change at runtime; keep one client per key
        api_key = self.credentials.api_key
        client = self._clients.get(api_key)
        if client is None:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(
                    timeout=settings.http_timeout_seconds * 1000
                ),
            )
            self._clients = {api_key: client}
        return client

    async def generate_text(self, model: str, prompt: str) -> Optional[str]:
        response = await self._client().aio.models.generate_content(
            model=model,
            contents=prompt,
        )
        return response.text

    async def generate_image(
        self,
        model: str,
        parts: List[ContentPart],
        aspect_ratio: str,
        image_size: str,
    ) -> List[ContentPart]:
        response = await self._client().aio.models.generate_content(
            model=model,
            contents=types.Content(role="user", parts=[_to_sdk_part(p) for p in parts]),
            config=types.GenerateContentConfig(
                response_modalities=[types.Modality.TEXT, types.Modality.IMAGE],
                image_config=types.ImageConfig(
                    aspect_ratio=aspect_ratio,
                    image_size=image_size,
                ),
            ),
        )

        if not response.candidates or not response.candidates[0].content:
            return []

        result: List[ContentPart] = []
        for part in response.candidates[0].content.parts or []:
            if part.inline_data and part.inline_data.data:
                result.append(
                    ContentPart(
                        data=part.inline_data.data,
                        mime_type=part.inline_data.mime_type,
                    )
                )
            elif part.text:
                result.append(ContentPart(text=part.text))
        return result

    async def submit_video(
        self,
        model: str,
        prompt: str,
        start_frame: ContentPart,
        last_frame: ContentPart,
        number_of_videos: int,
        resolution: str,
        aspect_ratio: str,
    ) -> OperationToken:
        operation = await self._client().aio.models.generate_videos(
            model=model,
            prompt=prompt,
            image=_to_sdk_image(start_frame),
            config=types.GenerateVideosConfig(
                number_of_videos=number_of_videos,
                resolution=resolution,
                aspect_ratio=aspect_ratio,
                last_frame=_to_sdk_image(last_frame),
            ),
        )
        logger.info("Video operation submitted", operation=operation.name)
        return OperationToken(name=operation.name)

    async def poll(self, token: OperationToken) -> OperationStatus:
        operation = await self._client().aio.operations.get(
            types.GenerateVideosOperation(name=token.name)
        )
        return _status_from_operation(token, operation)
