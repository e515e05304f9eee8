"""Shared fixtures and test doubles."""
import os
import random
import tempfile

# Settings are read on import; point storage at a scratch directory first.
_SCRATCH = tempfile.mkdtemp(prefix="typemotion-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_SCRATCH}/profile.db"
os.environ["STATIC_DIR"] = os.path.join(_SCRATCH, "static")
os.environ["GEMINI_API_KEY"] = ""

from typing import List, Optional  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from typemotion.database import build_session_maker, init_db  # noqa: E402
from typemotion.models import ContentPart, OperationStatus, OperationToken  # noqa: E402
from typemotion.services.gemini_service import GenerationClient  # noqa: E402
from typemotion.services.session_controller import SessionController  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video"


class FakeCredentials:
    """CredentialProvider double."""

    def __init__(self, api_key: str = "test-key"):
        self._key = api_key
        self.selection_requests = 0

    def has_selected_key(self) -> bool:
        return bool(self._key)

    def open_key_selection(self) -> None:
        self.selection_requests += 1

    def select_key(self, api_key: str) -> None:
        self._key = api_key

    @property
    def api_key(self) -> str:
        return self._key


class FakeGateway:
    """GenAIGateway double with scripted answers."""

    def __init__(
        self,
        text_answers: Optional[List] = None,
        image_parts: Optional[List[ContentPart]] = None,
        image_error: Optional[Exception] = None,
        pending_polls: int = 0,
        video_uris: Optional[List[str]] = None,
        operation_error: Optional[str] = None,
    ):
        # Each answer is a string, None or an exception to raise
        self.text_answers = list(text_answers or [])
        self.image_parts = (
            [ContentPart(data=PNG_BYTES, mime_type="image/png")]
            if image_parts is None
            else image_parts
        )
        self.image_error = image_error
        self.pending_polls = pending_polls
        self.video_uris = (
            ["https://videos.example.com/v1/files/abc:download?alt=media"]
            if video_uris is None
            else video_uris
        )
        self.operation_error = operation_error

        self.text_prompts: List[str] = []
        self.image_requests: List[List[ContentPart]] = []
        self.video_requests: List[dict] = []
        self.poll_count = 0

    async def generate_text(self, model: str, prompt: str) -> Optional[str]:
        self.text_prompts.append(prompt)
        answer = self.text_answers.pop(0) if self.text_answers else None
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def generate_image(self, model, parts, aspect_ratio, image_size):
        self.image_requests.append(parts)
        if self.image_error:
            raise self.image_error
        return self.image_parts

    async def submit_video(
        self, model, prompt, start_frame, last_frame, number_of_videos, resolution, aspect_ratio
    ) -> OperationToken:
        self.video_requests.append(
            {
                "prompt": prompt,
                "start_frame": start_frame,
                "last_frame": last_frame,
                "number_of_videos": number_of_videos,
                "resolution": resolution,
                "aspect_ratio": aspect_ratio,
            }
        )
        return OperationToken(name="operations/video-1")

    async def poll(self, token: OperationToken) -> OperationStatus:
        self.poll_count += 1
        if self.poll_count <= self.pending_polls:
            return OperationStatus(token=token, done=False)
        return OperationStatus(
            token=token,
            done=True,
            video_uris=self.video_uris,
            error=self.operation_error,
        )


class FakeSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class VideoServer:
    """httpx handler that serves the finished video."""

    def __init__(self):
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, content=VIDEO_BYTES)


@pytest.fixture
def credentials():
    return FakeCredentials()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def video_server():
    return VideoServer()


@pytest.fixture
def make_client(credentials, fake_sleep, video_server, tmp_path):
    def _make(gateway: FakeGateway, seed: int = 7) -> GenerationClient:
        return GenerationClient(
            gateway=gateway,
            credentials=credentials,
            rng=random.Random(seed),
            sleep=fake_sleep,
            poll_interval=5.0,
            http_transport=httpx.MockTransport(video_server),
            static_dir=tmp_path / "static",
        )

    return _make


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield build_session_maker(engine)
    await engine.dispose()


@pytest.fixture
def make_controller(make_client, credentials, session_maker):
    def _make(gateway: FakeGateway, seed: int = 7) -> SessionController:
        return SessionController(
            client=make_client(gateway, seed),
            credentials=credentials,
            session_maker=session_maker,
            rng=random.Random(seed),
        )

    return _make
