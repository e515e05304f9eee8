"""
View-state controller.

Single source of truth for where the user is in the flow (ViewState),
which screen is shown (ScreenMode) and the current GenerationResult.
Only this class mutates that state; API handlers and the WebSocket read
snapshots of it.
"""
import random
import time
from typing import Awaitable, Callable, Dict, List, Optional, Set
from urllib.parse import quote

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from typemotion.crud.profile import profile_crud
from typemotion.database import async_session_maker, get_session_context
from typemotion.graph import stream_pipeline
from typemotion.models import (
    GenerationRequest,
    GenerationResult,
    Panel,
    ScreenMode,
    UserProfileRead,
    UserProfileWrite,
    ViewState,
)
from typemotion.schemas.session import SessionSnapshot, ShareAction
from typemotion.services.credentials import CredentialProvider
from typemotion.services.errors import SharingUnavailable
from typemotion.services.gemini_service import GenerationClient
from typemotion.utils.logging import get_logger
from typemotion.utils.media import get_random_style

logger = get_logger(__name__)

STATUS_ANALYZING = "Analisando produto..."
STATUS_CREATING_VIDEO = "Criando vídeo com legenda estética..."
GENERIC_ERROR = "Erro ao processar."
INSTAGRAM_NOTICE = "Texto e link copiados! Abrindo seu Instagram..."
TWITTER_INTENT_URL = "https://twitter.com/intent/tweet"
INSTAGRAM_HOME_URL = "https://www.instagram.com/"
COPIED_FLAG_SECONDS = 2.0

TRANSITIONS: Dict[ViewState, Set[ViewState]] = {
    ViewState.IDLE: {ViewState.GENERATING_IMAGE},
    ViewState.GENERATING_IMAGE: {ViewState.GENERATING_VIDEO, ViewState.ERROR},
    ViewState.GENERATING_VIDEO: {ViewState.PLAYING, ViewState.ERROR},
    ViewState.PLAYING: {ViewState.IDLE},
    ViewState.ERROR: {ViewState.GENERATING_IMAGE},
}

SUBMITTABLE_STATES = {ViewState.IDLE, ViewState.ERROR}
GENERATING_STATES = {ViewState.GENERATING_IMAGE, ViewState.GENERATING_VIDEO}

Listener = Callable[[SessionSnapshot], Awaitable[None]]


class SessionController:
    """Drives the generation flow and keeps view state consistent."""

    def __init__(
        self,
        client: GenerationClient,
        credentials: CredentialProvider,
        session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.credentials = credentials
        self.session_maker = session_maker
        self.rng = rng or random.Random()
        self.clock = clock

        self.state = ViewState.IDLE
        self.screen = ScreenMode.GALLERY
        self.result = GenerationResult()
        self.request: Optional[GenerationRequest] = None
        self.status_message = ""
        self.show_key_dialog = False
        self.profile: Optional[UserProfileRead] = None
        self.is_suggesting_style = False

        self._profile_loaded = False
        self._copied_until = 0.0
        self._listeners: List[Listener] = []

    # === STATE ===

    def _set_state(self, new_state: ViewState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid view state transition: {self.state.value} -> {new_state.value}"
            )
        logger.info("View state changed", old=self.state.value, new=new_state.value)
        self.state = new_state

    @property
    def can_submit(self) -> bool:
        return self.state in SUBMITTABLE_STATES

    @property
    def copied(self) -> bool:
        return self.clock() < self._copied_until

    @property
    def panel(self) -> Panel:
        if self.screen == ScreenMode.AUTH:
            return Panel.AUTH
        if self.screen == ScreenMode.GALLERY:
            return Panel.GALLERY
        if self.state in GENERATING_STATES or self.state == ViewState.PLAYING:
            return Panel.RESULT
        return Panel.CREATE_FORM

    def snapshot(self) -> SessionSnapshot:
        """Read-only view of the session for the frontend."""
        return SessionSnapshot(
            state=self.state,
            screen=self.screen,
            panel=self.panel,
            status_message=self.status_message,
            caption=self.result.caption,
            image_data_url=self.result.image.data_url if self.result.image else None,
            video_url=self.result.video_url,
            content_url=self._content_url,
            show_key_dialog=self.show_key_dialog,
            can_submit=self.can_submit,
            copied=self.copied,
            has_profile=self.profile is not None,
            profile_first_name=self.profile.first_name if self.profile else None,
            is_suggesting_style=self.is_suggesting_style,
        )

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            await listener(snapshot)

    # === PROFILE ===

    async def load_profile(self) -> Optional[UserProfileRead]:
        """Load the stored profile. Only the first call reads storage."""
        if self._profile_loaded:
            return self.profile
        async with get_session_context(self.session_maker) as session:
            self.profile = await profile_crud.get(session)
        self._profile_loaded = True
        logger.info("Profile loaded", has_profile=self.profile is not None)
        return self.profile

    async def save_profile(self, data: UserProfileWrite) -> UserProfileRead:
        """Overwrite the profile and return to the gallery."""
        async with get_session_context(self.session_maker) as session:
            self.profile = await profile_crud.save(session, data)
        self._profile_loaded = True
        self.screen = ScreenMode.GALLERY
        logger.info("Profile saved")
        await self._notify()
        return self.profile

    # === NAVIGATION ===

    async def main_cta(self) -> ScreenMode:
        """
        Primary call to action on the gallery.

        No profile -> Auth screen. No key -> key dialog. Otherwise Create.
        """
        if self.profile is None:
            self.screen = ScreenMode.AUTH
        elif not self.credentials.has_selected_key():
            self._open_key_dialog()
        else:
            self.screen = ScreenMode.CREATE
        await self._notify()
        return self.screen

    async def set_screen(self, screen: ScreenMode) -> None:
        self.screen = screen
        await self._notify()

    def _open_key_dialog(self) -> None:
        self.credentials.open_key_selection()
        self.show_key_dialog = True

    async def dismiss_key_dialog(self) -> None:
        self.show_key_dialog = False
        await self._notify()

    async def select_key(self, api_key: str) -> None:
        """Store the chosen key and continue to the creation screen."""
        self.credentials.select_key(api_key)
        self.show_key_dialog = False
        self.screen = ScreenMode.CREATE
        await self._notify()

    # === CREATION ===

    async def suggest_style(self, text: str) -> str:
        """
        Ask for a style suggestion.

        `is_suggesting_style` is set while the request runs so the
        suggest button can be disabled; a second call meanwhile is ignored.
        """
        if not text.strip() or self.is_suggesting_style:
            return ""
        self.is_suggesting_style = True
        await self._notify()
        try:
            return await self.client.suggest_style(text)
        finally:
            self.is_suggesting_style = False
            await self._notify()

    async def submit(self, request: GenerationRequest) -> bool:
        """
        Run caption -> image -> video for the request.

        Returns:
            bool: True when the run reached Playing
        """
        style = await self.begin(request)
        if style is None:
            return False
        return await self.run(request, style)

    async def begin(self, request: GenerationRequest) -> Optional[str]:
        """
        Gate a submit and enter GeneratingImage.

        A no-op unless the state is Idle or Error. The state check and the
        move to GeneratingImage happen before the first await, so a second
        submit can never start while one is in flight.

        Returns:
            Optional[str]: The resolved style, or None if nothing started
        """
        if not self.can_submit:
            logger.info("Submit ignored", state=self.state.value)
            return None
        if not request.is_valid:
            return None
        if not self.credentials.has_selected_key():
            self._open_key_dialog()
            await self._notify()
            return None

        self._set_state(ViewState.GENERATING_IMAGE)
        previous_video = self.result.video_url
        self.result = GenerationResult()
        self.request = request
        self.status_message = STATUS_ANALYZING
        self.client.release_video(previous_video)

        style = request.style.strip() or get_random_style(self.rng)
        await self._notify()
        return style

    async def run(self, request: GenerationRequest, style: str) -> bool:
        """Stream the pipeline, applying each node's result as it lands."""
        try:
            async for node_name, update in stream_pipeline(self.client, request, style):
                self._apply_update(node_name, update)
                await self._notify()
        except Exception as e:
            logger.exception("Pipeline crashed", error=str(e))
            self._fail(str(e))
            await self._notify()

        if self.state in GENERATING_STATES:
            self._fail("")
            await self._notify()

        return self.state == ViewState.PLAYING

    def _apply_update(self, node_name: str, update: dict) -> None:
        if update.get("error") is not None:
            self._fail(update["error"])
            return

        if node_name == "caption_writer":
            self.result.caption = update.get("caption") or ""
        elif node_name == "image_generator":
            self.result.image = update["image"]
            self._set_state(ViewState.GENERATING_VIDEO)
            self.status_message = STATUS_CREATING_VIDEO
        elif node_name == "video_generator":
            self.result.video_url = update["video_url"]
            self._set_state(ViewState.PLAYING)
            self.status_message = ""

    def _fail(self, message: str) -> None:
        if self.state not in GENERATING_STATES:
            return
        self.status_message = message or GENERIC_ERROR
        self._set_state(ViewState.ERROR)

    async def reset(self) -> bool:
        """Leave the result panel. Only valid while Playing."""
        if self.state != ViewState.PLAYING:
            return False
        self._set_state(ViewState.IDLE)
        self.status_message = ""
        await self._notify()
        return True

    # === SHARING ===

    def _require_result(self) -> None:
        if self.state != ViewState.PLAYING:
            raise SharingUnavailable("Nothing to share yet")

    @property
    def _content_url(self) -> str:
        return self.request.content_url if self.request else ""

    def copy_caption(self) -> ShareAction:
        """Caption plus link, for the clipboard."""
        self._require_result()
        self._copied_until = self.clock() + COPIED_FLAG_SECONDS
        return ShareAction(
            clipboard_text=f"{self.result.caption}\n\nCompre aqui: {self._content_url}"
        )

    def share_twitter(self) -> ShareAction:
        """Tweet intent prefilled with caption and link."""
        self._require_result()
        text = quote(f"{self.result.caption}\n\n{self._content_url}", safe="!~*'()")
        configured = self.profile.twitter if self.profile else ""
        base_url = configured if "intent/tweet" in configured else TWITTER_INTENT_URL
        return ShareAction(url=f"{base_url}?text={text}")

    def share_instagram(self) -> ShareAction:
        """
        Instagram has no prefilled deep link: copy the text and open the
        configured profile link.
        """
        action = self.copy_caption()
        configured = self.profile.instagram if self.profile else ""
        action.url = configured or INSTAGRAM_HOME_URL
        action.notice = INSTAGRAM_NOTICE
        return action
