"""Tests for the view-state controller."""
import base64
from typing import List
from urllib.parse import parse_qs, urlparse

import pytest
from pydantic import ValidationError

from conftest import PNG_BYTES, FakeGateway
from typemotion.config import settings
from typemotion.models import (
    ContentPart,
    GenerationRequest,
    ImagePayload,
    Panel,
    ScreenMode,
    UserProfileWrite,
    ViewState,
)
from typemotion.schemas.session import SessionSnapshot
from typemotion.services.errors import SharingUnavailable
from typemotion.services.gemini_service import FALLBACK_CAPTIONS
from typemotion.services.session_controller import (
    GENERIC_ERROR,
    INSTAGRAM_HOME_URL,
    STATUS_CREATING_VIDEO,
)
from typemotion.utils.media import STYLE_CATALOG

PRODUCT = "Tênis Esportivo Azul"
CAPTION = "🔥 Tênis Esportivo Azul com frete grátis só hoje!"


class Recorder:
    """Collects every snapshot the controller publishes."""

    def __init__(self):
        self.snapshots: List[SessionSnapshot] = []

    async def __call__(self, snapshot: SessionSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def states(self) -> List[ViewState]:
        states = []
        for snapshot in self.snapshots:
            if not states or states[-1] != snapshot.state:
                states.append(snapshot.state)
        return states


def profile_data(**overrides) -> UserProfileWrite:
    data = {
        "name": "Ana Paula Souza",
        "phone": "11999999999",
        "instagram": "https://www.instagram.com/ana.store",
        "twitter": "",
        "tiktok": "https://www.tiktok.com/@ana",
    }
    data.update(overrides)
    return UserProfileWrite(**data)


async def finished_controller(make_controller, content_url="https://loja.example/tenis"):
    controller = make_controller(FakeGateway(text_answers=[CAPTION]))
    await controller.submit(GenerationRequest(text=PRODUCT, content_url=content_url))
    assert controller.state == ViewState.PLAYING
    return controller


# === GENERATION SEQUENCE ===


async def test_successful_run_state_sequence(make_controller):
    controller = make_controller(FakeGateway(text_answers=[CAPTION], pending_polls=2))
    recorder = Recorder()
    controller.subscribe(recorder)

    assert await controller.submit(GenerationRequest(text=PRODUCT)) is True

    assert recorder.states == [
        ViewState.GENERATING_IMAGE,
        ViewState.GENERATING_VIDEO,
        ViewState.PLAYING,
    ]
    assert controller.state == ViewState.PLAYING
    assert controller.result.caption == CAPTION
    assert controller.result.video_url


async def test_results_populate_caption_then_image_then_video(make_controller):
    controller = make_controller(FakeGateway(text_answers=[CAPTION]))
    recorder = Recorder()
    controller.subscribe(recorder)

    await controller.submit(GenerationRequest(text=PRODUCT))

    first_caption = next(i for i, s in enumerate(recorder.snapshots) if s.caption)
    first_image = next(i for i, s in enumerate(recorder.snapshots) if s.image_data_url)
    first_video = next(i for i, s in enumerate(recorder.snapshots) if s.video_url)
    assert first_caption < first_image < first_video
    assert all(s.image_data_url for s in recorder.snapshots if s.video_url)


async def test_image_ready_updates_status(make_controller):
    controller = make_controller(FakeGateway(text_answers=[CAPTION]))
    recorder = Recorder()
    controller.subscribe(recorder)

    await controller.submit(GenerationRequest(text=PRODUCT))

    generating_video = [s for s in recorder.snapshots if s.state == ViewState.GENERATING_VIDEO]
    assert generating_video[0].status_message == STATUS_CREATING_VIDEO


async def test_style_resolved_from_catalog_when_empty(make_controller):
    gateway = FakeGateway(text_answers=[CAPTION])
    controller = make_controller(gateway)

    await controller.submit(GenerationRequest(text=PRODUCT, style="   "))

    image_prompt = gateway.image_requests[0][0].text
    assert any(style in image_prompt for style in STYLE_CATALOG)


async def test_user_style_is_used(make_controller):
    gateway = FakeGateway(text_answers=[CAPTION])
    controller = make_controller(gateway)

    await controller.submit(GenerationRequest(text=PRODUCT, style="Golden hour rooftop"))

    assert "Golden hour rooftop" in gateway.image_requests[0][0].text
    assert "Golden hour rooftop" in gateway.video_requests[0]["prompt"]


async def test_caption_feeds_video_prompt(make_controller):
    gateway = FakeGateway(text_answers=[CAPTION])
    await make_controller(gateway).submit(GenerationRequest(text=PRODUCT))
    assert CAPTION in gateway.video_requests[0]["prompt"]


async def test_missing_image_ends_in_error(make_controller):
    gateway = FakeGateway(text_answers=[CAPTION], image_parts=[])
    controller = make_controller(gateway)

    assert await controller.submit(GenerationRequest(text=PRODUCT)) is False

    assert controller.state == ViewState.ERROR
    assert controller.status_message == "Falha ao gerar imagem."
    assert controller.result.video_url is None
    assert controller.result.image is None
    assert gateway.video_requests == []


async def test_missing_video_keeps_image(make_controller):
    controller = make_controller(FakeGateway(text_answers=[CAPTION], video_uris=[]))

    await controller.submit(GenerationRequest(text=PRODUCT))

    assert controller.state == ViewState.ERROR
    assert controller.status_message == "Falha ao gerar vídeo."
    assert base64.b64decode(controller.result.image.data) == PNG_BYTES
    assert controller.result.video_url is None


async def test_provider_error_message_is_shown(make_controller):
    controller = make_controller(
        FakeGateway(text_answers=[CAPTION], image_error=PermissionError("API key not valid"))
    )

    await controller.submit(GenerationRequest(text=PRODUCT))

    assert controller.state == ViewState.ERROR
    assert controller.status_message == "API key not valid"


async def test_empty_error_message_uses_generic(make_controller):
    controller = make_controller(
        FakeGateway(text_answers=[CAPTION], image_error=RuntimeError())
    )

    await controller.submit(GenerationRequest(text=PRODUCT))

    assert controller.status_message == GENERIC_ERROR


async def test_error_allows_fresh_submit(make_controller):
    gateway = FakeGateway(text_answers=[CAPTION, CAPTION], image_parts=[])
    controller = make_controller(gateway)
    await controller.submit(GenerationRequest(text=PRODUCT))
    assert controller.state == ViewState.ERROR

    gateway.image_parts = [ContentPart(data=PNG_BYTES, mime_type="image/png")]
    assert await controller.submit(GenerationRequest(text=PRODUCT)) is True
    assert controller.state == ViewState.PLAYING
    assert len(gateway.text_prompts) == 2


# === SUBMIT GATING ===


@pytest.mark.parametrize(
    "state",
    [ViewState.GENERATING_IMAGE, ViewState.GENERATING_VIDEO, ViewState.PLAYING],
)
async def test_submit_outside_idle_is_noop(make_controller, state):
    gateway = FakeGateway(text_answers=[CAPTION])
    controller = make_controller(gateway)
    controller.state = state
    controller.result.caption = "previous caption"
    controller.result.image = ImagePayload(data="QUJD")
    controller.result.video_url = "/static/videos/previous.mp4"
    before = controller.result.model_copy(deep=True)

    assert await controller.submit(GenerationRequest(text=PRODUCT)) is False

    assert controller.state == state
    assert controller.result == before
    assert gateway.text_prompts == []


async def test_blank_text_is_noop(make_controller):
    gateway = FakeGateway()
    controller = make_controller(gateway)

    assert await controller.submit(GenerationRequest(text="   ")) is False

    assert controller.state == ViewState.IDLE
    assert gateway.text_prompts == []


def test_request_text_limit_comes_from_settings():
    GenerationRequest(text="x" * settings.max_text_length)
    with pytest.raises(ValidationError):
        GenerationRequest(text="x" * (settings.max_text_length + 1))


async def test_missing_key_opens_dialog(make_controller, credentials):
    credentials._key = ""
    gateway = FakeGateway()
    controller = make_controller(gateway)

    assert await controller.submit(GenerationRequest(text=PRODUCT)) is False

    assert controller.state == ViewState.IDLE
    assert controller.show_key_dialog is True
    assert credentials.selection_requests == 1
    assert gateway.text_prompts == []


async def test_new_submit_releases_previous_video(make_controller, tmp_path):
    controller = await finished_controller(make_controller)
    previous = tmp_path / "static" / controller.result.video_url[len("/static/"):]
    assert previous.exists()
    await controller.reset()

    controller.client.gateway.text_answers = [CAPTION]
    await controller.submit(GenerationRequest(text=PRODUCT))

    assert not previous.exists()
    assert controller.state == ViewState.PLAYING


async def test_reset_only_from_playing(make_controller):
    controller = make_controller(FakeGateway())
    assert await controller.reset() is False
    assert controller.state == ViewState.IDLE

    controller = await finished_controller(make_controller)
    assert await controller.reset() is True
    assert controller.state == ViewState.IDLE
    assert controller.can_submit


# === NAVIGATION & PROFILE ===


async def test_main_cta_without_profile_routes_to_auth(make_controller):
    controller = make_controller(FakeGateway())
    await controller.load_profile()

    assert await controller.main_cta() == ScreenMode.AUTH
    assert controller.panel == Panel.AUTH


async def test_main_cta_without_key_opens_dialog(make_controller, credentials):
    controller = make_controller(FakeGateway())
    await controller.save_profile(profile_data())
    credentials._key = ""

    assert await controller.main_cta() == ScreenMode.GALLERY
    assert controller.show_key_dialog is True


async def test_main_cta_with_profile_and_key_opens_create(make_controller):
    controller = make_controller(FakeGateway())
    await controller.save_profile(profile_data())

    assert await controller.main_cta() == ScreenMode.CREATE
    assert controller.panel == Panel.CREATE_FORM


async def test_select_key_moves_to_create(make_controller, credentials):
    credentials._key = ""
    controller = make_controller(FakeGateway())
    await controller.save_profile(profile_data())
    await controller.main_cta()

    await controller.select_key("new-key")

    assert credentials.api_key == "new-key"
    assert controller.show_key_dialog is False
    assert controller.screen == ScreenMode.CREATE


async def test_profile_round_trip(make_controller, make_client, credentials, session_maker):
    data = profile_data()
    controller = make_controller(FakeGateway())
    await controller.save_profile(data)
    assert controller.screen == ScreenMode.GALLERY

    from typemotion.services.session_controller import SessionController

    reloaded_controller = SessionController(
        client=make_client(FakeGateway()),
        credentials=credentials,
        session_maker=session_maker,
    )
    reloaded = await reloaded_controller.load_profile()

    assert reloaded.model_dump(exclude={"updated_at"}) == data.model_dump()
    assert reloaded.first_name == "Ana"


async def test_profile_save_overwrites_whole_record(make_controller):
    controller = make_controller(FakeGateway())
    await controller.save_profile(profile_data())

    updated = await controller.save_profile(profile_data(name="Bia", instagram=""))

    assert updated.name == "Bia"
    assert updated.instagram == ""
    assert updated.tiktok == "https://www.tiktok.com/@ana"


async def test_profile_loaded_once(make_controller):
    controller = make_controller(FakeGateway())
    assert await controller.load_profile() is None

    await controller.save_profile(profile_data())
    assert (await controller.load_profile()).name == "Ana Paula Souza"


# === SHARING ===


async def test_sharing_requires_finished_result(make_controller):
    controller = make_controller(FakeGateway())
    with pytest.raises(SharingUnavailable):
        controller.copy_caption()
    with pytest.raises(SharingUnavailable):
        controller.share_twitter()


async def test_copy_caption_composes_text(make_controller):
    controller = await finished_controller(make_controller)

    action = controller.copy_caption()

    assert action.clipboard_text == f"{CAPTION}\n\nCompre aqui: https://loja.example/tenis"
    assert controller.copied is True


async def test_copied_flag_expires(make_controller):
    controller = await finished_controller(make_controller)
    now = [100.0]
    controller.clock = lambda: now[0]

    controller.copy_caption()
    assert controller.copied
    now[0] += 2.5
    assert not controller.copied


async def test_share_twitter_uses_generic_intent(make_controller):
    controller = await finished_controller(make_controller)

    action = controller.share_twitter()

    parsed = urlparse(action.url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://twitter.com/intent/tweet"
    assert parse_qs(parsed.query)["text"] == [f"{CAPTION}\n\nhttps://loja.example/tenis"]


async def test_share_twitter_uses_configured_intent(make_controller):
    controller = await finished_controller(make_controller)
    await controller.save_profile(
        profile_data(twitter="https://x.com/intent/tweet")
    )

    assert controller.share_twitter().url.startswith("https://x.com/intent/tweet?text=")


async def test_share_twitter_ignores_plain_profile_link(make_controller):
    controller = await finished_controller(make_controller)
    await controller.save_profile(profile_data(twitter="https://twitter.com/ana"))

    assert controller.share_twitter().url.startswith("https://twitter.com/intent/tweet?text=")


async def test_share_instagram_copies_and_opens_profile(make_controller):
    controller = await finished_controller(make_controller)
    await controller.save_profile(profile_data())

    action = controller.share_instagram()

    assert action.url == "https://www.instagram.com/ana.store"
    assert action.clipboard_text.startswith(CAPTION)
    assert action.notice
    assert controller.copied


async def test_share_instagram_falls_back_to_homepage(make_controller):
    controller = await finished_controller(make_controller)
    assert controller.share_instagram().url == INSTAGRAM_HOME_URL


# === SCENARIO ===


async def test_scenario_product_without_style_or_reference(make_controller):
    gateway = FakeGateway(text_answers=[RuntimeError("text model unavailable")], pending_polls=3)
    controller = make_controller(gateway)

    await controller.submit(GenerationRequest(text=PRODUCT))

    assert any(style in gateway.image_requests[0][0].text for style in STYLE_CATALOG)
    assert controller.result.caption in [t.format(text=PRODUCT) for t in FALLBACK_CAPTIONS]
    assert len(controller.result.caption) <= 150
    assert PRODUCT in controller.result.caption
    assert controller.result.image.data
    assert controller.state == ViewState.PLAYING
    assert controller.result.video_url


# === STYLE SUGGESTION ===


async def test_suggest_style_flag_is_published(make_controller):
    controller = make_controller(FakeGateway(text_answers=["Chrome letters in neon rain"]))
    recorder = Recorder()
    controller.subscribe(recorder)

    style = await controller.suggest_style(PRODUCT)

    assert style == "Chrome letters in neon rain"
    assert [s.is_suggesting_style for s in recorder.snapshots] == [True, False]
    assert controller.snapshot().is_suggesting_style is False


async def test_suggest_style_ignored_while_one_is_running(make_controller):
    gateway = FakeGateway(text_answers=["Neon"])
    controller = make_controller(gateway)
    controller.is_suggesting_style = True

    assert await controller.suggest_style(PRODUCT) == ""
    assert gateway.text_prompts == []


async def test_suggest_style_blank_text_skips_model(make_controller):
    gateway = FakeGateway(text_answers=["Neon"])
    controller = make_controller(gateway)

    assert await controller.suggest_style("   ") == ""
    assert gateway.text_prompts == []
