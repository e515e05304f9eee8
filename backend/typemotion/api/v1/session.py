"""Session, navigation and generation endpoints."""

import time

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    HTTPException,
    Request,
    UploadFile,
    status,
)

from typemotion.api.v1.dependencies import get_controller
from typemotion.config import settings
from typemotion.models import GenerationRequest
from typemotion.schemas.session import (
    GalleryResponse,
    GenerationCreateRequest,
    KeySelectRequest,
    KeyStatusResponse,
    ReferenceImageResponse,
    ScreenChangeRequest,
    SessionSnapshot,
    StyleSuggestionRequest,
    StyleSuggestionResponse,
    TypographyListResponse,
    TypographyPreset,
)
from typemotion.services.gallery import GALLERY_VIDEOS, ROTATION_SECONDS, carousel_index
from typemotion.services.session_controller import SessionController
from typemotion.utils.logging import get_logger
from typemotion.utils.media import TYPOGRAPHY_SUGGESTIONS, file_to_data_url

router = APIRouter()
logger = get_logger(__name__)

BILLING_DOCS_URL = "https://ai.google.dev/gemini-api/docs/billing"


async def run_generation_background(
    controller: SessionController, request: GenerationRequest, style: str
):
    """Background task to run the generation sequence."""
    try:
        await controller.run(request, style)
    except Exception as e:
        logger.error("Generation background task failed", error=str(e))


@router.get("/session", response_model=SessionSnapshot)
async def get_session_state(controller: SessionController = Depends(get_controller)):
    """Current view state, screen and result."""
    return controller.snapshot()


@router.post("/session/cta", response_model=SessionSnapshot)
async def main_cta(controller: SessionController = Depends(get_controller)):
    """
    Primary call to action.

    Routes to the profile form, the API key dialog or the creation screen.
    """
    await controller.main_cta()
    return controller.snapshot()


@router.post("/session/screen", response_model=SessionSnapshot)
async def change_screen(
    request: ScreenChangeRequest,
    controller: SessionController = Depends(get_controller),
):
    await controller.set_screen(request.screen)
    return controller.snapshot()


@router.post("/session/reset", response_model=SessionSnapshot)
async def reset_session(controller: SessionController = Depends(get_controller)):
    """Leave the result panel and return to the creation form."""
    if not await controller.reset():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only a finished result can be reset",
        )
    return controller.snapshot()


@router.post(
    "/generations",
    response_model=SessionSnapshot,
    status_code=status.HTTP_202_ACCEPTED,
)
async def create_generation(
    request: GenerationCreateRequest,
    background_tasks: BackgroundTasks,
    controller: SessionController = Depends(get_controller),
):
    """
    Start caption -> image -> video generation.

    The sequence runs in the background. Use the WebSocket or
    GET /session to track progress.
    """
    if not controller.can_submit:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A generation is already in progress",
        )

    generation_request = GenerationRequest(**request.model_dump())
    if not generation_request.is_valid:
        raise ValueError("Product text cannot be empty")

    # Opens the key dialog instead when no API key is selected
    style = await controller.begin(generation_request)
    if style is None:
        return controller.snapshot()

    background_tasks.add_task(
        run_generation_background, controller, generation_request, style
    )
    logger.info("Generation queued", text_preview=generation_request.text[:50])

    return controller.snapshot()


@router.post("/style/suggest", response_model=StyleSuggestionResponse)
async def suggest_style(
    request: StyleSuggestionRequest,
    controller: SessionController = Depends(get_controller),
):
    """Suggest a cinematic style description for the product text."""
    return StyleSuggestionResponse(style=await controller.suggest_style(request.text))


@router.post("/uploads/reference", response_model=ReferenceImageResponse)
async def upload_reference_image(file: UploadFile = File(...)):
    """Convert an uploaded reference image into an embeddable data URL."""
    mime_type = file.content_type or ""
    if not mime_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Reference must be an image")

    content = await file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail="Reference image is too large")
    if not content:
        raise HTTPException(status_code=400, detail="Reference image is empty")

    return ReferenceImageResponse(
        data_url=file_to_data_url(content, mime_type),
        mime_type=mime_type,
        size_bytes=len(content),
    )


@router.get("/typography", response_model=TypographyListResponse)
async def list_typography_presets():
    """Typography presets offered by the creation form."""
    return TypographyListResponse(
        presets=[TypographyPreset(**preset) for preset in TYPOGRAPHY_SUGGESTIONS[:4]]
    )


@router.get("/gallery", response_model=GalleryResponse)
async def get_gallery(request: Request):
    """
    Clips rotated by the landing page carousel.

    `current_index` is the clip on screen, counting rotations since startup.
    """
    elapsed = time.monotonic() - request.app.state.started_at
    return GalleryResponse(
        videos=GALLERY_VIDEOS,
        rotation_seconds=ROTATION_SECONDS,
        current_index=carousel_index(elapsed),
    )


@router.get("/keys/status", response_model=KeyStatusResponse)
async def key_status(controller: SessionController = Depends(get_controller)):
    return KeyStatusResponse(
        has_selected_key=controller.credentials.has_selected_key(),
        show_key_dialog=controller.show_key_dialog,
        billing_docs_url=BILLING_DOCS_URL,
    )


@router.post("/keys/select", response_model=SessionSnapshot)
async def select_key(
    request: KeySelectRequest,
    controller: SessionController = Depends(get_controller),
):
    """Store the chosen API key and continue to the creation screen."""
    await controller.select_key(request.api_key)
    return controller.snapshot()


@router.post("/keys/dismiss", response_model=SessionSnapshot)
async def dismiss_key_dialog(controller: SessionController = Depends(get_controller)):
    await controller.dismiss_key_dialog()
    return controller.snapshot()
