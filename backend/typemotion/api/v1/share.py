"""Sharing endpoints for the finished advertisement."""
from fastapi import APIRouter, Depends

from typemotion.api.v1.dependencies import get_controller
from typemotion.schemas.session import ShareAction
from typemotion.services.session_controller import SessionController

router = APIRouter()


@router.post("/copy", response_model=ShareAction)
async def copy_caption(controller: SessionController = Depends(get_controller)):
    """Caption plus content link for the clipboard."""
    return controller.copy_caption()


@router.post("/twitter", response_model=ShareAction)
async def share_twitter(controller: SessionController = Depends(get_controller)):
    """Tweet intent URL prefilled with the caption and link."""
    return controller.share_twitter()


@router.post("/instagram", response_model=ShareAction)
async def share_instagram(controller: SessionController = Depends(get_controller)):
    """Clipboard text plus the Instagram link to open."""
    return controller.share_instagram()
