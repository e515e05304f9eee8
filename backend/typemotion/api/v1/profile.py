"""Local profile endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from typemotion.api.v1.dependencies import get_controller
from typemotion.models import UserProfileRead, UserProfileWrite
from typemotion.services.session_controller import SessionController

router = APIRouter()


@router.get("", response_model=UserProfileRead)
async def get_profile(controller: SessionController = Depends(get_controller)):
    """Profile loaded at startup."""
    if controller.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return controller.profile


@router.put("", response_model=UserProfileRead)
async def save_profile(
    request: UserProfileWrite,
    controller: SessionController = Depends(get_controller),
):
    """Overwrite the whole profile and return to the gallery."""
    return await controller.save_profile(request)
