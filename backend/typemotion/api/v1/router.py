"""Main API v1 router aggregating all sub-routers."""
from fastapi import APIRouter

from typemotion.api.v1.session import router as session_router
from typemotion.api.v1.profile import router as profile_router
from typemotion.api.v1.share import router as share_router
from typemotion.api.v1.websocket import router as websocket_router
from typemotion.api.v1.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(session_router, tags=["Session"])
api_router.include_router(profile_router, prefix="/profile", tags=["Profile"])
api_router.include_router(share_router, prefix="/share", tags=["Share"])
api_router.include_router(websocket_router, tags=["WebSocket"])
