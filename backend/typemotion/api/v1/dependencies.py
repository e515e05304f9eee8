"""Shared FastAPI dependencies."""
from fastapi import Request

from typemotion.services.session_controller import SessionController


def get_controller(request: Request) -> SessionController:
    """The session controller created during application startup."""
    return request.app.state.controller
