"""
Enum types for the session state machine.
Stored and serialized by value.
"""
from enum import Enum


class ViewState(str, Enum):
    """Where the user is in the generation flow."""
    IDLE = "idle"
    GENERATING_IMAGE = "generating_image"
    GENERATING_VIDEO = "generating_video"
    PLAYING = "playing"
    ERROR = "error"


class ScreenMode(str, Enum):
    """Which screen is shown. Independent of ViewState."""
    GALLERY = "gallery"
    CREATE = "create"
    AUTH = "auth"


class Panel(str, Enum):
    """Panel the frontend renders for the current state and screen."""
    GALLERY = "gallery"
    AUTH = "auth"
    CREATE_FORM = "create_form"
    RESULT = "result"
