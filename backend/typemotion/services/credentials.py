"""
API key selection capability.

The generation client and the session controller depend on the
CredentialProvider protocol rather than on a host global, so tests can
pass a double.
"""
from typing import Optional, Protocol

from cryptography.fernet import Fernet, InvalidToken

from typemotion.config import settings
from typemotion.services.errors import MissingCredential
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)


class CredentialProvider(Protocol):
    """Host capability: "has a key" / "select a key"."""

    def has_selected_key(self) -> bool: ...

    def open_key_selection(self) -> None: ...

    def select_key(self, api_key: str) -> None: ...

    @property
    def api_key(self) -> str: ...


class LocalKeyProvider:
    """
    Keeps the selected API key in memory, Fernet-encrypted.

    Starts with the key from settings when one is configured.
    """

    def __init__(self, initial_key: str = "", encryption_key: str = ""):
        if not encryption_key:
            # Fallback for dev only
            self.fernet = Fernet(Fernet.generate_key())
        else:
            self.fernet = Fernet(encryption_key.encode())
        self._token: Optional[str] = None
        self.selection_requested = False
        if initial_key:
            self.select_key(initial_key)

    def has_selected_key(self) -> bool:
        return self._token is not None

    def open_key_selection(self) -> None:
        """Record that the user must pick a key; the browser shows the dialog."""
        self.selection_requested = True
        logger.info("API key selection requested")

    def select_key(self, api_key: str) -> None:
        api_key = api_key.strip()
        if not api_key:
            raise ValueError("API key cannot be empty")
        self._token = self.fernet.encrypt(api_key.encode()).decode()
        self.selection_requested = False
        logger.info("API key selected")

    @property
    def api_key(self) -> str:
        if self._token is None:
            raise MissingCredential("No API key selected")
        try:
            return self.fernet.decrypt(self._token.encode()).decode()
        except InvalidToken:
            self._token = None
            raise MissingCredential("Stored API key could not be decrypted")


def create_credential_provider() -> LocalKeyProvider:
    """Build the provider from application settings."""
    return LocalKeyProvider(
        initial_key=settings.gemini_api_key,
        encryption_key=settings.token_encryption_key,
    )
