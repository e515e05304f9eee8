"""Domain exceptions raised by the generation services."""


class TypeMotionError(Exception):
    """Base class for application errors."""


class GenerationFailure(TypeMotionError):
    """
    A terminal failure of the image or video stage.

    Attributes:
        stage: "image" or "video"
    """

    DEFAULT_MESSAGES = {
        "image": "Falha ao gerar imagem.",
        "video": "Falha ao gerar vídeo.",
    }

    def __init__(self, stage: str, message: str = ""):
        self.stage = stage
        super().__init__(message or self.DEFAULT_MESSAGES.get(stage, "Erro ao processar."))


class SuggestionFailure(TypeMotionError):
    """Style suggestion failed. Always absorbed by the client."""


class CaptionFailure(TypeMotionError):
    """Caption generation failed or was rejected. Always absorbed by the client."""


class MissingCredential(TypeMotionError):
    """No API key has been selected."""


class SharingUnavailable(TypeMotionError):
    """Sharing was requested while no finished result is on screen."""
