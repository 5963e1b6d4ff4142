"""
Errores de la aplicación

Define la taxonomía de errores que pueden producirse durante la generación
de una felicitación y su traducción a mensajes legibles para el usuario.

Cada error lleva asociado el código HTTP con el que se devuelve al cliente,
siempre en un cuerpo JSON de la forma {"error": "..."}.
"""

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
FORMAT_ERROR_MESSAGE = (
    "The image format is not supported. Please try a different image with a clear face."
)
CONTENT_POLICY_MESSAGE = (
    "The image may contain inappropriate content. Please try a different image."
)
RATE_LIMIT_MESSAGE = "We have reached our API rate limits. Please try again in a few minutes."


class GreetingError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(GreetingError):
    """A vendor credential is missing from the environment."""

    status_code = 400


class ImageValidationError(GreetingError):
    """The uploaded image is missing, oversize, malformed or unsupported."""

    status_code = 400


class ProcessingError(GreetingError):
    """Decoding or encoding an image failed."""

    status_code = 400


class VendorError(GreetingError):
    """A vendor API answered with a non-success status or an unusable body."""

    status_code = 502

    def __init__(self, message: str, vendor: str = "", status_code: int | None = None):
        super().__init__(message, status_code)
        self.vendor = vendor


class UnexpectedError(GreetingError):
    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)


def classify_vendor_error(message: str) -> str:
    """
    Map a raw vendor error message to one of the user-facing categories.

    Messages that do not match any category are returned unchanged.
    """
    text = message or ""
    lowered = text.lower()
    if "too large" in lowered or "size" in lowered:
        return "Image is too large. Please use a smaller image."
    if "invalid input" in lowered or "format" in lowered:
        return FORMAT_ERROR_MESSAGE
    if "content policy" in lowered or "safety system" in lowered:
        return CONTENT_POLICY_MESSAGE
    if "rate limit" in lowered or "quota" in lowered:
        return RATE_LIMIT_MESSAGE
    return text or "Failed to generate image"
