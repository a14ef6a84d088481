"""Custom exception classes."""


class FridgeChefException(Exception):
    """Base exception for the Fridge Chef application."""

    pass


class ValidationError(FridgeChefException):
    """Raised when input validation fails."""

    pass


class ImageProcessingError(FridgeChefException):
    """Raised when an uploaded image cannot be used."""

    pass


class LocationError(FridgeChefException):
    """Raised when the device position is denied or unavailable."""

    pass


class PipelineBusyError(FridgeChefException):
    """Raised when a generation request arrives while another is in flight."""

    pass


class NotFoundError(FridgeChefException):
    """Raised when a recipe cannot be found by name."""

    pass


class PersistenceError(FridgeChefException):
    """Raised when the saved recipe bucket cannot be written."""

    pass


class GeminiError(FridgeChefException):
    """Raised when Gemini API call fails."""

    pass


class RecognitionError(GeminiError):
    """Raised when ingredient recognition from an image fails."""

    pass


class GenerationError(GeminiError):
    """Raised when recipe generation fails or returns an unusable payload."""

    pass


class StoreSearchError(GeminiError):
    """Raised when the grounded nearby-store search fails."""

    pass
