"""
Application exceptions.

Services raise these; ``app.main`` maps them onto HTTP responses.
"""


class AppError(Exception):
    """Base class for application errors."""

    status_code = 500

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details


class StorageFault(AppError):
    """The database rejected a statement or could not be reached."""

    status_code = 500


class LessonNotFound(AppError):
    """No lesson matched. Expected on a cache miss, never logged as an error."""

    status_code = 404

    def __init__(self, message: str = "Lesson not found", details: str = ""):
        super().__init__(message, details)


class GenerationError(AppError):
    """Lesson generation failed (transport error or unusable model output)."""

    status_code = 502


class GeneratorUnavailable(GenerationError):
    """The remote generator is not configured."""

    def __init__(self, message: str = "API_KEY_MISSING", details: str = ""):
        super().__init__(message, details)
