"""Error taxonomy for the analysis service.

Creation-time and read-time errors are raised to callers and mapped to HTTP
status codes by the API layer. GenerationError and its subclasses never reach
callers: the Section Runner records them as a section's terminal failed state.
"""

from typing import Any, Dict, Optional


class AnalysisServiceError(Exception):
    """Base class for all errors raised by the service."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AnalysisServiceError):
    """Malformed create_analysis input. Raised before anything is persisted."""

    status_code = 400


class AuthError(AnalysisServiceError):
    status_code = 401


class ForbiddenError(AnalysisServiceError):
    status_code = 403


class NotFoundError(AnalysisServiceError):
    status_code = 404


class ConflictError(AnalysisServiceError):
    status_code = 409


class PersistenceError(AnalysisServiceError):
    """The AnalysisStore is unavailable or rejected the operation."""

    status_code = 500


class GenerationError(AnalysisServiceError):
    """A section generator failed.

    `code` is a short machine-usable reason stored on the failed section.
    `transient` decides whether the Section Runner may retry the call.
    """

    code: str = "generation_failed"
    transient: bool = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        transient: Optional[bool] = None,
    ):
        super().__init__(message)
        if code is not None:
            self.code = code
        if transient is not None:
            self.transient = transient


class TransientGenerationError(GenerationError):
    """Network failure, provider rate limit or provider overload."""

    code = "provider_unavailable"
    transient = True


class GenerationTimeout(TransientGenerationError):
    code = "timeout"


class MalformedOutputError(GenerationError):
    """Provider answered, but the reply could not be parsed into section data."""

    code = "malformed_output"
    transient = False
