"""
Failure classification for the translation service.

Every failure that can reach a caller of the translate endpoint is a
KnownError subclass. The API layer converts it into the failure body
``{"success": false, "error": ...}`` with the error's HTTP status.

INVARIANT: No raw 500 errors may reach the client. Translator-side
failures are recovered by the deterministic tier; only input rejection
and rate limiting are surfaced.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    INVALID_QUERY = "invalid_query"

    # Constraint violations
    RATE_LIMITED = "rate_limited"
    BUDGET_EXCEEDED = "budget_exceeded"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"

    # Unknown
    UNKNOWN = "unknown"


class ErrorResponse(BaseModel):
    """Failure body returned by the translate endpoint."""

    success: bool = Field(default=False, description="Always false for failures")
    error: str = Field(..., description="User-appropriate explanation of what went wrong")
    kind: FailureKind = Field(
        default=FailureKind.UNKNOWN,
        description="Classification of the failure",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to the endpoint's failure body."""
        return ErrorResponse(
            error=self.message,
            kind=self.kind,
            suggestion=self.suggestion,
        )


class InvalidQueryError(KnownError):
    """
    Raised when a natural-language input is rejected before translation.

    Covers empty, too short, too long, and spam-shaped inputs.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Query rejected: {reason}",
            detail=reason,
            suggestion="Describe the cards you want in a short sentence.",
            status_code=400,
        )


class TranslatorUnavailableError(KnownError):
    """
    Raised when the generative tier cannot answer.

    Never reaches the client: the translation pipeline catches it and
    answers from the deterministic tier instead.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message="The generative translator is unavailable.",
            detail=reason,
            suggestion="A simplified translation is used instead.",
            status_code=503,
        )
