"""
Custom Exception Hierarchy

Every failure the analysis core can surface is one of the classes below.
Each carries a stable ``code`` (an :class:`ErrorKind` value) that host UIs
can match on without coupling to message text, plus a user-facing message
and recovery suggestion looked up from :data:`ERROR_MESSAGES`.
"""
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple


class ErrorKind(str, Enum):
    """Stable error identifiers exposed to callers."""
    INVALID_IMAGE = "invalid_image"
    LOW_QUALITY_IMAGE = "low_quality_image"
    ML_FAILURE = "ml_failure"
    PROCESSING_TIMEOUT = "processing_timeout"
    INSUFFICIENT_DATA = "insufficient_data"
    NETWORK_ERROR = "network_error"
    STORAGE_ERROR = "storage_error"
    UNKNOWN = "unknown_error"


# kind -> (message template, recovery suggestion)
# Templates take a single ``{reason}`` placeholder where the kind has one.
ERROR_MESSAGES: Dict[ErrorKind, Tuple[str, str]] = {
    ErrorKind.INVALID_IMAGE: (
        "The provided image is invalid or corrupted",
        "Please try taking a new photo",
    ),
    ErrorKind.LOW_QUALITY_IMAGE: (
        "Image quality is too low for analysis: {reason}",
        "Ensure good lighting and hold the camera steady",
    ),
    ErrorKind.ML_FAILURE: (
        "AI analysis failed: {reason}",
        "Please try again or contact support",
    ),
    ErrorKind.PROCESSING_TIMEOUT: (
        "Image processing timed out",
        "Please try with a smaller image",
    ),
    ErrorKind.INSUFFICIENT_DATA: (
        "Insufficient data for analysis",
        "Please provide more information",
    ),
    ErrorKind.NETWORK_ERROR: (
        "Network error: {reason}",
        "Check your internet connection",
    ),
    ErrorKind.STORAGE_ERROR: (
        "Storage error: {reason}",
        "Free up storage space and try again",
    ),
    ErrorKind.UNKNOWN: (
        "An unknown error occurred",
        "Please try again",
    ),
}


def describe(kind: ErrorKind, reason: str = "") -> Tuple[str, str]:
    """Return (user message, recovery suggestion) for an error kind."""
    template, suggestion = ERROR_MESSAGES.get(kind, ERROR_MESSAGES[ErrorKind.UNKNOWN])
    return template.format(reason=reason), suggestion


class DentalAnalysisError(Exception):
    """Base exception for all dental analysis errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        reason: str = "",
    ):
        user_message, suggestion = describe(self.kind, reason)
        self.message = message or user_message
        super().__init__(self.message)
        self.code = code or self.kind.value
        self.details = details or {}
        self.recovery_suggestion = suggestion

    @property
    def user_message(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "recovery_suggestion": self.recovery_suggestion,
            "details": self.details
        }


class InvalidImageError(DentalAnalysisError):
    """Input could not be decoded into an image at all."""

    kind = ErrorKind.INVALID_IMAGE

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(details=details)


class LowQualityImageError(DentalAnalysisError):
    """Image was rejected by the quality gate before any detection work."""

    kind = ErrorKind.LOW_QUALITY_IMAGE

    def __init__(self, issues: List[str], details: Optional[Dict[str, Any]] = None):
        self.issues = list(issues)
        super().__init__(
            details={"issues": self.issues, **(details or {})},
            reason=", ".join(self.issues),
        )


class ProcessingTimeoutError(DentalAnalysisError):
    """A pipeline stage exceeded its time budget."""

    kind = ErrorKind.PROCESSING_TIMEOUT

    def __init__(self, stage: str = "unknown", seconds: Optional[float] = None):
        self.stage = stage
        self.seconds = seconds
        super().__init__(details={"stage": stage, "timeout_seconds": seconds})


class MLFailureError(DentalAnalysisError):
    """ML-specific or otherwise unclassified internal failure."""

    kind = ErrorKind.ML_FAILURE

    def __init__(self, detail: str, details: Optional[Dict[str, Any]] = None):
        self.detail = detail
        super().__init__(details=details, reason=detail)


class InsufficientDataError(DentalAnalysisError):
    """Reserved for collaborators that lack the data to proceed."""

    kind = ErrorKind.INSUFFICIENT_DATA

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(details=details)


class NetworkError(DentalAnalysisError):
    """Reserved for collaborator-reported network failures."""

    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, detail: str, details: Optional[Dict[str, Any]] = None):
        self.detail = detail
        super().__init__(details=details, reason=detail)


class StorageError(DentalAnalysisError):
    """Reserved for collaborator-reported persistence failures."""

    kind = ErrorKind.STORAGE_ERROR

    def __init__(self, detail: str, details: Optional[Dict[str, Any]] = None):
        self.detail = detail
        super().__init__(details=details, reason=detail)
