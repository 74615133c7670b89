"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ERROR_MESSAGES,
    ErrorKind,
    describe,
    DentalAnalysisError,
    InvalidImageError,
    LowQualityImageError,
    ProcessingTimeoutError,
    MLFailureError,
    InsufficientDataError,
    NetworkError,
    StorageError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ERROR_MESSAGES",
    "ErrorKind",
    "describe",
    "DentalAnalysisError",
    "InvalidImageError",
    "LowQualityImageError",
    "ProcessingTimeoutError",
    "MLFailureError",
    "InsufficientDataError",
    "NetworkError",
    "StorageError",
]
