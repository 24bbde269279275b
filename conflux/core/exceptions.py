"""
Error taxonomy for the configuration engine.

Every error raised by the engine carries an error code so callers can
branch on the failure category without matching on message text.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Error codes for engine failures."""
    UNKNOWN_ERROR = 20000
    CONFIGURATION_ERROR = 20001
    FETCH_ERROR = 20002
    DECODE_ERROR = 20003
    TRANSFORM_ERROR = 20004
    ENGINE_CLOSED = 20005
    SCAN_IN_PROGRESS = 20006


class ConfluxError(Exception):
    """Base class for all engine errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert the error to a dictionary for reporting."""
        return {
            'code': self.code.value,
            'error': self.code.name,
            'message': self.message,
            'details': self.details,
        }


class ConfigurationError(ConfluxError):
    """Invalid engine options, unknown store type or unknown format."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(ErrorCode.CONFIGURATION_ERROR, message, details)


class FetchError(ConfluxError):
    """A store failed to produce raw bytes."""

    def __init__(self, store_name: str, cause: BaseException):
        self.store_name = store_name
        self.cause = cause
        super().__init__(
            ErrorCode.FETCH_ERROR,
            f"Unable to retrieve configuration from store '{store_name}': {cause}",
            {'store': store_name, 'cause': type(cause).__name__}
        )


class DecodeError(ConfluxError):
    """A processor could not turn raw bytes into a document."""

    def __init__(self, store_name: str, cause: BaseException):
        self.store_name = store_name
        self.cause = cause
        super().__init__(
            ErrorCode.DECODE_ERROR,
            f"Unable to decode configuration from store '{store_name}': {cause}",
            {'store': store_name, 'cause': type(cause).__name__}
        )


class TransformError(ConfluxError):
    """The user supplied configuration processor raised."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(
            ErrorCode.TRANSFORM_ERROR,
            f"Configuration processor failed: {cause}",
            {'cause': type(cause).__name__}
        )


class EngineClosedError(ConfluxError):
    """Operation attempted after the engine was closed."""

    def __init__(self, message: str = "Configuration retriever is closed"):
        super().__init__(ErrorCode.ENGINE_CLOSED, message)


class ScanInProgressError(ConfluxError):
    """A manual scan was requested while another scan is in flight."""

    def __init__(self, message: str = "A configuration scan is already in progress"):
        super().__init__(ErrorCode.SCAN_IN_PROGRESS, message)
