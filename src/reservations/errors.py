"""
Custom exceptions and error handling for the reservation data layer.

Defines application-specific exceptions with error codes so callers can tell
an invalid request from a storage failure without inspecting driver types.
An absent row is never an error: lookups return None, False or an empty list.

Usage:
    from reservations.errors import StorageError, ErrorCode

    raise StorageError("Insert into reservations_by_confirmation failed", code=ErrorCode.STORAGE_FAILED)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Request errors
    INVALID_ARGUMENT = "INVALID_ARGUMENT"

    # Startup errors
    NOT_CONNECTED = "NOT_CONNECTED"
    SCHEMA_FAILED = "SCHEMA_FAILED"
    STATEMENT_MISSING = "STATEMENT_MISSING"

    # Storage errors
    STORAGE_FAILED = "STORAGE_FAILED"
    PARTIAL_WRITE = "PARTIAL_WRITE"
    TIMEOUT = "TIMEOUT"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_ARGUMENT: "Your request is missing required information. Please check and try again.",
    ErrorCode.NOT_CONNECTED: "The reservation service is starting up. Please try again shortly.",
    ErrorCode.SCHEMA_FAILED: "The reservation service could not be initialized.",
    ErrorCode.STATEMENT_MISSING: "The reservation service could not be initialized.",
    ErrorCode.STORAGE_FAILED: "Unable to reach reservation storage. Please try again.",
    ErrorCode.PARTIAL_WRITE: "Your reservation was only partially saved. Please retry the request.",
    ErrorCode.TIMEOUT: "The request timed out. Please try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}


class ReservationError(Exception):
    """Base exception for all reservation data layer errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class ValidationError(ReservationError):
    """A required argument was missing; raised before any I/O."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_ARGUMENT):
        super().__init__(message, code)


class SchemaError(ReservationError):
    """Keyspace objects could not be created. Fatal at startup."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SCHEMA_FAILED):
        super().__init__(message, code)


class StatementError(ReservationError):
    """A prepared statement template is missing or failed to prepare."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STATEMENT_MISSING):
        super().__init__(message, code)


class StorageError(ReservationError):
    """A bound execution against the cluster failed."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORAGE_FAILED):
        super().__init__(message, code)


class PartialWriteError(StorageError):
    """A multi-table write or delete stopped after some tables were already changed.

    ``completed`` lists the tables that were written before ``failed`` raised.
    Nothing is rolled back; the copies stay inconsistent until the operation is retried.
    """

    def __init__(
        self,
        message: str,
        completed: list[str],
        failed: str,
        code: ErrorCode = ErrorCode.PARTIAL_WRITE,
    ):
        self.completed = completed
        self.failed = failed
        super().__init__(message, code)
