"""
Custom exceptions and error handling for City Atlas.

Defines application-specific exceptions with error codes for consistent
error handling across the core services and the Lambda handlers.

Usage:
    from core.errors import ConflictError, ErrorCode

    raise ConflictError("pincode 400001 already registered", code=ErrorCode.DUPLICATE_PINCODE)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Lookup errors
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
    EMPTY_RESULT = "EMPTY_RESULT"

    # Uniqueness errors
    DUPLICATE_PINCODE = "DUPLICATE_PINCODE"

    # System errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "Your request contains invalid information. Please check and try again.",
    ErrorCode.INVALID_REQUEST: "Invalid request format. Please try again.",
    ErrorCode.LOCATION_NOT_FOUND: "City not found.",
    ErrorCode.EMPTY_RESULT: "Unable to retrieve cities data.",
    ErrorCode.DUPLICATE_PINCODE: "A city with this pincode already exists.",
    ErrorCode.STORE_UNAVAILABLE: "The data store is temporarily unavailable. Please try again later.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}


class CityAtlasError(Exception):
    """Base exception for all City Atlas errors."""

    status_code = 500
    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class ValidationError(CityAtlasError):
    """Missing or malformed required input."""

    status_code = 400
    default_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(CityAtlasError):
    """Referenced entity does not exist."""

    status_code = 404
    default_code = ErrorCode.LOCATION_NOT_FOUND


class ConflictError(CityAtlasError):
    """Uniqueness violation, e.g. a pincode registered twice."""

    status_code = 409
    default_code = ErrorCode.DUPLICATE_PINCODE


class EmptyResultError(CityAtlasError):
    """Query yielded no records.

    Reported as a server fault, matching the listing contract the admin
    console was built against.
    """

    status_code = 500
    default_code = ErrorCode.EMPTY_RESULT


class StoreError(CityAtlasError):
    """Underlying persistence call failed."""

    status_code = 500
    default_code = ErrorCode.STORE_UNAVAILABLE
