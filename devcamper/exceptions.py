"""
DevCamper API — Custom Exception Hierarchy
===========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions carry the HTTP status and a client-safe message, so
       services and guards can fail with a single `raise` and the global
       handlers in main.py build a consistent `{success: false, error}` body.
How:   Each exception class carries a message, an optional context dict
       (logged, never returned) and a class-level `status_code`.
Who:   Raised by services, guard dependencies and the query translator.

Exception Hierarchy:
    DevCamperError (base)           → 500
    ├── ValidationError             → 400 Bad Request
    ├── UnauthorizedError           → 401 Unauthorized
    ├── ForbiddenError              → 403 Forbidden
    ├── NotFoundError               → 404 Not Found
    ├── ConflictError               → 409 Conflict
    ├── RateLimitExceededError      → 429 Too Many Requests
    ├── FileStorageError            → 500 Internal Server Error
    ├── EmailDeliveryError          → 500 Internal Server Error
    └── GeocodingError              → 503 Service Unavailable

Database-level failures are not wrapped here: IntegrityError (unique
violations) and pydantic's RequestValidationError have their own handlers.
"""

from typing import Any, Dict, Optional


class DevCamperError(Exception):
    """
    Base exception for all DevCamper application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DevCamperError):
    """
    Raised when client input fails a business rule.

    When:    Missing upload, non-image file, unknown filter field, etc.
    HTTP:    400 Bad Request

    Schema-level validation (required fields, lengths, enums) is handled by
    pydantic and reported through the RequestValidationError handler with the
    same status and envelope.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(DevCamperError):
    """
    Raised when the caller is not authenticated.

    When:    Missing/malformed bearer header, bad signature, expired token,
             token for a user that no longer exists, wrong login credentials.
    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Not authorized to access this route",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(DevCamperError):
    """
    Raised when an authenticated caller lacks the role or ownership required.

    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "You don't have permission to modify that resource.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DevCamperError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/v1/bootcamps/{id} with an unknown or malformed id.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource} not found"
            if resource_id:
                message = f"{resource} not found with id of {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(DevCamperError):
    """
    Raised when a create would violate a uniqueness rule.

    When:    A non-admin publisher creates a second bootcamp. Unique-index
             violations raised by the database map to the same status.
    HTTP:    409 Conflict
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Duplicate field value entered",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(DevCamperError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Too many requests, please try again in {retry_after} seconds."
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class FileStorageError(DevCamperError):
    """
    Raised when writing an uploaded photo to disk fails.

    HTTP:    500 Internal Server Error
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Problem with file upload",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class EmailDeliveryError(DevCamperError):
    """
    Raised when the SMTP transport rejects or fails to deliver a message.

    HTTP:    500 Internal Server Error
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Email could not be sent",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GeocodingError(DevCamperError):
    """
    Raised when the geocoding provider is unreachable or returns an error.

    HTTP:    503 Service Unavailable
    """

    status_code = 503

    def __init__(
        self,
        message: str = "Geocoding service is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
