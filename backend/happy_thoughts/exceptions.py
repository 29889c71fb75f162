"""
Happy Thoughts API — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios of the service.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py translate them into the
       `{success: false, response: {...}}` envelope with the right status code.
Who:   Raised by ThoughtService; caught only by the global handlers.

Exception Hierarchy:
    HappyThoughtsError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── InvalidInputError        → 404 Not Found (malformed identifier)
    └── StoreUnavailableError    → 503 Service Unavailable
"""

from typing import Any, Dict, Optional


class HappyThoughtsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional detail returned under `details` in the error body
    """

    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HappyThoughtsError):
    """
    Raised when client input breaks a business rule.

    When:    Message shorter than 5 or longer than 140 characters after trimming,
             missing message, `page` given without `perPage`.
    HTTP:    400 Bad Request
    """

    error_code = "validation_error"

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


class NotFoundError(HappyThoughtsError):
    """
    Raised when a requested resource does not exist.

    When:    PATCH /thoughts/{id}/like with a well-formed id that matches no row.
    HTTP:    404 Not Found
    """

    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvalidInputError(HappyThoughtsError):
    """
    Raised when an identifier is not in a form the store can look up.

    When:    PATCH /thoughts/not-a-uuid/like
    HTTP:    404 Not Found; a malformed id can never name a thought.
    """

    error_code = "invalid_input"

    def __init__(
        self,
        message: str = "The supplied identifier is malformed",
        field: Optional[str] = None,
        value: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = value
        super().__init__(message=message, context=ctx)


class StoreUnavailableError(HappyThoughtsError):
    """
    Raised when the backing store cannot complete an operation.

    When:    Connection refused, pool timeout, connection dropped mid-query.
    HTTP:    503 Service Unavailable

    The message returned to the client is always generic; the driver error
    is logged server-side only.
    """

    error_code = "store_unavailable"

    def __init__(
        self,
        message: str = "The thoughts store is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
