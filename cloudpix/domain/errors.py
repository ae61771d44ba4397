"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry the user-facing messaging for API responses.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    NOT_FOUND = "not_found"
    FILE_NOT_FOUND = "file_not_found"
    LINK_NOT_FOUND = "link_not_found"
    UNAUTHORIZED = "unauthorized"
    AUTHENTICATION_REQUIRED = "authentication_required"
    LINK_EXPIRED = "link_expired"
    LINK_REVOKED = "link_revoked"
    INVALID_STATE = "invalid_state"
    INVALID_REQUEST = "invalid_request"
    INVALID_SIGNATURE = "invalid_signature"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    MINTING_FAILED = "minting_failed"
    SERVICE_UNAVAILABLE = "service_unavailable"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.NOT_FOUND: {
        "title": "Not Found",
        "message": "The requested resource could not be found.",
        "action": "Check the identifier and try again.",
    },
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "The requested file could not be found or has been deleted.",
        "action": "Ask the owner to share the file again.",
    },
    ErrorCategory.LINK_NOT_FOUND: {
        "title": "Share Link Not Found",
        "message": "This share link does not exist.",
        "action": "Check that you copied the full link.",
    },
    ErrorCategory.UNAUTHORIZED: {
        "title": "Access Denied",
        "message": "You do not have permission to perform this action.",
        "action": "Only the owner of the file can do this.",
    },
    ErrorCategory.AUTHENTICATION_REQUIRED: {
        "title": "Authentication Required",
        "message": "A valid access token is required for this request.",
        "action": "Log in again and retry.",
    },
    ErrorCategory.LINK_EXPIRED: {
        "title": "Share Link Expired",
        "message": "This share link has expired.",
        "action": "Ask the owner for a new link.",
    },
    ErrorCategory.LINK_REVOKED: {
        "title": "Share Link Revoked",
        "message": "The owner has revoked this share link.",
        "action": "Ask the owner for a new link.",
    },
    ErrorCategory.INVALID_STATE: {
        "title": "File Not Available",
        "message": "This operation is not allowed on a file that is not active.",
        "action": "Upload the file again before sharing it.",
    },
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.INVALID_SIGNATURE: {
        "title": "Invalid Download Link",
        "message": "The download link is invalid or has expired.",
        "action": "Open the share link again to get a fresh download link.",
    },
    ErrorCategory.FILE_TOO_LARGE: {
        "title": "File Too Large",
        "message": "The uploaded file exceeds the maximum allowed size.",
        "action": "Upload a smaller file.",
    },
    ErrorCategory.UNSUPPORTED_FILE_TYPE: {
        "title": "File Type Not Supported",
        "message": "This type of file cannot be uploaded.",
        "action": "Upload an image, video or PDF document.",
    },
    ErrorCategory.MINTING_FAILED: {
        "title": "Download Unavailable",
        "message": "A download link could not be generated for this file.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
    ErrorCategory.SERVICE_UNAVAILABLE: {
        "title": "Service Temporarily Unavailable",
        "message": "A backing service is temporarily unavailable.",
        "action": "Please retry in a few moments.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class NotFoundError(DomainError):
    """Raised when a share link, file or owner reference is absent."""
    pass


class ShareLinkNotFoundError(NotFoundError):
    """Raised when no share link exists for the given id."""
    pass


class StoredFileNotFoundError(NotFoundError):
    """
    Raised when a file record is gone or is not active.

    Resolution of a share link whose file was deleted fails with this
    error, never with an expiry error.
    """
    pass


class UnauthorizedError(DomainError):
    """Raised when the caller is not the owning identity of a record."""
    pass


class AuthenticationError(DomainError):
    """Raised when a bearer token is missing, malformed or expired."""
    pass


class ShareLinkExpiredError(DomainError):
    """Raised when a share link is past its expiration time."""
    pass


class ShareLinkRevokedError(DomainError):
    """Raised when a share link has been revoked by its owner."""
    pass


class InvalidStateError(DomainError):
    """Raised when an operation targets a file that is not active."""
    pass


class InvalidRequestError(DomainError):
    """Raised when input fails validation (durations, names, uploads)."""
    pass


class FileTooLargeError(InvalidRequestError):
    """Raised when an upload exceeds the configured size limit."""
    pass


class UnsupportedFileTypeError(InvalidRequestError):
    """Raised when an upload's content type is not allowed."""
    pass


class MintingFailedError(DomainError):
    """
    Raised when the storage backend cannot produce an access credential.

    Callers must never fall back to an unscoped URL on this error.
    """
    pass


class InfrastructureError(DomainError):
    """
    Raised when a backing store is unreachable or erroring.

    Always retryable. Never means anything about the validity of a
    share link or file.
    """
    pass


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    This is an application-layer concern that bridges domain errors
    with user-facing error messages and HTTP responses.

    Note: Logging is handled by the caller, not by this exception class.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        # Get user-friendly message
        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Technical details are intentionally left out of the payload.

        Returns:
            Dictionary with error information
        """
        payload = {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }
        if self.category == ErrorCategory.SERVICE_UNAVAILABLE:
            payload["retryable"] = True
        return payload


# Domain error -> (category, HTTP status). Order matters: subclasses first.
_DOMAIN_ERROR_MAP = (
    (ShareLinkNotFoundError, ErrorCategory.LINK_NOT_FOUND, 404),
    (StoredFileNotFoundError, ErrorCategory.FILE_NOT_FOUND, 404),
    (NotFoundError, ErrorCategory.NOT_FOUND, 404),
    (UnauthorizedError, ErrorCategory.UNAUTHORIZED, 403),
    (AuthenticationError, ErrorCategory.AUTHENTICATION_REQUIRED, 401),
    (ShareLinkExpiredError, ErrorCategory.LINK_EXPIRED, 410),
    (ShareLinkRevokedError, ErrorCategory.LINK_REVOKED, 410),
    (InvalidStateError, ErrorCategory.INVALID_STATE, 409),
    (FileTooLargeError, ErrorCategory.FILE_TOO_LARGE, 413),
    (UnsupportedFileTypeError, ErrorCategory.UNSUPPORTED_FILE_TYPE, 415),
    (InvalidRequestError, ErrorCategory.INVALID_REQUEST, 400),
    (MintingFailedError, ErrorCategory.MINTING_FAILED, 502),
    (InfrastructureError, ErrorCategory.SERVICE_UNAVAILABLE, 503),
)


def categorize_domain_error(error: Exception) -> tuple[ErrorCategory, int]:
    """
    Map an exception onto an error category and HTTP status code.

    Args:
        error: Exception raised by a domain or application service

    Returns:
        Tuple of (ErrorCategory, status_code); unknown errors map to
        SYSTEM_ERROR / 500
    """
    for error_type, category, status_code in _DOMAIN_ERROR_MAP:
        if isinstance(error, error_type):
            return category, status_code
    return ErrorCategory.SYSTEM_ERROR, 500


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code
