"""
File Value Objects

Immutable value objects for file status, upload validation and minted
access credentials.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet

from ..errors import FileTooLargeError, UnsupportedFileTypeError

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024

DEFAULT_ALLOWED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "video/mp4",
        "video/quicktime",
        "application/pdf",
    }
)


class FileStatus(Enum):
    """File status enumeration."""

    ACTIVE = "active"
    DELETED = "deleted"


@dataclass(frozen=True)
class UploadPolicy:
    """Size and content-type limits for uploads."""

    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_content_types: FrozenSet[str] = DEFAULT_ALLOWED_CONTENT_TYPES

    def validate(self, content_type: str, size: int) -> None:
        """
        Validate an upload against the policy.

        Raises:
            FileTooLargeError: If size exceeds ``max_bytes``
            UnsupportedFileTypeError: If the content type is not allowed
        """
        if size > self.max_bytes:
            raise FileTooLargeError(
                f"File size {size} exceeds maximum of {self.max_bytes} bytes"
            )
        if content_type not in self.allowed_content_types:
            raise UnsupportedFileTypeError(
                f"Content type {content_type!r} is not allowed"
            )


@dataclass(frozen=True)
class AccessCredential:
    """
    A signed, read-only access descriptor for a stored object.

    Attributes:
        url: URL the storage backend accepts directly
        expires_at: When the credential stops working
        expires_in: Granted lifetime in seconds
    """

    url: str
    expires_at: datetime
    expires_in: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "url": self.url,
            "expires_at": self.expires_at.isoformat(),
            "expires_in": self.expires_in,
        }
