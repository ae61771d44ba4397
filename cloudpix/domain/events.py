"""
Domain Events

Immutable records of significant state changes in the domain.
Events decouple side effects (logging, telemetry) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event
            (link_id or file_id)
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ShareLinkCreatedEvent(DomainEvent):
    """
    Event emitted when a share link is created.

    Attributes:
        aggregate_id: Link ID
        file_id: Shared file
        owner_id: Owner who created the link
        expires_at: Expiration, or None for never
    """
    file_id: str
    owner_id: str
    expires_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "file_id": self.file_id,
            "owner_id": self.owner_id,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        })
        return base_dict


@dataclass(frozen=True)
class ShareLinkAccessedEvent(DomainEvent):
    """
    Event emitted when a share link is resolved and a credential minted.

    Attributes:
        aggregate_id: Link ID
        file_id: Resolved file
        credential_lifetime: Granted credential lifetime in seconds
        access_count: Count after this access, None if recording failed
    """
    file_id: str
    credential_lifetime: int
    access_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "file_id": self.file_id,
            "credential_lifetime": self.credential_lifetime,
            "access_count": self.access_count,
        })
        return base_dict


@dataclass(frozen=True)
class ShareLinkRevokedEvent(DomainEvent):
    """
    Event emitted when a share link is revoked.

    Attributes:
        aggregate_id: Link ID
        file_id: File the link pointed at
        owner_id: Owner who revoked it
    """
    file_id: str
    owner_id: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "file_id": self.file_id,
            "owner_id": self.owner_id,
        })
        return base_dict


@dataclass(frozen=True)
class ShareLinksListedEvent(DomainEvent):
    """
    Event emitted when an owner lists share links.

    Attributes:
        aggregate_id: File ID, or owner ID for per-owner listings
        scope: "file" or "owner"
        link_count: Number of links returned
    """
    scope: str
    link_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "scope": self.scope,
            "link_count": self.link_count,
        })
        return base_dict


@dataclass(frozen=True)
class AccessRecordingFailedEvent(DomainEvent):
    """
    Event emitted when an access could not be counted.

    The resolution itself still succeeded.

    Attributes:
        aggregate_id: Link ID
        error_message: Failure description
    """
    error_message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "error_message": self.error_message,
        })
        return base_dict


@dataclass(frozen=True)
class FileUploadedEvent(DomainEvent):
    """
    Event emitted when a file is uploaded.

    Attributes:
        aggregate_id: File ID
        owner_id: Uploader
        file_size: Size in bytes
        content_type: MIME type
    """
    owner_id: str
    file_size: int
    content_type: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "file_size": self.file_size,
            "content_type": self.content_type,
        })
        return base_dict


@dataclass(frozen=True)
class FileDeletedEvent(DomainEvent):
    """
    Event emitted when a file is hard deleted.

    Attributes:
        aggregate_id: File ID
        owner_id: Owner who deleted it
        blob_deleted: Whether the stored bytes were removed
        share_links_removed: Number of share links retired
    """
    owner_id: str
    blob_deleted: bool
    share_links_removed: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "blob_deleted": self.blob_deleted,
            "share_links_removed": self.share_links_removed,
        })
        return base_dict


@dataclass(frozen=True)
class CascadeDeletionFailedEvent(DomainEvent):
    """
    Event emitted when some share links of a deleted file survive.

    Attributes:
        aggregate_id: File ID
        failed_link_ids: Links that could not be deleted
        errors: Failure descriptions
    """
    failed_link_ids: Tuple[str, ...] = field(default_factory=tuple)
    errors: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "failed_link_ids": list(self.failed_link_ids),
            "errors": list(self.errors),
        })
        return base_dict
