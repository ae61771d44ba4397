"""
Share Link Entities

Domain entity for a share link: an anonymous, read-only, revocable grant
of access to one file.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ..clock import ensure_utc
from .value_objects import ShareLinkStatus


@dataclass
class ShareLink:
    """
    Entity representing a share link with expiration and revocation tracking.

    ``owner_id`` is captured from the file at creation time and is never
    re-derived, so revocation rights do not follow later ownership changes.
    ``expires_at`` of None means the link never expires.
    ``revoked_at`` is set alongside ``is_revoked`` and only drives cleanup.
    ``retention_ttl`` is only a storage cleanup hint; validity is decided by
    ``expires_at`` and ``is_revoked``.
    """

    link_id: str
    file_id: str
    owner_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    access_count: int = 0
    is_revoked: bool = False
    retention_ttl: Optional[int] = None
    revoked_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        file_id: str,
        owner_id: str,
        now: datetime,
        expires_at: Optional[datetime] = None,
    ) -> "ShareLink":
        """
        Factory method to create a new, active share link.

        Args:
            file_id: Target file
            owner_id: Owner of the file at creation time
            now: Creation timestamp
            expires_at: Absolute expiration, or None for never

        Returns:
            New ShareLink instance
        """
        return cls(
            link_id=str(uuid.uuid4()),
            file_id=file_id,
            owner_id=owner_id,
            created_at=now,
            expires_at=expires_at,
            access_count=0,
            is_revoked=False,
            retention_ttl=cls._compute_retention_ttl(now, expires_at),
        )

    @staticmethod
    def _compute_retention_ttl(
        now: datetime, expires_at: Optional[datetime]
    ) -> Optional[int]:
        """Whole seconds until expiry; None for never or non-positive values."""
        if expires_at is None:
            return None
        ttl = int((expires_at - now).total_seconds())
        return ttl if ttl > 0 else None

    def is_valid(self, now: datetime) -> bool:
        """
        Check whether the link grants access at ``now``.

        Pure: depends only on ``is_revoked``, ``expires_at`` and ``now``.
        """
        if self.is_revoked:
            return False
        return self.expires_at is None or now < self.expires_at

    def status(self, now: datetime) -> ShareLinkStatus:
        """Report the link's status; revoked-and-expired reports revoked."""
        if self.is_revoked:
            return ShareLinkStatus.REVOKED
        if self.expires_at is not None and now >= self.expires_at:
            return ShareLinkStatus.EXPIRED
        return ShareLinkStatus.ACTIVE

    def revoke(self, now: Optional[datetime] = None) -> bool:
        """
        Mark the link revoked, recording when if ``now`` is given.

        Returns:
            True if the state changed, False if it was already revoked
        """
        if self.is_revoked:
            return False
        self.is_revoked = True
        self.revoked_at = now
        return True

    def get_remaining_seconds(self, now: datetime) -> Optional[int]:
        """
        Get remaining seconds until expiration.

        Returns:
            Seconds remaining (0 if expired), None if the link never expires
        """
        if self.expires_at is None:
            return None
        return max(0, int((self.expires_at - now).total_seconds()))

    def is_purgeable(self, now: datetime, grace_seconds: int = 0) -> bool:
        """
        Check whether the record may be physically removed at ``now``.

        Revoked links are kept for ``grace_seconds`` after ``revoked_at``
        (falling back to ``created_at``), expiring links for ``grace_seconds``
        after ``expires_at``.
        """
        cutoff = now - timedelta(seconds=grace_seconds)
        if self.is_revoked:
            return (self.revoked_at or self.created_at) <= cutoff
        return self.expires_at is not None and self.expires_at <= cutoff

    def generate_share_url(self, public_base_url: str) -> str:
        """
        Build the public share URL for this link.

        Presentation only; the URL is never persisted.
        """
        return f"{public_base_url.rstrip('/')}/share/{self.link_id}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "link_id": self.link_id,
            "file_id": self.file_id,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "access_count": self.access_count,
            "is_revoked": self.is_revoked,
            "retention_ttl": self.retention_ttl,
            "revoked_at": self.revoked_at.isoformat() if self.revoked_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShareLink":
        """Create ShareLink from dictionary."""
        expires_at = data.get("expires_at")
        revoked_at = data.get("revoked_at")
        return cls(
            link_id=data["link_id"],
            file_id=data["file_id"],
            owner_id=data["owner_id"],
            created_at=ensure_utc(datetime.fromisoformat(data["created_at"])),
            expires_at=ensure_utc(datetime.fromisoformat(expires_at))
            if expires_at
            else None,
            access_count=int(data.get("access_count", 0)),
            is_revoked=bool(data.get("is_revoked", False)),
            retention_ttl=data.get("retention_ttl"),
            revoked_at=ensure_utc(datetime.fromisoformat(revoked_at))
            if revoked_at
            else None,
        )

    def to_public_dict(self, now: datetime, public_base_url: str) -> Dict[str, Any]:
        """
        Owner-facing representation with derived status and share URL.

        ``retention_ttl`` is a storage detail and is left out.
        """
        status = self.status(now)
        return {
            "link_id": self.link_id,
            "file_id": self.file_id,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "access_count": self.access_count,
            "is_revoked": self.is_revoked,
            "status": status.value,
            "is_active": status == ShareLinkStatus.ACTIVE,
            "share_url": self.generate_share_url(public_base_url),
        }
