"""
Share Link Value Objects

Immutable value objects for share link status, expiration choices and
the lifetime policy for minted access credentials.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import FrozenSet, Optional

from ..errors import InvalidRequestError

SECONDS_PER_DAY = 24 * 60 * 60


class ShareLinkStatus(Enum):
    """Validity state of a share link. Revoked wins over expired."""

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"

    def is_terminal(self) -> bool:
        """Check if status is terminal (expired or revoked)."""
        return self in (ShareLinkStatus.EXPIRED, ShareLinkStatus.REVOKED)


@dataclass(frozen=True)
class ExpirationPolicy:
    """
    Allowed share link durations, in whole days.

    ``None`` is always accepted and means the link never expires.
    """

    allowed_days: FrozenSet[int] = frozenset({1, 7, 30})

    def validate(self, duration_days: Optional[int]) -> Optional[int]:
        """
        Validate a requested duration.

        Args:
            duration_days: Requested duration in days, or None for never

        Returns:
            The validated duration

        Raises:
            InvalidRequestError: If the duration is not in the allowed set
        """
        if duration_days is None:
            return None
        if isinstance(duration_days, bool) or not isinstance(duration_days, int):
            raise InvalidRequestError(
                f"Expiration must be a whole number of days, got {duration_days!r}"
            )
        if duration_days not in self.allowed_days:
            allowed = ", ".join(str(d) for d in sorted(self.allowed_days))
            raise InvalidRequestError(
                f"Expiration of {duration_days} days is not allowed (allowed: {allowed})"
            )
        return duration_days

    def compute_expires_at(
        self, now: datetime, duration_days: Optional[int]
    ) -> Optional[datetime]:
        """Compute ``expires_at`` additively from ``now``."""
        if duration_days is None:
            return None
        return now + timedelta(days=duration_days)


@dataclass(frozen=True)
class CredentialLifetimePolicy:
    """
    Bounds the lifetime of credentials minted at share-access time.

    The granted lifetime is the smallest of the daily cap, the storage
    ceiling and the time left on the share link, raised to at least
    ``min_seconds`` so it is never zero or negative.

    Attributes:
        daily_cap_seconds: Practical cap even for links that live for years
        min_seconds: Floor applied to the bounded lifetime
    """

    daily_cap_seconds: int = SECONDS_PER_DAY
    min_seconds: int = 1

    def __post_init__(self):
        if self.min_seconds < 1:
            raise ValueError("min_seconds must be at least 1")
        if self.daily_cap_seconds < self.min_seconds:
            raise ValueError("daily_cap_seconds must be >= min_seconds")

    def bound(
        self,
        now: datetime,
        expires_at: Optional[datetime],
        storage_ceiling_seconds: int,
    ) -> int:
        """
        Compute the credential lifetime for a share access.

        Args:
            now: Current time
            expires_at: Share link expiration, or None for never
            storage_ceiling_seconds: Platform limit of the storage backend

        Returns:
            Lifetime in whole seconds, always >= min_seconds
        """
        lifetime = min(self.daily_cap_seconds, storage_ceiling_seconds)
        if expires_at is not None:
            remaining = int((expires_at - now).total_seconds())
            lifetime = min(lifetime, remaining)
        return max(self.min_seconds, lifetime)
