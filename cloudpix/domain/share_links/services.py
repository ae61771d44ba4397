"""
Share Link Services

Domain service governing the share link lifecycle: creation rules,
validation, revocation and access accounting.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..clock import Clock, utc_now
from ..errors import (
    InvalidStateError,
    ShareLinkExpiredError,
    ShareLinkNotFoundError,
    ShareLinkRevokedError,
    StoredFileNotFoundError,
)
from ..files.repositories import FileRepository
from ..ownership import ensure_owner
from .entities import ShareLink
from .repositories import ShareLinkRepository
from .value_objects import ExpirationPolicy, ShareLinkStatus

logger = logging.getLogger(__name__)


class ShareLinkManager:
    """
    Domain service for the share link state machine.

    States are Active, Expired and Revoked; Expired and Revoked are
    terminal. Expiry is enforced on read, never by a sweep.
    """

    def __init__(
        self,
        share_link_repository: ShareLinkRepository,
        file_repository: FileRepository,
        expiration_policy: Optional[ExpirationPolicy] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize ShareLinkManager.

        Args:
            share_link_repository: Repository for share link persistence
            file_repository: Source of file metadata (owner, status)
            expiration_policy: Allowed durations, defaults to 1/7/30 days
            clock: Time source
        """
        self.share_link_repo = share_link_repository
        self.file_repo = file_repository
        self.expiration_policy = expiration_policy or ExpirationPolicy()
        self.clock = clock

    def now(self) -> datetime:
        """Current time according to the injected clock."""
        return self.clock()

    def create_link(
        self, file_id: str, owner_id: str, duration_days: Optional[int] = None
    ) -> ShareLink:
        """
        Create a share link for an active file owned by ``owner_id``.

        Args:
            file_id: Target file
            owner_id: Authenticated caller, must own the file
            duration_days: One of the allowed durations, or None for never

        Returns:
            The stored ShareLink

        Raises:
            InvalidRequestError: If the duration is not allowed
            StoredFileNotFoundError: If the file does not exist
            UnauthorizedError: If the caller does not own the file
            InvalidStateError: If the file is not active
        """
        duration_days = self.expiration_policy.validate(duration_days)

        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise StoredFileNotFoundError(f"File not found: {file_id}")

        ensure_owner(owner_id, file)

        if not file.is_active():
            raise InvalidStateError(f"Cannot share file in status {file.status.value}")

        now = self.now()
        link = ShareLink.create(
            file_id=file.file_id,
            owner_id=file.owner_id,
            now=now,
            expires_at=self.expiration_policy.compute_expires_at(now, duration_days),
        )
        return self.share_link_repo.create(link)

    def get_link(self, link_id: str) -> ShareLink:
        """
        Retrieve a share link by id.

        Raises:
            ShareLinkNotFoundError: If the link does not exist
        """
        link = self.share_link_repo.get_by_id(link_id)
        if link is None:
            raise ShareLinkNotFoundError(f"Share link not found: {link_id}")
        return link

    @staticmethod
    def validate(link: ShareLink, now: datetime) -> bool:
        """Pure validity check, identical at resolve and listing time."""
        return link.is_valid(now)

    def ensure_valid(self, link: ShareLink, now: Optional[datetime] = None) -> None:
        """
        Raise the specific reason a link is unusable, if any.

        Raises:
            ShareLinkRevokedError: If the link was revoked
            ShareLinkExpiredError: If the link is past ``expires_at``
        """
        status = link.status(now or self.now())
        if status == ShareLinkStatus.REVOKED:
            raise ShareLinkRevokedError(f"Share link revoked: {link.link_id}")
        if status == ShareLinkStatus.EXPIRED:
            raise ShareLinkExpiredError(f"Share link expired: {link.link_id}")

    def revoke_link(self, link_id: str, requesting_owner_id: str) -> ShareLink:
        """
        Revoke a share link. Revoking an already revoked link is a no-op.

        Ownership is checked against the owner captured on the link, not
        against the file's current owner.

        Raises:
            ShareLinkNotFoundError: If the link does not exist
            UnauthorizedError: If the caller is not the link's owner
        """
        link = self.get_link(link_id)
        ensure_owner(requesting_owner_id, link)

        if link.is_revoked:
            return link

        # Only the revocation fields are written; concurrent access counts survive
        if self.share_link_repo.mark_revoked(link_id, self.now()) is None:
            raise ShareLinkNotFoundError(f"Share link not found: {link_id}")
        return self.get_link(link_id)

    def record_access(self, link_id: str) -> Optional[int]:
        """
        Add one to the link's access count.

        Returns:
            New access count, or None if the link vanished meanwhile
        """
        return self.share_link_repo.increment_access_count(link_id)

    def list_links_for_file(
        self, file_id: str, caller_id: str, active_only: bool = False
    ) -> List[ShareLink]:
        """
        List share links of a file owned by the caller.

        Raises:
            StoredFileNotFoundError: If the file does not exist
            UnauthorizedError: If the caller does not own the file
        """
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise StoredFileNotFoundError(f"File not found: {file_id}")
        ensure_owner(caller_id, file)

        links = self.share_link_repo.find_by_file_id(file_id)
        if active_only:
            now = self.now()
            links = [link for link in links if self.validate(link, now)]
        return sorted(links, key=lambda link: link.created_at, reverse=True)

    def list_links_for_owner(self, owner_id: str) -> List[ShareLink]:
        """List every share link created by ``owner_id``, newest first."""
        links = self.share_link_repo.find_by_owner_id(owner_id)
        return sorted(links, key=lambda link: link.created_at, reverse=True)

    def purge_stale_links(self, grace_seconds: int = 0) -> int:
        """
        Physically delete links revoked or expired longer than the grace period.

        Storage housekeeping only; validity never depends on it.

        Returns:
            Number of links deleted
        """
        count = 0
        for link in self.share_link_repo.find_purgeable(self.now(), grace_seconds):
            try:
                if self.share_link_repo.delete(link.link_id):
                    count += 1
            except Exception as e:
                logger.warning(f"Error purging share link {link.link_id[:8]}: {e}")
        return count

    def prune_indexes(self) -> int:
        """Drop index entries left behind by records that expired out of the store."""
        return self.share_link_repo.prune_indexes()
