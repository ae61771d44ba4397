"""
Share Link Repositories

Repository interface for share link persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import ShareLink


class ShareLinkRepository(ABC):
    """
    Abstract repository interface for share link persistence.

    Implementations must preserve every ShareLink field exactly and raise
    InfrastructureError when the backing store is unavailable. Absence is
    reported with None / False, never with an exception.
    """

    @abstractmethod
    def create(self, link: ShareLink) -> ShareLink:
        """
        Persist a new share link.

        Args:
            link: ShareLink to store

        Returns:
            The stored ShareLink
        """
        pass

    @abstractmethod
    def get_by_id(self, link_id: str) -> Optional[ShareLink]:
        """
        Retrieve a share link by id.

        Args:
            link_id: Share link identifier

        Returns:
            ShareLink if found, None otherwise
        """
        pass

    @abstractmethod
    def find_by_file_id(self, file_id: str) -> List[ShareLink]:
        """Retrieve every share link that targets a file, revoked included."""
        pass

    @abstractmethod
    def find_by_owner_id(self, owner_id: str) -> List[ShareLink]:
        """Retrieve every share link created by an owner."""
        pass

    @abstractmethod
    def replace(self, link: ShareLink) -> bool:
        """
        Overwrite an existing share link record.

        Args:
            link: Updated ShareLink

        Returns:
            True if the record existed and was replaced, False otherwise
        """
        pass

    @abstractmethod
    def delete(self, link_id: str) -> bool:
        """
        Delete a share link record.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    @abstractmethod
    def increment_access_count(self, link_id: str) -> Optional[int]:
        """
        Atomically add one to a link's access count.

        Returns:
            The new count, or None if the link does not exist
        """
        pass

    @abstractmethod
    def mark_revoked(self, link_id: str, revoked_at: datetime) -> Optional[bool]:
        """
        Atomically mark a link revoked without touching any other field.

        A concurrent ``increment_access_count`` must never be lost.

        Returns:
            True if the link was revoked now, False if it already was,
            None if the link does not exist
        """
        pass

    @abstractmethod
    def find_purgeable(self, now: datetime, grace_seconds: int = 0) -> List[ShareLink]:
        """
        Find links whose records may be physically removed.

        A link is purgeable when it was revoked, or expired, more than
        ``grace_seconds`` before ``now`` (see ``ShareLink.is_purgeable``).
        """
        pass

    def prune_indexes(self) -> int:
        """
        Drop secondary index entries whose record no longer exists.

        Returns:
            Number of entries removed (0 for stores without indexes)
        """
        return 0
