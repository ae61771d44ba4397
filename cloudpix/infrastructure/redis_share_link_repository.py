"""
Redis Share Link Repository Implementation

Concrete Redis-based implementation of ShareLinkRepository interface.
Stores share links as JSON documents with a retention TTL and keeps
per-file and per-owner index sets for listing.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from cloudpix.domain.share_links.entities import ShareLink
from cloudpix.domain.share_links.repositories import ShareLinkRepository

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_GRACE_SECONDS = 7 * 24 * 60 * 60


class RedisShareLinkRepository(ShareLinkRepository):
    """
    Redis-based implementation of ShareLinkRepository.

    Key layout:
    - ``share_link:{link_id}`` -> link document
    - ``share_links:file:{file_id}`` -> set of link ids
    - ``share_links:owner:{owner_id}`` -> set of link ids

    Documents of expiring links get a Redis TTL of ``retention_ttl`` plus a
    grace period, so an expired link still answers as expired (410) rather
    than missing (404) for a while after it lapses.
    """

    def __init__(
        self,
        redis_repository,
        retention_grace_seconds: int = DEFAULT_RETENTION_GRACE_SECONDS,
    ):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
            retention_grace_seconds: Extra seconds an expired record is kept
        """
        self.redis_repo = redis_repository
        self.retention_grace_seconds = retention_grace_seconds
        self.link_prefix = "share_link"
        self.file_index_prefix = "share_links:file"
        self.owner_index_prefix = "share_links:owner"

    def _link_key(self, link_id: str) -> str:
        return f"{self.link_prefix}:{link_id}"

    def _file_index(self, file_id: str) -> str:
        return f"{self.file_index_prefix}:{file_id}"

    def _owner_index(self, owner_id: str) -> str:
        return f"{self.owner_index_prefix}:{owner_id}"

    def _redis_ttl(self, link: ShareLink) -> Optional[int]:
        if link.retention_ttl is None:
            return None
        return link.retention_ttl + self.retention_grace_seconds

    def create(self, link: ShareLink) -> ShareLink:
        """Store the link document, then add it to both indexes."""
        self.redis_repo.set_json(
            self._link_key(link.link_id), link.to_dict(), ttl=self._redis_ttl(link)
        )
        self.redis_repo.add_to_set(self._file_index(link.file_id), link.link_id)
        self.redis_repo.add_to_set(self._owner_index(link.owner_id), link.link_id)
        return link

    def get_by_id(self, link_id: str) -> Optional[ShareLink]:
        data = self.redis_repo.get_json(self._link_key(link_id))
        if data is None:
            return None
        return self._deserialize(data)

    def find_by_file_id(self, file_id: str) -> List[ShareLink]:
        link_ids = self.redis_repo.get_set_members(self._file_index(file_id))
        return self._load_many(link_ids)

    def find_by_owner_id(self, owner_id: str) -> List[ShareLink]:
        link_ids = self.redis_repo.get_set_members(self._owner_index(owner_id))
        return self._load_many(link_ids)

    def replace(self, link: ShareLink) -> bool:
        """Overwrite the document; the remaining Redis TTL is kept."""
        return self.redis_repo.replace_json(self._link_key(link.link_id), link.to_dict())

    def delete(self, link_id: str) -> bool:
        """
        Delete the link document and its index entries.

        Returns:
            True if the document existed
        """
        link = self.get_by_id(link_id)
        deleted = self.redis_repo.delete(self._link_key(link_id))

        if link is not None:
            self.redis_repo.remove_from_set(self._file_index(link.file_id), link_id)
            self.redis_repo.remove_from_set(self._owner_index(link.owner_id), link_id)

        return deleted

    def increment_access_count(self, link_id: str) -> Optional[int]:
        return self.redis_repo.increment_json_field(
            self._link_key(link_id), "access_count", 1
        )

    def mark_revoked(self, link_id: str, revoked_at: datetime) -> Optional[bool]:
        """Flip ``is_revoked`` in place; the access count and TTL are untouched."""
        return self.redis_repo.set_json_fields(
            self._link_key(link_id),
            {"is_revoked": True, "revoked_at": revoked_at.isoformat()},
            unless_field="is_revoked",
        )

    def find_purgeable(self, now: datetime, grace_seconds: int = 0) -> List[ShareLink]:
        """Scan link documents for links revoked or expired past the grace period."""
        link_ids = [
            key[len(self.link_prefix) + 1:]
            for key in self.redis_repo.get_keys_by_pattern(f"{self.link_prefix}:*")
        ]

        return [
            link
            for link in self._load_many(link_ids)
            if link.is_purgeable(now, grace_seconds)
        ]

    def prune_indexes(self) -> int:
        """Remove index entries whose link document no longer exists."""
        removed = 0
        for prefix in (self.file_index_prefix, self.owner_index_prefix):
            for index_key in self.redis_repo.get_keys_by_pattern(f"{prefix}:*"):
                for link_id in self.redis_repo.get_set_members(index_key):
                    if not self.redis_repo.exists(self._link_key(link_id)):
                        removed += self.redis_repo.remove_from_set(index_key, link_id)
        return removed

    def _load_many(self, link_ids: Iterable[str]) -> List[ShareLink]:
        link_ids = list(link_ids)
        documents = self.redis_repo.get_json_many(
            [self._link_key(link_id) for link_id in link_ids]
        )

        links = []
        for data in documents:
            # Expired out of Redis but still indexed
            if data is None:
                continue
            link = self._deserialize(data)
            if link is not None:
                links.append(link)
        return links

    def _deserialize(self, data: dict) -> Optional[ShareLink]:
        try:
            return ShareLink.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error deserializing share link {data.get('link_id')}: {e}")
            return None
