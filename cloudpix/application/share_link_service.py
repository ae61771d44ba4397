"""
Share Link Application Service

Coordinates share link use cases: creation, anonymous resolution,
revocation, listing and storage housekeeping.
"""

import logging
from typing import Any, Dict, List, Optional

from cloudpix.domain.events import (
    AccessRecordingFailedEvent,
    ShareLinkAccessedEvent,
    ShareLinkCreatedEvent,
    ShareLinkRevokedEvent,
    ShareLinksListedEvent,
)
from cloudpix.domain.files.services import FileManager
from cloudpix.domain.files.storage_repository import IObjectStorageRepository
from cloudpix.domain.share_links.entities import ShareLink
from cloudpix.domain.share_links.services import ShareLinkManager
from cloudpix.domain.share_links.value_objects import CredentialLifetimePolicy

from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_BASE_URL = "http://localhost:5173"


class ShareLinkService:
    """
    Application service for share link operations.

    Domain errors raised by the managers propagate unchanged; the API layer
    maps them onto HTTP responses.
    """

    def __init__(
        self,
        share_link_manager: ShareLinkManager,
        file_manager: FileManager,
        storage_repository: IObjectStorageRepository,
        credential_policy: Optional[CredentialLifetimePolicy] = None,
        event_publisher: Optional[EventPublisher] = None,
        public_base_url: str = DEFAULT_PUBLIC_BASE_URL,
    ):
        """
        Initialize ShareLinkService.

        Args:
            share_link_manager: ShareLinkManager domain service
            file_manager: FileManager for file lookups
            storage_repository: Object storage that mints read credentials
            credential_policy: Bounds for credentials minted at access time
            event_publisher: Optional publisher for domain events
            public_base_url: Frontend origin used to build share URLs
        """
        self.share_link_manager = share_link_manager
        self.file_manager = file_manager
        self.storage_repository = storage_repository
        self.credential_policy = credential_policy or CredentialLifetimePolicy()
        self.event_publisher = event_publisher
        self.public_base_url = public_base_url

    def _publish(self, event) -> None:
        if self.event_publisher:
            self.event_publisher.publish(event)

    def _present(self, link: ShareLink) -> Dict[str, Any]:
        return link.to_public_dict(self.share_link_manager.now(), self.public_base_url)

    def create_share_link(
        self, file_id: str, owner_id: str, expiration_days: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Create a share link for a file owned by the caller.

        Args:
            file_id: File to share
            owner_id: Authenticated caller
            expiration_days: One of the allowed durations, None for never

        Returns:
            Owner-facing link representation including ``share_url``
        """
        link = self.share_link_manager.create_link(file_id, owner_id, expiration_days)

        self._publish(
            ShareLinkCreatedEvent(
                aggregate_id=link.link_id,
                occurred_at=link.created_at,
                file_id=link.file_id,
                owner_id=link.owner_id,
                expires_at=link.expires_at,
            )
        )

        return self._present(link)

    def resolve_share_link(self, link_id: str) -> Dict[str, Any]:
        """
        Resolve a share link anonymously and mint a read credential.

        Checks run in a fixed order: link exists, link is neither revoked
        nor expired, file exists and is active. Only then is a credential
        minted and the access counted.

        Returns:
            Dictionary with ``share_link``, ``file`` and ``download`` sections

        Raises:
            ShareLinkNotFoundError: If the link does not exist
            ShareLinkRevokedError: If the link was revoked
            ShareLinkExpiredError: If the link has expired
            StoredFileNotFoundError: If the file is gone or not active
            MintingFailedError: If storage cannot sign a URL
        """
        link = self.share_link_manager.get_link(link_id)
        now = self.share_link_manager.now()
        self.share_link_manager.ensure_valid(link, now)

        file = self.file_manager.get_active_file(link.file_id)

        lifetime = self.credential_policy.bound(
            now, link.expires_at, self.storage_repository.credential_ceiling_seconds
        )
        credential = self.storage_repository.mint_read_credential(
            file.storage_key, lifetime
        )

        access_count = self._record_access(link)

        self._publish(
            ShareLinkAccessedEvent(
                aggregate_id=link.link_id,
                occurred_at=now,
                file_id=file.file_id,
                credential_lifetime=credential.expires_in,
                access_count=access_count,
            )
        )

        return {
            "share_link": {
                "link_id": link.link_id,
                "created_at": link.created_at.isoformat(),
                "expires_at": link.expires_at.isoformat() if link.expires_at else None,
                "share_url": link.generate_share_url(self.public_base_url),
            },
            "file": file.to_shared_dict(),
            "download": credential.to_dict(),
        }

    def _record_access(self, link: ShareLink) -> Optional[int]:
        """Count an access. Failures are logged and published, never raised."""
        try:
            count = self.share_link_manager.record_access(link.link_id)
        except Exception as e:
            logger.warning(f"Failed to record access for link {link.link_id[:8]}...: {e}")
            self._publish(
                AccessRecordingFailedEvent(
                    aggregate_id=link.link_id,
                    occurred_at=self.share_link_manager.now(),
                    error_message=str(e),
                )
            )
            return None

        if count is None:
            logger.warning(f"Link {link.link_id[:8]}... vanished before access was recorded")
        return count

    def revoke_share_link(self, link_id: str, owner_id: str) -> Dict[str, Any]:
        """
        Revoke a share link. Revoking twice returns the same revoked link.

        Raises:
            ShareLinkNotFoundError: If the link does not exist
            UnauthorizedError: If the caller is not the link's owner
        """
        link = self.share_link_manager.revoke_link(link_id, owner_id)

        self._publish(
            ShareLinkRevokedEvent(
                aggregate_id=link.link_id,
                occurred_at=self.share_link_manager.now(),
                file_id=link.file_id,
                owner_id=link.owner_id,
            )
        )

        return self._present(link)

    def list_file_share_links(
        self, file_id: str, caller_id: str, active_only: bool = False
    ) -> List[Dict[str, Any]]:
        """List a file's links, each flagged with ``status`` and ``is_active``."""
        links = self.share_link_manager.list_links_for_file(
            file_id, caller_id, active_only=active_only
        )

        self._publish(
            ShareLinksListedEvent(
                aggregate_id=file_id,
                occurred_at=self.share_link_manager.now(),
                scope="file",
                link_count=len(links),
            )
        )

        return [self._present(link) for link in links]

    def list_owner_share_links(self, owner_id: str) -> List[Dict[str, Any]]:
        """
        List every link created by the caller with a summary of its file.

        The ``file`` entry is None when the file no longer exists.
        """
        links = self.share_link_manager.list_links_for_owner(owner_id)

        files = {}
        results = []
        for link in links:
            if link.file_id not in files:
                files[link.file_id] = self.file_manager.find_file(link.file_id)
            file = files[link.file_id]

            entry = self._present(link)
            entry["file"] = file.to_shared_dict() if file is not None else None
            results.append(entry)

        self._publish(
            ShareLinksListedEvent(
                aggregate_id=owner_id,
                occurred_at=self.share_link_manager.now(),
                scope="owner",
                link_count=len(results),
            )
        )

        return results

    def cleanup_stale_links(self, grace_seconds: int = 0) -> Dict[str, Any]:
        """
        Purge revoked and long-expired link records and prune dangling indexes.

        Storage housekeeping only. Errors are collected into the result.

        Returns:
            ``{"share_links_purged", "index_entries_pruned", "errors"}``
        """
        stats = {"share_links_purged": 0, "index_entries_pruned": 0, "errors": []}

        try:
            stats["share_links_purged"] = self.share_link_manager.purge_stale_links(
                grace_seconds
            )
        except Exception as e:
            error_msg = f"Error purging stale share links: {e}"
            logger.error(error_msg, exc_info=True)
            stats["errors"].append(error_msg)

        try:
            stats["index_entries_pruned"] = (
                self.share_link_manager.prune_indexes()
            )
        except Exception as e:
            error_msg = f"Error pruning share link indexes: {e}"
            logger.error(error_msg, exc_info=True)
            stats["errors"].append(error_msg)

        return stats
