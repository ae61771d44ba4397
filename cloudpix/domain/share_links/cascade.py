"""
Share Link Cascade

Retires every share link that points at a file being deleted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .repositories import ShareLinkRepository

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """
    Outcome of a cascade deletion.

    Attributes:
        file_id: File whose links were retired
        removed: Link ids deleted
        failed: Link ids that could not be deleted
        errors: Human-readable failure descriptions
    """

    file_id: str
    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed and not self.errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "share_links_removed": len(self.removed),
            "share_links_failed": list(self.failed),
            "complete": self.complete,
        }


class CascadeCoordinator:
    """
    Deletes share links belonging to a file, one record at a time.

    Best-effort-complete: a failed deletion is recorded and the remaining
    links are still processed. Links that survive are rejected at resolve
    time because their file no longer exists.
    """

    def __init__(self, share_link_repository: ShareLinkRepository):
        self.share_link_repo = share_link_repository

    def retire_links_for_file(self, file_id: str) -> CascadeResult:
        """
        Delete every share link for ``file_id``.

        Args:
            file_id: File being deleted

        Returns:
            CascadeResult describing removed and failed links
        """
        result = CascadeResult(file_id=file_id)

        try:
            links = self.share_link_repo.find_by_file_id(file_id)
        except Exception as e:
            message = f"Could not enumerate share links for file {file_id}: {e}"
            logger.error(message)
            result.errors.append(message)
            return result

        for link in links:
            try:
                self.share_link_repo.delete(link.link_id)
                result.removed.append(link.link_id)
            except Exception as e:
                message = f"Failed to delete share link {link.link_id}: {e}"
                logger.error(message)
                result.failed.append(link.link_id)
                result.errors.append(message)

        return result
