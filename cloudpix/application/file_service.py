"""
File Application Service

Coordinates file use cases: upload, lookup, rename and hard delete with
the share link cascade.
"""

import logging
from typing import Any, BinaryIO, Dict, List, Optional

from cloudpix.domain.events import (
    CascadeDeletionFailedEvent,
    FileDeletedEvent,
    FileUploadedEvent,
)
from cloudpix.domain.files.services import FileManager

from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class FileService:
    """
    Application service for file operations.

    Ownership is enforced by FileManager; this layer only shapes payloads
    and publishes events.
    """

    def __init__(
        self,
        file_manager: FileManager,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Initialize FileService.

        Args:
            file_manager: FileManager domain service
            event_publisher: Optional publisher for domain events
        """
        self.file_manager = file_manager
        self.event_publisher = event_publisher

    def _publish(self, event) -> None:
        if self.event_publisher:
            self.event_publisher.publish(event)

    def upload_file(
        self,
        owner_id: str,
        file_name: str,
        content_type: str,
        content: BinaryIO,
        size: int,
    ) -> Dict[str, Any]:
        """
        Store an upload and return its public representation.

        Raises:
            InvalidRequestError: For blank names, oversized or disallowed files
        """
        file = self.file_manager.register_upload(
            owner_id, file_name, content_type, content, size
        )

        self._publish(
            FileUploadedEvent(
                aggregate_id=file.file_id,
                occurred_at=file.upload_date,
                owner_id=file.owner_id,
                file_size=file.file_size,
                content_type=file.content_type,
            )
        )

        return file.to_public_dict()

    def list_files(self, owner_id: str) -> List[Dict[str, Any]]:
        return [f.to_public_dict() for f in self.file_manager.list_files(owner_id)]

    def get_file(self, file_id: str, caller_id: str) -> Dict[str, Any]:
        return self.file_manager.get_owned_file(file_id, caller_id).to_public_dict()

    def rename_file(self, file_id: str, caller_id: str, new_name: str) -> Dict[str, Any]:
        file = self.file_manager.rename_file(file_id, caller_id, new_name)
        logger.info(f"Renamed file {file_id}")
        return file.to_public_dict()

    def delete_file(self, file_id: str, caller_id: str) -> Dict[str, Any]:
        """
        Hard delete a file and retire its share links.

        Returns:
            Summary with cascade counts; ``complete`` is False when some
            share links could not be deleted
        """
        result = self.file_manager.delete_file(file_id, caller_id)
        now = self.file_manager.clock()

        if not result.cascade.complete:
            self._publish(
                CascadeDeletionFailedEvent(
                    aggregate_id=file_id,
                    occurred_at=now,
                    failed_link_ids=tuple(result.cascade.failed),
                    errors=tuple(result.cascade.errors),
                )
            )

        self._publish(
            FileDeletedEvent(
                aggregate_id=file_id,
                occurred_at=now,
                owner_id=result.file.owner_id,
                blob_deleted=result.blob_deleted,
                share_links_removed=len(result.cascade.removed),
            )
        )

        response = {"file_id": file_id, "deleted": True, "blob_deleted": result.blob_deleted}
        response.update(result.cascade.to_dict())
        return response
