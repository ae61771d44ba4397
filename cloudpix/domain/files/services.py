"""
File Services

Domain service for file metadata and blob lifecycle.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from ..clock import Clock, utc_now
from ..errors import StoredFileNotFoundError, InvalidRequestError
from ..ownership import ensure_owner
from ..share_links.cascade import CascadeCoordinator, CascadeResult
from .entities import StoredFile
from .repositories import FileRepository
from .storage_repository import IObjectStorageRepository
from .value_objects import UploadPolicy

logger = logging.getLogger(__name__)


@dataclass
class FileDeletionResult:
    """Outcome of a hard file delete."""

    file: StoredFile
    blob_deleted: bool
    cascade: CascadeResult


class FileManager:
    """
    Domain service for managing uploaded files.

    Coordinates blob writes, metadata records, ownership checks and the
    share link cascade on delete.
    """

    def __init__(
        self,
        file_repository: FileRepository,
        storage_repository: IObjectStorageRepository,
        cascade_coordinator: CascadeCoordinator,
        upload_policy: Optional[UploadPolicy] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize FileManager.

        Args:
            file_repository: Repository for file metadata persistence
            storage_repository: Object storage for file bytes
            cascade_coordinator: Retires share links on file delete
            upload_policy: Size and content-type limits
            clock: Time source
        """
        self.file_repo = file_repository
        self.storage_repo = storage_repository
        self.cascade = cascade_coordinator
        self.upload_policy = upload_policy or UploadPolicy()
        self.clock = clock

    def register_upload(
        self,
        owner_id: str,
        file_name: str,
        content_type: str,
        content: BinaryIO,
        size: int,
    ) -> StoredFile:
        """
        Store an uploaded file's bytes and create its record.

        Raises:
            InvalidRequestError: If the name is blank
            FileTooLargeError: If the file exceeds the size limit
            UnsupportedFileTypeError: If the content type is not allowed
        """
        file_name = (file_name or "").strip()
        if not file_name:
            raise InvalidRequestError("File name cannot be empty")
        self.upload_policy.validate(content_type, size)

        file = StoredFile.create(
            owner_id=owner_id,
            file_name=file_name,
            file_size=size,
            content_type=content_type,
            now=self.clock(),
        )
        self.storage_repo.put(file.storage_key, content, content_type)

        try:
            self.file_repo.save(file)
        except Exception:
            # Don't leave an orphaned blob behind a failed metadata write
            self._delete_blob(file.storage_key)
            raise

        return file

    def get_file(self, file_id: str) -> StoredFile:
        """
        Retrieve a file record regardless of status.

        Raises:
            StoredFileNotFoundError: If the record does not exist
        """
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise StoredFileNotFoundError(f"File not found: {file_id}")
        return file

    def find_file(self, file_id: str) -> Optional[StoredFile]:
        """Look up a file record, returning None when it is gone."""
        return self.file_repo.get_by_id(file_id)

    def get_active_file(self, file_id: str) -> StoredFile:
        """
        Retrieve a file that can be served through a share link.

        Raises:
            StoredFileNotFoundError: If the record is gone or not active
        """
        file = self.file_repo.get_by_id(file_id)
        if file is None or not file.is_active():
            raise StoredFileNotFoundError(f"File not found or deleted: {file_id}")
        return file

    def get_owned_file(self, file_id: str, caller_id: str) -> StoredFile:
        """
        Retrieve a file after checking the caller owns it.

        Raises:
            StoredFileNotFoundError: If the record does not exist
            UnauthorizedError: If the caller is not the owner
        """
        file = self.get_file(file_id)
        ensure_owner(caller_id, file)
        return file

    def list_files(self, owner_id: str) -> List[StoredFile]:
        """List an owner's files, newest first."""
        files = self.file_repo.find_by_owner_id(owner_id)
        return sorted(files, key=lambda f: f.upload_date, reverse=True)

    def rename_file(self, file_id: str, caller_id: str, new_name: str) -> StoredFile:
        """
        Rename a file. The storage key is unchanged.

        Raises:
            InvalidRequestError: If the new name is blank
        """
        file = self.get_owned_file(file_id, caller_id)

        new_name = (new_name or "").strip()
        if not new_name:
            raise InvalidRequestError("File name cannot be empty")

        file.file_name = new_name
        self.file_repo.save(file)
        return file

    def delete_file(self, file_id: str, caller_id: str) -> FileDeletionResult:
        """
        Hard delete a file: blob, share links, then the record.

        Blob and share link failures are reported in the result and do not
        stop the record from being removed.

        Raises:
            StoredFileNotFoundError: If the record does not exist
            UnauthorizedError: If the caller is not the owner
        """
        file = self.get_owned_file(file_id, caller_id)

        blob_deleted = self._delete_blob(file.storage_key)
        cascade_result = self.cascade.retire_links_for_file(file.file_id)
        self.file_repo.delete(file.file_id)

        return FileDeletionResult(
            file=file, blob_deleted=blob_deleted, cascade=cascade_result
        )

    def _delete_blob(self, storage_key: str) -> bool:
        """
        Delete a blob, logging instead of raising on failure.

        Returns:
            True if deleted, False otherwise
        """
        try:
            return self.storage_repo.delete(storage_key)
        except Exception as e:
            logger.warning(f"Failed to delete blob for key {storage_key}: {e}")
            return False
