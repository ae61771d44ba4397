"""
Local File Storage Repository Implementation

Concrete implementation of IObjectStorageRepository for the local filesystem.
Read credentials are HMAC signed URLs served by the storage download endpoint.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from cloudpix.domain.errors import MintingFailedError
from cloudpix.domain.files.signed_url_service import SignedUrlService
from cloudpix.domain.files.storage_repository import IObjectStorageRepository
from cloudpix.domain.files.value_objects import AccessCredential

logger = logging.getLogger(__name__)


class LocalFileStorageRepository(IObjectStorageRepository):
    """
    Local filesystem implementation of IObjectStorageRepository.

    Attributes:
        base_path: Base directory for stored objects
        signed_url_service: Signs and verifies download URLs
    """

    def __init__(
        self,
        base_path: str,
        signed_url_service: SignedUrlService,
        credential_ceiling_seconds: Optional[int] = None,
    ):
        """
        Initialize the local file storage repository.

        Args:
            base_path: Base directory for file storage
            signed_url_service: Service used to mint download URLs
            credential_ceiling_seconds: Longest credential lifetime to grant
        """
        self.base_path = Path(base_path).resolve()
        self.signed_url_service = signed_url_service
        if credential_ceiling_seconds is not None:
            self.credential_ceiling_seconds = credential_ceiling_seconds
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the base storage directory exists.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e

    def resolve_path(self, key: str) -> Optional[Path]:
        """
        Map a key to a path under ``base_path``.

        Returns:
            The path, or None for empty keys and keys escaping the base path
        """
        if not key or not key.strip():
            return None
        full_path = (self.base_path / key).resolve()
        if self.base_path not in full_path.parents:
            return None
        return full_path

    def put(self, key: str, content: BinaryIO, content_type: str) -> str:
        """
        Store object bytes, reading the stream in chunks.

        Raises:
            ValueError: If key is empty or escapes the storage root
            IOError: If the write fails
        """
        full_path = self.resolve_path(key)
        if full_path is None:
            raise ValueError(f"Invalid storage key: {key!r}")

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(full_path, "wb") as f:
                while True:
                    chunk = content.read(8192)
                    if not chunk:
                        break
                    f.write(chunk)
        except PermissionError:
            raise
        except OSError as e:
            raise IOError(f"Failed to save file: {e}") from e

        return key

    def open(self, key: str) -> Optional[BinaryIO]:
        """
        Open an object for streaming.

        Returns:
            Open binary file handle, or None if the object doesn't exist
        """
        full_path = self.resolve_path(key)
        if full_path is None or not full_path.is_file():
            return None
        return open(full_path, "rb")

    def delete(self, key: str) -> bool:
        """
        Delete an object. Deleting a missing object returns True.

        Raises:
            IOError: If the file exists but cannot be removed
        """
        full_path = self.resolve_path(key)
        if full_path is None or not full_path.exists():
            return True

        try:
            if full_path.is_file():
                full_path.unlink()
        except PermissionError:
            raise
        except OSError as e:
            raise IOError(f"Failed to delete file: {e}") from e

        return True

    def exists(self, key: str) -> bool:
        try:
            full_path = self.resolve_path(key)
            return full_path is not None and full_path.is_file()
        except (OSError, ValueError):
            return False

    def mint_read_credential(self, key: str, lifetime_seconds: int) -> AccessCredential:
        """
        Mint an HMAC signed download URL for ``key``.

        Raises:
            MintingFailedError: If the object is missing or cannot be signed
        """
        if not self.exists(key):
            raise MintingFailedError(f"Object not found in local storage: {key}")

        try:
            return self.signed_url_service.generate_signed_url(
                key, self.granted_lifetime(lifetime_seconds)
            )
        except (TypeError, ValueError) as e:
            raise MintingFailedError(f"Failed to sign URL for {key}", e) from e
