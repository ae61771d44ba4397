"""
Object Storage Repository Interface

Abstract interface for blob storage operations and read-credential minting.
This abstraction keeps the domain layer independent of the storage backend
(local filesystem, Google Cloud Storage).
"""

from abc import ABC, abstractmethod
from typing import BinaryIO

from .value_objects import AccessCredential


class IObjectStorageRepository(ABC):
    """
    Unified interface for object storage.

    Contract Guarantees:
    - Keys are relative to the storage root (``owner/file/name``)
    - delete() is idempotent
    - exists() never raises for invalid keys
    - mint_read_credential() raises MintingFailedError rather than ever
      returning an unscoped or public URL

    Attributes:
        credential_ceiling_seconds: Longest lifetime the backend will sign
    """

    credential_ceiling_seconds: int = 7 * 24 * 60 * 60

    @abstractmethod
    def put(self, key: str, content: BinaryIO, content_type: str) -> str:
        """
        Store object bytes.

        Args:
            key: Object key
            content: Binary content as a file-like object
            content_type: MIME type recorded with the object

        Returns:
            The key the object was stored under

        Raises:
            ValueError: If key is empty
            IOError: If the write fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete an object. Deleting a missing object succeeds.

        Raises:
            IOError: If the backend fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if an object exists."""
        pass  # pragma: no cover

    @abstractmethod
    def mint_read_credential(
        self, key: str, lifetime_seconds: int
    ) -> AccessCredential:
        """
        Produce a signed, read-only URL for an object, valid immediately.

        The granted lifetime is ``min(lifetime_seconds,
        credential_ceiling_seconds)``.

        Raises:
            MintingFailedError: If the backend cannot sign the request
        """
        pass  # pragma: no cover

    def granted_lifetime(self, lifetime_seconds: int) -> int:
        """Clamp a requested lifetime to the backend ceiling."""
        return min(int(lifetime_seconds), self.credential_ceiling_seconds)
