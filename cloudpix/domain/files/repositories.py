"""
File Repositories

Repository interface for file metadata persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import StoredFile


class FileRepository(ABC):
    """
    Abstract repository interface for file metadata persistence.

    Implementations raise InfrastructureError when the store is unavailable.
    """

    @abstractmethod
    def save(self, file: StoredFile) -> bool:
        """
        Save file metadata, creating or overwriting the record.

        Args:
            file: StoredFile to save

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        """
        Retrieve file by id.

        Args:
            file_id: File identifier

        Returns:
            StoredFile if found, None otherwise
        """
        pass

    @abstractmethod
    def find_by_owner_id(self, owner_id: str) -> List[StoredFile]:
        """Retrieve every file owned by a user."""
        pass

    @abstractmethod
    def delete(self, file_id: str) -> bool:
        """
        Hard delete file metadata.

        Returns:
            True if deleted, False if it did not exist
        """
        pass
