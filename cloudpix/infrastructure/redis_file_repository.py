"""
Redis File Repository Implementation

Concrete Redis-based implementation of FileRepository interface.
File records do not expire; they live until the owner deletes them.
"""

import logging
from typing import List, Optional

from cloudpix.domain.files.entities import StoredFile
from cloudpix.domain.files.repositories import FileRepository

logger = logging.getLogger(__name__)


class RedisFileRepository(FileRepository):
    """
    Redis-based implementation of FileRepository.

    Creates two mappings:
    - ``file:{file_id}`` -> file metadata
    - ``files:owner:{owner_id}`` -> set of file ids
    """

    def __init__(self, redis_repository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.file_prefix = "file"
        self.owner_index_prefix = "files:owner"

    def _file_key(self, file_id: str) -> str:
        return f"{self.file_prefix}:{file_id}"

    def _owner_index(self, owner_id: str) -> str:
        return f"{self.owner_index_prefix}:{owner_id}"

    def save(self, file: StoredFile) -> bool:
        """Save file metadata and index it under its owner."""
        saved = self.redis_repo.set_json(self._file_key(file.file_id), file.to_dict())
        self.redis_repo.add_to_set(self._owner_index(file.owner_id), file.file_id)
        return saved

    def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        data = self.redis_repo.get_json(self._file_key(file_id))
        if data is None:
            return None
        return self._deserialize(data)

    def find_by_owner_id(self, owner_id: str) -> List[StoredFile]:
        file_ids = list(self.redis_repo.get_set_members(self._owner_index(owner_id)))
        documents = self.redis_repo.get_json_many(
            [self._file_key(file_id) for file_id in file_ids]
        )
        files = []
        for data in documents:
            if data is None:
                continue
            file = self._deserialize(data)
            if file is not None:
                files.append(file)
        return files

    def delete(self, file_id: str) -> bool:
        """Delete file metadata and its owner index entry."""
        file = self.get_by_id(file_id)
        deleted = self.redis_repo.delete(self._file_key(file_id))
        if file is not None:
            self.redis_repo.remove_from_set(self._owner_index(file.owner_id), file_id)
        return deleted

    def _deserialize(self, data: dict) -> Optional[StoredFile]:
        try:
            return StoredFile.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error deserializing file metadata {data.get('file_id')}: {e}")
            return None
