"""
File Entities

Domain entity for an uploaded file's metadata.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ..clock import ensure_utc
from .value_objects import FileStatus


@dataclass
class StoredFile:
    """
    Entity representing an uploaded file.

    ``storage_key`` identifies the object in blob storage. It is stored as
    its own field and is never exposed in API responses.
    """

    file_id: str
    owner_id: str
    file_name: str
    storage_key: str
    file_size: int
    content_type: str
    upload_date: datetime
    status: FileStatus = FileStatus.ACTIVE

    @classmethod
    def create(
        cls,
        owner_id: str,
        file_name: str,
        file_size: int,
        content_type: str,
        now: datetime,
    ) -> "StoredFile":
        """
        Factory method to create a new active file record.

        The storage key is ``{owner_id}/{file_id}/{sanitized file_name}``.
        """
        file_id = str(uuid.uuid4())
        return cls(
            file_id=file_id,
            owner_id=owner_id,
            file_name=file_name,
            storage_key=cls.build_storage_key(owner_id, file_id, file_name),
            file_size=file_size,
            content_type=content_type,
            upload_date=now,
            status=FileStatus.ACTIVE,
        )

    @staticmethod
    def build_storage_key(owner_id: str, file_id: str, file_name: str) -> str:
        """
        Build the object storage key for a file.

        Separators in the name are replaced and leading dots stripped so the
        name stays inside its ``owner/file`` prefix.
        """
        safe_name = file_name.replace("/", "_").replace("\\", "_").lstrip(".")
        return f"{owner_id}/{file_id}/{safe_name or 'file'}"

    def is_active(self) -> bool:
        """Check if the file can be shared and resolved."""
        return self.status == FileStatus.ACTIVE

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "file_id": self.file_id,
            "owner_id": self.owner_id,
            "file_name": self.file_name,
            "storage_key": self.storage_key,
            "file_size": self.file_size,
            "content_type": self.content_type,
            "upload_date": self.upload_date.isoformat(),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredFile":
        """Create StoredFile from dictionary."""
        return cls(
            file_id=data["file_id"],
            owner_id=data["owner_id"],
            file_name=data["file_name"],
            storage_key=data["storage_key"],
            file_size=int(data["file_size"]),
            content_type=data["content_type"],
            upload_date=ensure_utc(datetime.fromisoformat(data["upload_date"])),
            status=FileStatus(data.get("status", FileStatus.ACTIVE.value)),
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """API representation without storage coordinates."""
        return {
            "file_id": self.file_id,
            "owner_id": self.owner_id,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "content_type": self.content_type,
            "upload_date": self.upload_date.isoformat(),
            "status": self.status.value,
        }

    def to_shared_dict(self) -> Dict[str, Any]:
        """Metadata shown to anonymous visitors of a share link."""
        return {
            "file_id": self.file_id,
            "file_name": self.file_name,
            "content_type": self.content_type,
            "file_size": self.file_size,
            "upload_date": self.upload_date.isoformat(),
        }
