"""
File Storage Domain

Handles uploaded file records, object storage access and read credentials.
"""

from .entities import StoredFile
from .repositories import FileRepository
from .services import FileDeletionResult, FileManager
from .signed_url_service import SignedUrlService
from .storage_repository import IObjectStorageRepository
from .value_objects import AccessCredential, FileStatus, UploadPolicy

__all__ = [
    "StoredFile",
    "FileManager",
    "FileDeletionResult",
    "FileRepository",
    "IObjectStorageRepository",
    "SignedUrlService",
    "AccessCredential",
    "FileStatus",
    "UploadPolicy",
]
