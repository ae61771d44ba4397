"""
Storage Configuration

Object storage backend selection, credential limits and upload policy.
"""

import os
from typing import FrozenSet, Optional

from cloudpix.domain.files.value_objects import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_UPLOAD_BYTES,
    UploadPolicy,
)

# GCS V4 signed URLs cannot live longer than seven days
GCS_MAX_SIGNED_URL_SECONDS = 7 * 24 * 60 * 60


def _parse_content_types(value: Optional[str]) -> FrozenSet[str]:
    if not value:
        return DEFAULT_ALLOWED_CONTENT_TYPES
    return frozenset(t.strip() for t in value.split(",") if t.strip())


class StorageConfig:
    """Storage configuration settings."""

    def __init__(self):
        self.backend = os.getenv("STORAGE_BACKEND", "local").lower()
        self.storage_dir = os.getenv("STORAGE_DIR", "/tmp/cloudpix")
        self.bucket_name = os.getenv("GCS_BUCKET_NAME")
        self.credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        self.credential_ceiling_seconds = int(
            os.getenv("STORAGE_CREDENTIAL_CEILING_SECONDS", GCS_MAX_SIGNED_URL_SECONDS)
        )
        self.signing_key = os.getenv("STORAGE_SIGNING_KEY")
        self.download_base_url = os.getenv("STORAGE_DOWNLOAD_BASE_URL")
        self.max_upload_bytes = int(
            os.getenv("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
        )
        self.allowed_content_types = _parse_content_types(
            os.getenv("ALLOWED_CONTENT_TYPES")
        )

    def upload_policy(self) -> UploadPolicy:
        """Build the upload policy from these settings."""
        return UploadPolicy(
            max_bytes=self.max_upload_bytes,
            allowed_content_types=self.allowed_content_types,
        )
