"""
Google Cloud Storage Repository Implementation

Concrete implementation of IObjectStorageRepository for Google Cloud Storage.
Read credentials are V4 signed URLs, whose lifetime GCS caps at seven days.
"""

import logging
from datetime import timedelta
from typing import BinaryIO, Optional

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound
from google.oauth2 import service_account

from cloudpix.domain.clock import Clock, utc_now
from cloudpix.domain.errors import MintingFailedError
from cloudpix.domain.files.storage_repository import IObjectStorageRepository
from cloudpix.domain.files.value_objects import AccessCredential

logger = logging.getLogger(__name__)


class GCSStorageRepository(IObjectStorageRepository):
    """
    Google Cloud Storage implementation of IObjectStorageRepository.

    Thread Safety:
        This implementation is thread-safe. The GCS client handles concurrent
        operations safely.

    Attributes:
        bucket_name: Name of the GCS bucket for file storage
        client: Google Cloud Storage client instance
        bucket: GCS bucket object
    """

    def __init__(
        self,
        bucket_name: str,
        client: Optional[storage.Client] = None,
        credential_ceiling_seconds: Optional[int] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize the GCS storage repository.

        Args:
            bucket_name: Name of the GCS bucket to use for storage
            client: Pre-built client; see ``create_client``
            credential_ceiling_seconds: Longest signed URL lifetime to grant
            clock: Time source used to report credential expiry

        Raises:
            ValueError: If bucket_name is empty
        """
        if not bucket_name or not bucket_name.strip():
            raise ValueError("bucket_name cannot be empty")

        self.bucket_name = bucket_name
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)
        self.clock = clock
        if credential_ceiling_seconds is not None:
            self.credential_ceiling_seconds = min(
                credential_ceiling_seconds, IObjectStorageRepository.credential_ceiling_seconds
            )

    @staticmethod
    def create_client(credentials_path: Optional[str] = None) -> storage.Client:
        """
        Build a storage client.

        Uses the service account file when given, otherwise the default
        credentials of the environment. A service account key is required
        for signing URLs outside GCE.
        """
        if credentials_path:
            credentials = service_account.Credentials.from_service_account_file(
                credentials_path
            )
            logger.info(f"GCS client initialized with service account: {credentials_path}")
            return storage.Client(credentials=credentials, project=credentials.project_id)

        logger.info("GCS client initialized with default credentials")
        return storage.Client()

    def put(self, key: str, content: BinaryIO, content_type: str) -> str:
        """
        Upload object bytes to the bucket.

        Raises:
            ValueError: If key is empty
            PermissionError: If the service account cannot write
            IOError: If the upload fails
        """
        if not key or not key.strip():
            raise ValueError("key cannot be empty")

        try:
            blob = self.bucket.blob(key)
            if hasattr(content, "seek"):
                content.seek(0)
            blob.upload_from_file(content, content_type=content_type)
        except GoogleCloudError as e:
            if "403" in str(e) or "permission" in str(e).lower():
                raise PermissionError(f"Insufficient permissions to write to GCS: {e}") from e
            raise IOError(f"Failed to save file to GCS: {e}") from e

        return key

    def delete(self, key: str) -> bool:
        """
        Delete a blob. Deleting a missing blob returns True.

        Raises:
            IOError: If GCS rejects the delete
        """
        if not key or not key.strip():
            return True

        try:
            self.bucket.blob(key).delete()
        except NotFound:
            return True
        except GoogleCloudError as e:
            raise IOError(f"Failed to delete file from GCS: {e}") from e

        return True

    def exists(self, key: str) -> bool:
        if not key or not key.strip():
            return False
        try:
            return self.bucket.blob(key).exists()
        except GoogleCloudError as e:
            logger.warning(f"Could not check blob {key}: {e}")
            return False

    def mint_read_credential(self, key: str, lifetime_seconds: int) -> AccessCredential:
        """
        Generate a V4 signed GET URL for ``key``.

        Raises:
            MintingFailedError: If signing fails (missing signer credentials,
                GCS errors)
        """
        granted = self.granted_lifetime(lifetime_seconds)
        issued_at = self.clock()

        try:
            url = self.bucket.blob(key).generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=granted),
                method="GET",
            )
        except (GoogleCloudError, AttributeError, TypeError, ValueError) as e:
            # AttributeError: credentials without a private key cannot sign
            raise MintingFailedError(f"Failed to generate signed URL for {key}", e) from e

        return AccessCredential(
            url=url,
            expires_at=issued_at + timedelta(seconds=granted),
            expires_in=granted,
        )
