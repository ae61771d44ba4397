"""
Storage Factory

Factory for creating the object storage implementation selected by
``STORAGE_BACKEND``. The application layer stays decoupled from the
concrete backend via the ``IObjectStorageRepository`` interface.
"""

import logging
from typing import Optional

from cloudpix.config.storage_config import StorageConfig
from cloudpix.domain.files.signed_url_service import SignedUrlService
from cloudpix.domain.files.storage_repository import IObjectStorageRepository

logger = logging.getLogger(__name__)


class StorageFactory:
    """Factory that returns the configured storage repository."""

    @staticmethod
    def create_storage(
        config: Optional[StorageConfig] = None,
        signed_url_service: Optional[SignedUrlService] = None,
    ) -> IObjectStorageRepository:
        """
        Create the storage repository.

        Args:
            config: Storage configuration, uses default if None
            signed_url_service: Signer for the local backend

        Returns:
            ``IObjectStorageRepository`` implementation

        Raises:
            ValueError: If the backend name is unknown or GCS has no bucket
            RuntimeError: If the backend fails to initialize
        """
        if config is None:
            config = StorageConfig()

        if config.backend == "gcs":
            return StorageFactory._create_gcs_storage(config)
        if config.backend == "local":
            return StorageFactory._create_local_storage(config, signed_url_service)
        raise ValueError(f"Unknown storage backend: {config.backend}")

    @staticmethod
    def _create_local_storage(
        config: StorageConfig, signed_url_service: Optional[SignedUrlService]
    ) -> IObjectStorageRepository:
        from cloudpix.infrastructure.local_file_storage_repository import (
            LocalFileStorageRepository,
        )

        if signed_url_service is None:
            signed_url_service = SignedUrlService(
                secret_key=config.signing_key, base_url=config.download_base_url
            )

        try:
            storage = LocalFileStorageRepository(
                config.storage_dir,
                signed_url_service,
                credential_ceiling_seconds=config.credential_ceiling_seconds,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to initialize local storage: {e}") from e

        logger.info(f"Storage factory: Using local filesystem storage at {config.storage_dir}")
        return storage

    @staticmethod
    def _create_gcs_storage(config: StorageConfig) -> IObjectStorageRepository:
        from cloudpix.infrastructure.gcs_storage_repository import GCSStorageRepository

        if not config.bucket_name:
            raise ValueError("GCS_BUCKET_NAME must be set when STORAGE_BACKEND=gcs")

        client = GCSStorageRepository.create_client(config.credentials_path)
        storage = GCSStorageRepository(
            config.bucket_name,
            client=client,
            credential_ceiling_seconds=config.credential_ceiling_seconds,
        )
        logger.info(f"Storage factory: Using GCS bucket {config.bucket_name}")
        return storage
