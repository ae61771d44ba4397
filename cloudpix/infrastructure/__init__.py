"""Infrastructure layer for Redis, object storage and token verification."""

from .gcs_storage_repository import GCSStorageRepository
from .jwt_token_verifier import JWTTokenVerifier
from .local_file_storage_repository import LocalFileStorageRepository
from .redis_file_repository import RedisFileRepository
from .redis_repository import RedisConnectionManager, RedisRepository
from .redis_share_link_repository import RedisShareLinkRepository
from .storage_factory import StorageFactory

__all__ = [
    'RedisRepository',
    'RedisConnectionManager',
    'RedisFileRepository',
    'RedisShareLinkRepository',
    'LocalFileStorageRepository',
    'GCSStorageRepository',
    'StorageFactory',
    'JWTTokenVerifier',
]
