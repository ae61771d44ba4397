"""
Redis Configuration

Configures Redis connection settings and provides factory functions
for creating Redis connection managers and repositories.
"""

import os
from typing import Optional

import redis

from cloudpix.infrastructure.redis_repository import RedisConnectionManager, RedisRepository


class RedisConfig:
    """Redis configuration settings."""

    def __init__(self):
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", 6379))
        self.db = int(os.getenv("REDIS_DB", 0))
        self.password = os.getenv("REDIS_PASSWORD")
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))
        self.socket_timeout = float(os.getenv("REDIS_SOCKET_TIMEOUT", 5.0))
        self.key_prefix = os.getenv("REDIS_KEY_PREFIX", "cloudpix")

        # Redis URL format: redis://[:password@]host:port/db
        self.url = os.getenv("REDIS_URL")
        if self.url:
            connection_params = redis.connection.parse_url(self.url)
            self.host = connection_params.get("host", self.host)
            self.port = connection_params.get("port", self.port)
            self.db = connection_params.get("db", self.db)
            self.password = connection_params.get("password", self.password)


def create_redis_manager(config: Optional[RedisConfig] = None) -> RedisConnectionManager:
    """
    Create a Redis connection manager.

    Args:
        config: Redis configuration, uses default if None

    Returns:
        RedisConnectionManager instance
    """
    if config is None:
        config = RedisConfig()

    return RedisConnectionManager(
        host=config.host,
        port=config.port,
        db=config.db,
        password=config.password,
        max_connections=config.max_connections,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_timeout,
    )


def create_redis_repository(
    manager: RedisConnectionManager, config: Optional[RedisConfig] = None
) -> RedisRepository:
    """
    Create a Redis repository using the configured key prefix.

    Args:
        manager: Connection manager owning the pool
        config: Redis configuration, uses default if None

    Returns:
        RedisRepository instance
    """
    if config is None:
        config = RedisConfig()
    return RedisRepository(manager.client, config.key_prefix)
