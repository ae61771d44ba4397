"""
Redis Repository Base Class

Provides JSON document storage, index sets and atomic field updates.
Implements the repository pattern for Redis-based data storage.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Set

import redis
from redis.exceptions import RedisError

from cloudpix.domain.errors import InfrastructureError

logger = logging.getLogger(__name__)


# Atomically add to a numeric field of a JSON document, keeping its TTL.
# Returns the new value, or false (nil in Python) when the key is missing.
_INCREMENT_FIELD_SCRIPT = """
local data = redis.call('GET', KEYS[1])
if not data then
    return false
end

local doc = cjson.decode(data)
local current = tonumber(doc[ARGV[1]]) or 0
doc[ARGV[1]] = current + tonumber(ARGV[2])

redis.call('SET', KEYS[1], cjson.encode(doc), 'KEEPTTL')
return doc[ARGV[1]]
"""

# Atomically overwrite fields of a JSON document, keeping its TTL and every
# other field. ARGV[1] is a JSON object of fields, ARGV[2] an optional guard
# field: when it is already truthy nothing is written and 0 is returned.
# Returns 1 when written, or false (nil in Python) when the key is missing.
_SET_FIELDS_SCRIPT = """
local data = redis.call('GET', KEYS[1])
if not data then
    return false
end

local doc = cjson.decode(data)
if ARGV[2] ~= '' then
    local guard = doc[ARGV[2]]
    if guard and guard ~= cjson.null then
        return 0
    end
end

for field, value in pairs(cjson.decode(ARGV[1])) do
    doc[field] = value
end

redis.call('SET', KEYS[1], cjson.encode(doc), 'KEEPTTL')
return 1
"""


class RedisRepository:
    """
    Base Redis repository with JSON documents and atomic operations.

    Every Redis failure is raised as InfrastructureError so callers can tell
    an unavailable store apart from a missing record.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self._increment_script = self.redis.register_script(_INCREMENT_FIELD_SCRIPT)
        self._set_fields_script = self.redis.register_script(_SET_FIELDS_SCRIPT)

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def _strip_prefix(self, key) -> str:
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        if self.key_prefix:
            return key[len(self.key_prefix) + 1:]
        return key

    @staticmethod
    def _decode(value) -> str:
        return value.decode("utf-8") if isinstance(value, bytes) else value

    def set_json(self, key: str, data: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        """
        Atomically set JSON data with optional TTL.

        Args:
            key: Redis key
            data: Dictionary to store as JSON
            ttl: Time to live in seconds

        Returns:
            True if successful

        Raises:
            InfrastructureError: If Redis is unavailable
        """
        redis_key = self._make_key(key)
        json_data = json.dumps(data)
        try:
            if ttl:
                return bool(self.redis.setex(redis_key, ttl, json_data))
            return bool(self.redis.set(redis_key, json_data))
        except RedisError as e:
            raise InfrastructureError(f"Error setting JSON data for key {key}", e) from e

    def replace_json(self, key: str, data: Dict[str, Any]) -> bool:
        """
        Overwrite an existing JSON document, keeping its remaining TTL.

        Returns:
            True if the key existed and was replaced, False otherwise
        """
        redis_key = self._make_key(key)
        try:
            return bool(
                self.redis.set(redis_key, json.dumps(data), xx=True, keepttl=True)
            )
        except RedisError as e:
            raise InfrastructureError(f"Error replacing JSON data for key {key}", e) from e

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Args:
            key: Redis key

        Returns:
            Dictionary if found and valid JSON, None otherwise
        """
        redis_key = self._make_key(key)
        try:
            data = self.redis.get(redis_key)
        except RedisError as e:
            raise InfrastructureError(f"Error getting JSON data for key {key}", e) from e

        if data is None:
            return None

        try:
            return json.loads(self._decode(data))
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt JSON stored under key {key}: {e}")
            return None

    def get_json_many(self, keys: List[str]) -> List[Optional[Dict[str, Any]]]:
        """Fetch several JSON documents in one round trip, preserving order."""
        if not keys:
            return []
        try:
            values = self.redis.mget([self._make_key(k) for k in keys])
        except RedisError as e:
            raise InfrastructureError("Error getting JSON documents", e) from e

        documents = []
        for key, value in zip(keys, values):
            if value is None:
                documents.append(None)
                continue
            try:
                documents.append(json.loads(self._decode(value)))
            except json.JSONDecodeError as e:
                logger.error(f"Corrupt JSON stored under key {key}: {e}")
                documents.append(None)
        return documents

    def increment_json_field(self, key: str, field: str, amount: int = 1) -> Optional[int]:
        """
        Atomically add ``amount`` to a numeric field using a Lua script.

        Returns:
            The new value, or None if the key does not exist
        """
        redis_key = self._make_key(key)
        try:
            result = self._increment_script(keys=[redis_key], args=[field, amount])
        except RedisError as e:
            raise InfrastructureError(f"Error incrementing {field} for key {key}", e) from e
        return int(result) if result is not None else None

    def set_json_fields(
        self, key: str, fields: Dict[str, Any], unless_field: Optional[str] = None
    ) -> Optional[bool]:
        """
        Atomically overwrite some fields of a JSON document using a Lua script.

        Fields not named in ``fields`` are left exactly as stored, so
        concurrent ``increment_json_field`` calls are never lost.

        Args:
            key: Redis key
            fields: Field values to write
            unless_field: Skip the write when this field is already truthy

        Returns:
            True if written, False if skipped by ``unless_field``,
            None if the key does not exist
        """
        redis_key = self._make_key(key)
        try:
            result = self._set_fields_script(
                keys=[redis_key], args=[json.dumps(fields), unless_field or ""]
            )
        except RedisError as e:
            raise InfrastructureError(f"Error setting fields for key {key}", e) from e
        return bool(int(result)) if result is not None else None

    def delete(self, key: str) -> bool:
        """
        Delete a key from Redis.

        Returns:
            True if key was deleted, False if it did not exist
        """
        redis_key = self._make_key(key)
        try:
            return self.redis.delete(redis_key) > 0
        except RedisError as e:
            raise InfrastructureError(f"Error deleting key {key}", e) from e

    def exists(self, key: str) -> bool:
        """Check if a key exists in Redis."""
        redis_key = self._make_key(key)
        try:
            return self.redis.exists(redis_key) > 0
        except RedisError as e:
            raise InfrastructureError(f"Error checking existence of key {key}", e) from e

    def add_to_set(self, key: str, *members: str) -> None:
        """Add members to an index set."""
        try:
            self.redis.sadd(self._make_key(key), *members)
        except RedisError as e:
            raise InfrastructureError(f"Error adding to set {key}", e) from e

    def remove_from_set(self, key: str, *members: str) -> int:
        """Remove members from an index set."""
        try:
            return self.redis.srem(self._make_key(key), *members)
        except RedisError as e:
            raise InfrastructureError(f"Error removing from set {key}", e) from e

    def get_set_members(self, key: str) -> Set[str]:
        """Get all members of an index set."""
        try:
            members = self.redis.smembers(self._make_key(key))
        except RedisError as e:
            raise InfrastructureError(f"Error reading set {key}", e) from e
        return {self._decode(m) for m in members}

    def get_keys_by_pattern(self, pattern: str) -> List[str]:
        """
        Get all keys matching a pattern.

        Uses SCAN so large keyspaces don't block the server.

        Returns:
            List of matching keys (without prefix)
        """
        redis_pattern = self._make_key(pattern)
        try:
            return [self._strip_prefix(k) for k in self.redis.scan_iter(match=redis_pattern)]
        except RedisError as e:
            raise InfrastructureError(f"Error getting keys by pattern {pattern}", e) from e


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        max_connections: int = 20,
        socket_timeout: float = 5.0,
        socket_connect_timeout: float = 5.0,
        decode_responses: bool = False,
    ):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_connect_timeout,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def close(self):
        """Close the connection pool."""
        if self.connection_pool:
            self.connection_pool.disconnect()
