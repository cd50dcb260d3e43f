"""Redis implementation of IndexStore.

The index is kept in a single Redis hash (``{prefix}:index``) with one field
per brand holding the JSON record. Saves replace the hash inside a MULTI/EXEC
pipeline so other readers see either the old or the new index.
"""

import json
import logging

import redis

from logo_agent.config import get_redis_client, settings
from logo_agent.entities import CacheEntryEntity
from logo_agent.errors import CacheIOError

from .records import entry_to_record, record_to_entry

logger = logging.getLogger(__name__)


class RedisIndexRepository:
    """Redis hash index.

    This class satisfies the IndexStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis index repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Prefix for the index key. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._key = f"{key_prefix or settings.redis_key_prefix}:index"

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisIndexRepository":
        """Factory method to create RedisIndexRepository with defaults.

        Args:
            key_prefix: Redis key prefix. If None, uses settings.

        Returns:
            Configured RedisIndexRepository
        """
        return cls(key_prefix=key_prefix)

    def load(self) -> dict[str, CacheEntryEntity]:
        """Load every entry from the index hash.

        Raises:
            CacheIOError: If Redis is unreachable or a record is malformed
        """
        try:
            raw = self._client.hgetall(self._key)
        except redis.RedisError as e:
            logger.error("Failed to load cache index from %s", self._key, exc_info=True)
            raise CacheIOError("index read", self._key, str(e)) from e

        entries: dict[str, CacheEntryEntity] = {}
        for value in raw.values():  # type: ignore[union-attr]
            if isinstance(value, bytes):
                value = value.decode("utf-8")
            try:
                entry = record_to_entry(json.loads(value))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                raise CacheIOError("index read", self._key, f"malformed entry: {e}") from e
            entries[entry.brand] = entry
        return entries

    def save(self, entries: dict[str, CacheEntryEntity]) -> None:
        """Replace the index hash in one transaction.

        Raises:
            CacheIOError: If Redis is unreachable
        """
        mapping = {
            brand: json.dumps(entry_to_record(entry), ensure_ascii=False)
            for brand, entry in entries.items()
        }
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.delete(self._key)
            if mapping:
                pipe.hset(self._key, mapping=mapping)
            pipe.execute()
        except redis.RedisError as e:
            logger.error("Failed to save cache index to %s", self._key, exc_info=True)
            raise CacheIOError("index write", self._key, str(e)) from e

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def key(self) -> str:
        """Get the Redis key holding the index."""
        return self._key

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
