"""Redis implementation of ResponseCacheStore.

Each entry is a Redis hash at ``<prefix>:<fingerprint>`` holding the
record fields. Nullable fields are omitted from the hash when null and
timestamps are Unix epoch seconds. Expiry is enforced at read time, so
Redis key TTLs are never set.
"""

import json
import time
from collections.abc import Callable, Iterator
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import redis
import structlog

from response_cache.config import get_redis_client, settings
from response_cache.entities import (
    Artifact,
    CacheEntryEntity,
    CacheLookupEntity,
    CacheStatsEntity,
    ModeStatsEntity,
)
from response_cache.exceptions import CacheUnavailableError

logger = structlog.get_logger(__name__)

# Errors that mean "the cache can't answer": backend failures and corrupt records
_READ_ERRORS = (redis.RedisError, ValueError, KeyError, TypeError)

_NULLABLE_FIELDS = ("model", "tokens_used", "cost", "expires_at")

_SCAN_BATCH = 500


def _to_datetime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class RedisResponseCacheRepository:
    """Redis implementation of the response cache store.

    This class satisfies the ResponseCacheStore protocol through structural
    typing - no explicit inheritance needed.

    Concurrency:
    - Hits are counted in a WATCH/MULTI transaction on the single entry key,
      so a concurrently deleted entry is never resurrected by the increment
    - Writes are one MULTI/EXEC upsert; ``created_at`` and ``hits`` are only
      initialised when absent, so ``hits`` survives an overwrite
    - Concurrent writers for one fingerprint resolve to last-write-wins
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
        ttl: int | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance (decode_responses=True). If None, creates default.
            key_prefix: Prefix for entry keys. Defaults to settings.
            ttl: Default time-to-live in seconds. Defaults to settings.
            clock: Returns the current Unix time. Defaults to time.time.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix
        self._ttl = settings.cache_ttl if ttl is None else ttl
        self._clock = clock or time.time

    @classmethod
    def create(
        cls,
        key_prefix: str | None = None,
        ttl: int | None = None,
    ) -> "RedisResponseCacheRepository":
        """Factory method to create RedisResponseCacheRepository with defaults.

        Args:
            key_prefix: Entry key prefix. If None, uses settings.
            ttl: Default entry TTL in seconds. If None, uses settings.

        Returns:
            Configured RedisResponseCacheRepository
        """
        return cls(key_prefix=key_prefix, ttl=ttl)

    def _key(self, fingerprint: str) -> str:
        return f"{self._prefix}:{fingerprint}"

    def _to_entity(self, fingerprint: str, record: dict[str, str]) -> CacheEntryEntity:
        """Convert a raw Redis hash into a domain entity."""
        tokens_used = record.get("tokens_used")
        cost = record.get("cost")
        expires_at = record.get("expires_at")

        return CacheEntryEntity(
            fingerprint=fingerprint,
            mode=record["mode"],
            context=json.loads(record["context"]),
            response=Artifact.from_dict(json.loads(record["response"])),
            model=record.get("model"),
            tokens_used=int(tokens_used) if tokens_used is not None else None,
            cost=float(cost) if cost is not None else None,
            hits=int(record.get("hits", 0)),
            created_at=_to_datetime(float(record["created_at"])),
            last_accessed_at=_to_datetime(float(record["last_accessed_at"])),
            expires_at=_to_datetime(float(expires_at)) if expires_at is not None else None,
        )

    def get(self, fingerprint: str) -> CacheLookupEntity | None:
        """Read an entry and count a hit.

        Args:
            fingerprint: The entry key

        Returns:
            CacheLookupEntity on hit; None on miss, expiry, or backend failure
        """
        key = self._key(fingerprint)
        now = self._clock()
        state: dict[str, Any] = {}

        def touch(pipe: redis.client.Pipeline) -> None:
            # Re-run from scratch when WATCH detects a concurrent change
            state.clear()
            record = pipe.hgetall(key)
            if not record:
                return
            entry = self._to_entity(fingerprint, record)
            state["entry"] = entry

            pipe.multi()
            if entry.is_expired(_to_datetime(now)):
                state["expired"] = True
                pipe.delete(key)
            else:
                pipe.hincrby(key, "hits", 1)
                pipe.hset(key, "last_accessed_at", now)

        logger.debug("cache_lookup", fingerprint=fingerprint[:16])
        try:
            results = self._client.transaction(touch, key)
        except _READ_ERRORS as e:
            logger.warning("cache_get_failed", fingerprint=fingerprint[:16], error=str(e))
            return None

        entry = state.get("entry")
        if entry is None:
            logger.info("cache_miss", fingerprint=fingerprint[:16])
            return None
        if state.get("expired"):
            logger.info("cache_expired", fingerprint=fingerprint[:16], mode=entry.mode)
            return None

        total_hits = int(results[0])
        cache_age = max(0, int(now - entry.created_at.timestamp()))
        entry = replace(entry, hits=total_hits, last_accessed_at=_to_datetime(now))

        logger.info(
            "cache_hit",
            fingerprint=fingerprint[:16],
            mode=entry.mode,
            cache_age=cache_age,
            total_hits=total_hits,
        )
        return CacheLookupEntity(entry=entry, cache_age=cache_age, total_hits=total_hits)

    def set(
        self,
        fingerprint: str,
        mode: str,
        context: Any,
        artifact: Artifact,
        ttl: int | None = None,
    ) -> None:
        """Insert or replace an entry. Failures are logged, never raised.

        Args:
            fingerprint: The entry key
            mode: Generation mode
            context: Originating request context
            artifact: The artifact to store
            ttl: Seconds until expiry; <= 0 never expires, None uses the default
        """
        key = self._key(fingerprint)
        now = self._clock()
        ttl = self._ttl if ttl is None else ttl
        usage = artifact.usage

        try:
            fields: dict[str, Any] = {
                "prompt_hash": fingerprint,
                "mode": mode,
                "context": json.dumps(context, ensure_ascii=False, allow_nan=False),
                "response": json.dumps(artifact.to_dict(), ensure_ascii=False, allow_nan=False),
                "last_accessed_at": now,
            }
            nullable = {
                "model": usage.model if usage else None,
                "tokens_used": usage.tokens_used if usage else None,
                "cost": usage.cost_usd if usage else None,
                "expires_at": now + ttl if ttl > 0 else None,
            }
            fields.update({name: value for name, value in nullable.items() if value is not None})
            cleared = [name for name in _NULLABLE_FIELDS if nullable[name] is None]

            logger.debug("cache_save", fingerprint=fingerprint[:16], mode=mode, ttl=ttl)
            pipe = self._client.pipeline()
            pipe.hsetnx(key, "created_at", now)
            pipe.hsetnx(key, "hits", 0)
            pipe.hset(key, mapping=fields)
            if cleared:
                pipe.hdel(key, *cleared)
            pipe.execute()
        except (redis.RedisError, ValueError, TypeError) as e:
            logger.warning("cache_set_failed", fingerprint=fingerprint[:16], mode=mode, error=str(e))

    def peek(self, fingerprint: str) -> CacheEntryEntity | None:
        """Read an entry without counting a hit.

        Returns:
            The entry, or None if absent or expired

        Raises:
            CacheUnavailableError: If Redis fails or the record is corrupt
        """
        try:
            record = self._client.hgetall(self._key(fingerprint))
            if not record:
                return None
            entry = self._to_entity(fingerprint, record)
        except _READ_ERRORS as e:
            raise CacheUnavailableError(f"Failed to read cache entry: {e}") from e

        if entry.is_expired(_to_datetime(self._clock())):
            return None
        return entry

    def delete(self, fingerprint: str) -> bool:
        """Delete a specific entry.

        Returns:
            True if deleted, False otherwise
        """
        try:
            result: int = self._client.delete(self._key(fingerprint))  # type: ignore[assignment]
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Failed to delete cache entry: {e}") from e
        return result > 0

    def _scan_records(self, *fields: str) -> Iterator[tuple[str, list[str | None]]]:
        """Yield (key, field values) for every entry, in batches of pipelined HMGETs."""
        batch: list[str] = []
        for key in self._client.scan_iter(match=f"{self._prefix}:*", count=_SCAN_BATCH):
            batch.append(key)
            if len(batch) >= _SCAN_BATCH:
                yield from self._fetch_fields(batch, fields)
                batch = []
        if batch:
            yield from self._fetch_fields(batch, fields)

    def _fetch_fields(self, keys: list[str], fields: tuple[str, ...]) -> list[tuple[str, list[str | None]]]:
        pipe = self._client.pipeline(transaction=False)
        for key in keys:
            pipe.hmget(key, list(fields))
        # Entries deleted since the scan come back as all-None
        return [
            (key, values)
            for key, values in zip(keys, pipe.execute())
            if any(value is not None for value in values)
        ]

    def clear(self, mode: str | None = None) -> int:
        """Delete all entries, or only the entries of one mode.

        Args:
            mode: Only delete entries with this mode. None deletes everything.

        Returns:
            Number of entries deleted

        Raises:
            CacheUnavailableError: If Redis fails
        """
        deleted = 0
        try:
            keys = [
                key
                for key, (entry_mode,) in self._scan_records("mode")
                if mode is None or entry_mode == mode
            ]
            for start in range(0, len(keys), _SCAN_BATCH):
                deleted += int(self._client.delete(*keys[start : start + _SCAN_BATCH]))  # type: ignore[arg-type]
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Failed to clear cache: {e}") from e

        logger.info("cache_cleared", mode=mode, deleted=deleted)
        return deleted

    def get_stats(self) -> CacheStatsEntity:
        """Aggregate statistics over all stored entries.

        Expired entries that have not been read yet are still counted.

        Raises:
            CacheUnavailableError: If Redis fails
        """
        total_entries = 0
        total_hits = 0
        total_cost_saved = 0.0
        by_mode: dict[str, dict[str, Any]] = {}

        try:
            for _, (mode, hits_raw, cost_raw) in self._scan_records("mode", "hits", "cost"):
                hits = int(hits_raw or 0)
                cost_saved = float(cost_raw or 0) * hits

                total_entries += 1
                total_hits += hits
                total_cost_saved += cost_saved

                bucket = by_mode.setdefault(mode or "unknown", {"count": 0, "hits": 0, "cost_saved": 0.0})
                bucket["count"] += 1
                bucket["hits"] += hits
                bucket["cost_saved"] += cost_saved
        except (redis.RedisError, ValueError) as e:
            raise CacheUnavailableError(f"Failed to compute cache stats: {e}") from e

        return CacheStatsEntity(
            total_entries=total_entries,
            total_hits=total_hits,
            total_cost_saved=total_cost_saved,
            by_mode={mode: ModeStatsEntity(**bucket) for mode, bucket in sorted(by_mode.items())},
        )

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
