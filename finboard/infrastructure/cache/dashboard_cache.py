"""Dashboard cache: single-flight loads over a persisted TTL store.

One DashboardCacheService is built per process (see core.lifespan) and
shared by request handlers and mutation services. It owns:

- the in-flight table: at most one pending load per key. A load is
  registered before its first await, so every caller for the same key that
  arrives while it is pending awaits the same task (one storage read, one
  compute call, one result or one exception for all of them);
- the persisted store (IDashboardCacheStore): rows older than the TTL are
  misses; payloads over the size ceiling are never written;
- process-local hit/miss/error counters.

Storage failures are logged and counted but never reach the caller; a
failure of the compute callback itself is propagated unchanged to every
waiter. There is no lock: the event loop never preempts code between
awaits, so dict mutations are atomic.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from functools import partial
from typing import Any, TypeVar

from pydantic import TypeAdapter

from finboard.application.dtos.cache import (
    CacheEntryMetadata,
    CacheEntryWrite,
    CacheMetricsSnapshot,
)
from finboard.application.dtos.dashboard import DashboardData, DashboardQuery
from finboard.application.interfaces.repositories import IDashboardCacheStore
from finboard.core.constants import (
    DEFAULT_DASHBOARD_CACHE_MAX_PAYLOAD_BYTES,
    DEFAULT_DASHBOARD_CACHE_TTL_SECONDS,
)
from finboard.infrastructure.cache.keys import DashboardCacheKey, build_dashboard_cache_key
from finboard.infrastructure.cache.metrics import CacheMetrics
from finboard.shared.telemetry.tracing import add_span_attributes
from finboard.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

DashboardComputeFn = Callable[[DashboardQuery], Awaitable[DashboardData]]

_MISSING: Any = object()


class _InFlightLoad:
    """A pending load. stale is set when an invalidation purges it."""

    __slots__ = ("task", "stale")

    def __init__(self) -> None:
        self.task: asyncio.Future[Any] | None = None
        self.stale = False


class DashboardCacheService:
    """Single-flight, TTL-bounded cache of dashboard snapshots.

    Callers must use one result type per key: the in-flight table holds
    whatever the first caller's compute returns.
    """

    def __init__(
        self,
        store: IDashboardCacheStore,
        compute: DashboardComputeFn,
        *,
        ttl_seconds: int = DEFAULT_DASHBOARD_CACHE_TTL_SECONDS,
        max_payload_bytes: int = DEFAULT_DASHBOARD_CACHE_MAX_PAYLOAD_BYTES,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Persisted key/value table (see DashboardCacheRepository).
            compute: Dashboard aggregation called on a miss.
            ttl_seconds: Age after which a persisted row is a miss.
            max_payload_bytes: Serialized payloads larger than this are not persisted.
            clock: Source of "now" (UTC-aware); injectable for tests.
        """
        self._store = store
        self._compute = compute
        self._ttl = timedelta(seconds=ttl_seconds)
        self._max_payload_bytes = max_payload_bytes
        self._clock = clock
        self._in_flight: dict[DashboardCacheKey, _InFlightLoad] = {}
        self._metrics = CacheMetrics(clock=clock)
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    @property
    def max_cache_size_bytes(self) -> int:
        return self._max_payload_bytes

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def _adapter(self, result_type: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(result_type)
        if adapter is None:
            adapter = TypeAdapter(result_type)
            self._adapters[result_type] = adapter
        return adapter

    # ---- Read path ----

    async def get_cached_data(
        self,
        key: DashboardCacheKey,
        compute_fn: Callable[[], Awaitable[T]],
        metadata: CacheEntryMetadata,
        result_type: type[T],
    ) -> T:
        """Return the value for key from a pending load, the store, or compute_fn.

        Args:
            key: Structured cache key (build_dashboard_cache_key).
            compute_fn: Zero-argument coroutine factory run on a miss.
            metadata: Columns stored with the payload for scoped invalidation.
            result_type: Type used to (de)serialize the payload as JSON.

        Returns:
            The cached or freshly computed value.

        Raises:
            Whatever compute_fn raises; storage errors are never raised.
        """
        existing = self._in_flight.get(key)
        if existing is not None and existing.task is not None:
            logger.debug("Cache JOIN: %s", key)
            add_span_attributes(dashboard_cache_outcome="joined")
            return await asyncio.shield(existing.task)

        load = _InFlightLoad()
        # Registered before the first await so concurrent callers join this load.
        self._in_flight[key] = load
        load.task = asyncio.ensure_future(
            self._load(key, compute_fn, metadata, self._adapter(result_type), load)
        )
        load.task.add_done_callback(partial(self._forget, key, load))
        return await asyncio.shield(load.task)

    def _forget(self, key: DashboardCacheKey, load: _InFlightLoad, task: asyncio.Future[Any]) -> None:
        """Drop the load from the in-flight table once it settles (success or failure)."""
        if self._in_flight.get(key) is load:
            del self._in_flight[key]
        if not task.cancelled():
            # Mark retrieved; waiters that are still attached get it via shield.
            task.exception()

    async def _load(
        self,
        key: DashboardCacheKey,
        compute_fn: Callable[[], Awaitable[Any]],
        metadata: CacheEntryMetadata,
        adapter: TypeAdapter[Any],
        load: _InFlightLoad,
    ) -> Any:
        storage_key = key.to_storage_key()
        cached = await self._read(storage_key, adapter)
        if cached is not _MISSING:
            add_span_attributes(dashboard_cache_outcome="hit")
            return cached

        data = await compute_fn()
        completed_at = self._clock()
        await self._write(storage_key, data, metadata, adapter, load, completed_at)
        self._metrics.record_miss()
        add_span_attributes(dashboard_cache_outcome="miss")
        return data

    async def _read(self, storage_key: str, adapter: TypeAdapter[Any]) -> Any:
        """Return the fresh cached value, or _MISSING (absent, stale, or unreadable)."""
        try:
            entry = await self._store.find_by_key(storage_key)
            if entry is None:
                logger.debug("Cache MISS: %s", storage_key)
                return _MISSING
            if ensure_utc(entry.fetched_at) <= self._clock() - self._ttl:
                logger.debug("Cache STALE: %s (fetched_at=%s)", storage_key, entry.fetched_at)
                return _MISSING
            value = adapter.validate_json(entry.data)
        except Exception:
            self._metrics.record_error()
            logger.warning("Cache read failed for %s; computing fresh", storage_key, exc_info=True)
            return _MISSING
        self._metrics.record_hit()
        logger.debug("Cache HIT: %s", storage_key)
        return value

    async def _write(
        self,
        storage_key: str,
        data: Any,
        metadata: CacheEntryMetadata,
        adapter: TypeAdapter[Any],
        load: _InFlightLoad,
        fetched_at: datetime,
    ) -> None:
        """Persist a computed value; failures are counted, never raised."""
        try:
            payload = adapter.dump_json(data)
            if len(payload) > self._max_payload_bytes:
                logger.warning(
                    "DASHBOARD_CACHE_PAYLOAD_TOO_LARGE: %s (%d bytes, max %d); not persisted",
                    storage_key,
                    len(payload),
                    self._max_payload_bytes,
                )
                return
            if load.stale:
                logger.debug("Cache SKIP: %s invalidated while computing", storage_key)
                return
            await self._store.upsert(
                CacheEntryWrite(
                    cache_key=storage_key,
                    data=payload.decode("utf-8"),
                    metadata=metadata,
                    fetched_at=fetched_at,
                )
            )
            logger.debug("Cache SET: %s (%d bytes)", storage_key, len(payload))
        except Exception:
            self._metrics.record_error()
            logger.warning("Cache write failed for %s", storage_key, exc_info=True)

    async def get_cached_dashboard_data(self, query: DashboardQuery) -> DashboardData:
        """Return the dashboard snapshot for query, cached per (user, month, account, currency).

        A query carrying pre-fetched accounts bypasses the cache entirely: the
        compute function is called directly and neither the store nor the
        in-flight table is touched.
        """
        if query.accounts is not None:
            add_span_attributes(dashboard_cache_outcome="bypass")
            return await self._compute(query)

        key = build_dashboard_cache_key(
            month_key=query.month_key,
            account_id=query.account_id,
            preferred_currency=query.preferred_currency,
            user_id=query.user_id,
        )
        return await self.get_cached_data(
            key,
            lambda: self._compute(query),
            CacheEntryMetadata(
                month_key=query.month_key,
                account_id=query.account_id or None,
                preferred_currency=query.preferred_currency,
            ),
            DashboardData,
        )

    # ---- Invalidation ----

    def _purge_in_flight(self, month_key: str | None, account_id: str | None) -> int:
        """Detach matching pending loads so new callers start fresh; they will not persist."""
        purged = 0
        for key in list(self._in_flight):
            if key.matches(month_key, account_id):
                self._in_flight.pop(key).stale = True
                purged += 1
        return purged

    async def invalidate_dashboard_cache(
        self, month_key: str | None = None, account_id: str | None = None
    ) -> int:
        """Delete cached snapshots that may include data of (month_key, account_id).

        - month and account: that month's rows for the account and the
          all-accounts rows (their totals include the account);
        - month only: every row of the month;
        - account only: every row of the account, any month;
        - neither: everything (scope unknown, so clear it all).

        Returns:
            Number of persisted rows deleted.
        """
        purged = self._purge_in_flight(month_key, account_id)
        try:
            if month_key and account_id:
                deleted = await self._store.delete_many(
                    month_key=month_key, account_id=account_id, include_aggregate=True
                )
            elif month_key:
                deleted = await self._store.delete_many(month_key=month_key)
            elif account_id:
                deleted = await self._store.delete_many(account_id=account_id)
            else:
                deleted = await self._store.delete_all()
        except Exception:
            logger.exception(
                "Cache INVALIDATE failed: month_key=%s account_id=%s", month_key, account_id
            )
            raise
        logger.info(
            "Cache INVALIDATE: month_key=%s account_id=%s (%d rows, %d in-flight)",
            month_key,
            account_id,
            deleted,
            purged,
        )
        return deleted

    async def invalidate_all_dashboard_cache(self) -> int:
        """Drop every pending load and every persisted row; return rows deleted."""
        purged = self._purge_in_flight(None, None)
        deleted = await self._store.delete_all()
        logger.warning("Cache CLEARED: %d rows, %d in-flight", deleted, purged)
        return deleted

    # ---- Metrics and introspection ----

    def get_cache_metrics(self) -> CacheMetricsSnapshot:
        return self._metrics.snapshot()

    def reset_cache_metrics(self) -> None:
        self._metrics.reset()

    def clear_in_flight(self) -> None:
        """Forget pending loads without flagging them (tests and operator resets)."""
        self._in_flight.clear()
