"""DashboardCacheService: read path, single-flight, TTL, storage resilience, metrics."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from finboard.application.dtos.cache import CacheEntryMetadata
from finboard.application.dtos.dashboard import DashboardQuery
from finboard.application.dtos.finance import AccountResult
from finboard.domain.enums import Currency
from finboard.infrastructure.cache import DashboardCacheService, build_dashboard_cache_key

QUERY = DashboardQuery(month_key="2024-03", account_id="acc-1", user_id="user-1")
STORAGE_KEY = "dashboard:user-1:2024-03:acc-1:DEFAULT"


async def settle() -> None:
    """Let scheduled tasks run up to their next real suspension point."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def compute(dashboard_factory):
    return AsyncMock(return_value=dashboard_factory())


@pytest.fixture
def service(store, compute, clock):
    return DashboardCacheService(store, compute, clock=clock)


async def test_miss_computes_persists_and_counts(service, store, compute, dashboard_factory) -> None:
    result = await service.get_cached_dashboard_data(QUERY)

    assert result == dashboard_factory()
    compute.assert_awaited_once_with(QUERY)
    assert STORAGE_KEY in store.rows
    row = store.rows[STORAGE_KEY]
    assert row.month_key == "2024-03"
    assert row.account_id == "acc-1"
    metrics = service.get_cache_metrics()
    assert (metrics.cache_hit, metrics.cache_miss, metrics.cache_error) == (0, 1, 0)


async def test_second_call_is_served_from_store(service, compute, dashboard_factory) -> None:
    await service.get_cached_dashboard_data(QUERY)
    result = await service.get_cached_dashboard_data(QUERY)

    assert result == dashboard_factory()
    assert compute.await_count == 1
    metrics = service.get_cache_metrics()
    assert (metrics.cache_hit, metrics.cache_miss) == (1, 1)


async def test_cached_payload_round_trips_decimals_and_enums(service, store) -> None:
    await service.get_cached_dashboard_data(QUERY)
    cached = await service.get_cached_dashboard_data(QUERY)

    assert cached.summary.net == Decimal("749.50")
    assert cached.currency is Currency.USD
    assert '"749.50"' in store.rows[STORAGE_KEY].data


async def test_fetched_at_is_compute_completion_time(store, clock, dashboard_factory) -> None:
    async def slow_compute(query):
        clock.advance(42)
        return dashboard_factory()

    service = DashboardCacheService(store, slow_compute, clock=clock)
    await service.get_cached_dashboard_data(QUERY)

    assert store.rows[STORAGE_KEY].fetched_at == clock.now


async def test_entry_is_fresh_at_299_seconds(service, compute, clock) -> None:
    await service.get_cached_dashboard_data(QUERY)
    clock.advance(299)
    await service.get_cached_dashboard_data(QUERY)
    assert compute.await_count == 1


@pytest.mark.parametrize("age", [300, 301])
async def test_entry_is_stale_from_300_seconds(service, compute, clock, age) -> None:
    await service.get_cached_dashboard_data(QUERY)
    clock.advance(age)
    await service.get_cached_dashboard_data(QUERY)
    assert compute.await_count == 2
    assert service.get_cache_metrics().cache_miss == 2


async def test_recompute_overwrites_stale_row(service, store, clock) -> None:
    await service.get_cached_dashboard_data(QUERY)
    clock.advance(301)
    await service.get_cached_dashboard_data(QUERY)

    assert len(store.rows) == 1
    assert store.rows[STORAGE_KEY].fetched_at == clock.now


async def test_concurrent_callers_share_one_load(store, clock, dashboard_factory) -> None:
    gate = asyncio.Event()
    calls = 0

    async def compute(query):
        nonlocal calls
        calls += 1
        await gate.wait()
        return dashboard_factory()

    service = DashboardCacheService(store, compute, clock=clock)
    tasks = [asyncio.create_task(service.get_cached_dashboard_data(QUERY)) for _ in range(5)]
    await settle()

    assert service.in_flight_count == 1
    assert calls == 1

    gate.set()
    results = await asyncio.gather(*tasks)

    assert all(r == dashboard_factory() for r in results)
    assert calls == 1
    assert store.reads == 1
    assert store.writes == 1
    assert service.in_flight_count == 0
    assert service.get_cache_metrics().cache_miss == 1


async def test_different_keys_load_independently(service, compute) -> None:
    other = DashboardQuery(month_key="2024-04", account_id="acc-1", user_id="user-1")
    await asyncio.gather(
        service.get_cached_dashboard_data(QUERY),
        service.get_cached_dashboard_data(other),
    )
    assert compute.await_count == 2


async def test_compute_error_reaches_every_waiter(store, clock) -> None:
    gate = asyncio.Event()

    async def compute(query):
        await gate.wait()
        raise RuntimeError("aggregation failed")

    service = DashboardCacheService(store, compute, clock=clock)
    tasks = [asyncio.create_task(service.get_cached_dashboard_data(QUERY)) for _ in range(3)]
    await settle()
    gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert all(str(r) == "aggregation failed" for r in results)
    assert service.in_flight_count == 0
    assert store.rows == {}
    assert service.get_cache_metrics().cache_error == 0


async def test_failed_load_is_retried_by_next_caller(store, clock, dashboard_factory) -> None:
    compute = AsyncMock(side_effect=[RuntimeError("boom"), dashboard_factory()])
    service = DashboardCacheService(store, compute, clock=clock)

    with pytest.raises(RuntimeError, match="boom"):
        await service.get_cached_dashboard_data(QUERY)
    result = await service.get_cached_dashboard_data(QUERY)

    assert result == dashboard_factory()
    assert compute.await_count == 2


async def test_cancelled_waiter_does_not_cancel_shared_load(store, clock, dashboard_factory) -> None:
    gate = asyncio.Event()

    async def compute_fn(query):
        await gate.wait()
        return dashboard_factory()

    service = DashboardCacheService(store, compute_fn, clock=clock)
    first = asyncio.create_task(service.get_cached_dashboard_data(QUERY))
    second = asyncio.create_task(service.get_cached_dashboard_data(QUERY))
    await settle()

    first.cancel()
    await settle()
    gate.set()

    assert await second == dashboard_factory()
    assert first.cancelled()
    assert store.writes == 1


async def test_read_error_is_counted_and_recovered(service, store, compute, dashboard_factory) -> None:
    store.fail_reads = True

    result = await service.get_cached_dashboard_data(QUERY)

    assert result == dashboard_factory()
    compute.assert_awaited_once()
    metrics = service.get_cache_metrics()
    assert (metrics.cache_error, metrics.cache_miss) == (1, 1)


async def test_unreadable_row_is_treated_as_miss(service, store, compute, clock) -> None:
    store.put(STORAGE_KEY, "2024-03", "acc-1", clock.now, data="not json")

    await service.get_cached_dashboard_data(QUERY)

    compute.assert_awaited_once()
    assert service.get_cache_metrics().cache_error == 1
    assert store.rows[STORAGE_KEY].data != "not json"


async def test_write_error_still_returns_value(service, store, dashboard_factory) -> None:
    store.fail_writes = True

    result = await service.get_cached_dashboard_data(QUERY)

    assert result == dashboard_factory()
    assert store.rows == {}
    metrics = service.get_cache_metrics()
    assert (metrics.cache_error, metrics.cache_miss) == (1, 1)


async def test_oversized_payload_is_returned_but_not_persisted(store, compute, clock, caplog) -> None:
    service = DashboardCacheService(store, compute, clock=clock, max_payload_bytes=64)

    with caplog.at_level("WARNING"):
        await service.get_cached_dashboard_data(QUERY)

    assert store.rows == {}
    assert store.writes == 0
    metrics = service.get_cache_metrics()
    assert (metrics.cache_miss, metrics.cache_error) == (1, 0)
    assert "DASHBOARD_CACHE_PAYLOAD_TOO_LARGE" in caplog.text


def test_default_limits(service) -> None:
    assert service.ttl_seconds == 300
    assert service.max_cache_size_bytes == 512 * 1024


async def test_prefetched_accounts_bypass_cache(service, store, compute) -> None:
    query = DashboardQuery(
        month_key="2024-03",
        accounts=[AccountResult(id="acc-1", user_id="user-1", name="Main", currency=Currency.USD)],
    )

    await service.get_cached_dashboard_data(query)
    await service.get_cached_dashboard_data(query)

    assert compute.await_count == 2
    assert store.reads == 0
    assert store.rows == {}
    assert service.in_flight_count == 0
    assert service.get_cache_metrics().total == 0


async def test_empty_account_list_also_bypasses(service, store, compute) -> None:
    await service.get_cached_dashboard_data(DashboardQuery(month_key="2024-03", accounts=[]))
    assert store.reads == 0
    compute.assert_awaited_once()


async def test_aggregate_view_is_stored_without_account(service, store) -> None:
    await service.get_cached_dashboard_data(DashboardQuery(month_key="2024-03", user_id="user-1"))

    row = store.rows["dashboard:user-1:2024-03:ALL:DEFAULT"]
    assert row.account_id is None


async def test_get_cached_data_supports_other_payload_types(service, store) -> None:
    key = build_dashboard_cache_key("2024-03", "acc-1", user_id="user-1")
    compute_fn = AsyncMock(return_value={"a": 1, "b": 2})
    metadata = CacheEntryMetadata(month_key="2024-03", account_id="acc-1")

    first = await service.get_cached_data(key, compute_fn, metadata, dict[str, int])
    second = await service.get_cached_data(key, compute_fn, metadata, dict[str, int])

    assert first == second == {"a": 1, "b": 2}
    compute_fn.assert_awaited_once()


async def test_hit_rate_is_rounded_percentage(service) -> None:
    await service.get_cached_dashboard_data(QUERY)
    await service.get_cached_dashboard_data(QUERY)
    await service.get_cached_dashboard_data(QUERY)

    metrics = service.get_cache_metrics()
    assert metrics.total == 3
    assert metrics.hit_rate == 66.67


async def test_hit_rate_three_hits_one_miss(service) -> None:
    for _ in range(4):
        await service.get_cached_dashboard_data(QUERY)

    metrics = service.get_cache_metrics()
    assert (metrics.cache_hit, metrics.cache_miss) == (3, 1)
    assert metrics.hit_rate == 75.0


def test_last_reset_starts_at_clock_time(service, clock) -> None:
    assert service.get_cache_metrics().last_reset == clock.now


def test_hit_rate_is_zero_without_observations(service) -> None:
    metrics = service.get_cache_metrics()
    assert metrics.total == 0
    assert metrics.hit_rate == 0


async def test_reset_zeroes_counters_and_stamps_time(service, store, clock) -> None:
    store.fail_writes = True
    await service.get_cached_dashboard_data(QUERY)
    clock.advance(60)

    service.reset_cache_metrics()

    metrics = service.get_cache_metrics()
    assert (metrics.cache_hit, metrics.cache_miss, metrics.cache_error) == (0, 0, 0)
    assert metrics.last_reset == clock.now


async def test_clear_in_flight_forgets_pending_loads(store, clock, dashboard_factory) -> None:
    gate = asyncio.Event()

    async def compute(query):
        await gate.wait()
        return dashboard_factory()

    service = DashboardCacheService(store, compute, clock=clock)
    task = asyncio.create_task(service.get_cached_dashboard_data(QUERY))
    await settle()
    assert service.in_flight_count == 1

    service.clear_in_flight()
    assert service.in_flight_count == 0

    gate.set()
    assert await task == dashboard_factory()
