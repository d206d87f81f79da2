"""Тесты debounce входных значений."""

import asyncio
import logging

import pytest

from catalog_engine.utils.debounce import QueryDebouncer

DELAY = 0.05


class TestQueryDebouncer:
    """Передача только последнего значения после паузы."""

    async def test_emits_latest_value_once(self):
        received: list[str] = []
        debouncer = QueryDebouncer(DELAY, received.append, name="search")

        debouncer.push("s")
        debouncer.push("sn")
        debouncer.push("sneakers")
        assert debouncer.pending is True

        await asyncio.sleep(DELAY * 4)

        assert received == ["sneakers"]
        assert debouncer.pending is False

    async def test_push_restarts_quiet_period(self):
        received: list[str] = []
        debouncer = QueryDebouncer(DELAY * 2, received.append)

        debouncer.push("a")
        await asyncio.sleep(DELAY)
        debouncer.push("ab")
        await asyncio.sleep(DELAY)
        assert received == []

        await asyncio.sleep(DELAY * 3)
        assert received == ["ab"]

    async def test_cancel_drops_pending_value(self):
        received: list[str] = []
        debouncer = QueryDebouncer(DELAY, received.append)

        debouncer.push("stale")
        debouncer.cancel()
        await asyncio.sleep(DELAY * 3)

        assert received == []
        debouncer.flush()
        assert received == []

    async def test_flush_emits_immediately(self):
        received: list[str] = []
        debouncer = QueryDebouncer(10, received.append)

        debouncer.push("now")
        debouncer.flush()

        assert received == ["now"]
        assert debouncer.pending is False

    async def test_unchanged_value_not_reemitted(self):
        received: list[str] = []
        debouncer = QueryDebouncer(0, received.append)

        debouncer.push("same")
        debouncer.flush()
        debouncer.push("same")
        debouncer.flush()

        assert received == ["same"]

    async def test_independent_instances_do_not_share_timers(self):
        searches: list[str] = []
        filters: list[str] = []
        search = QueryDebouncer(DELAY, searches.append, name="search")
        facets = QueryDebouncer(DELAY, filters.append, name="filters")

        search.push("tee")
        facets.push("colors=Black")
        search.cancel()
        await asyncio.sleep(DELAY * 3)

        assert searches == []
        assert filters == ["colors=Black"]

    async def test_async_callback(self):
        received: list[str] = []

        async def on_value(value: str) -> None:
            await asyncio.sleep(0)
            received.append(value)

        debouncer = QueryDebouncer(0, on_value)
        debouncer.push("async")
        debouncer.flush()
        await debouncer.drain()

        assert received == ["async"]

    async def test_async_callback_failure_is_logged(self, caplog):
        async def on_value(value: str) -> None:
            raise RuntimeError(f"cannot apply {value}")

        debouncer = QueryDebouncer(0, on_value, name="filters")

        with caplog.at_level(logging.ERROR, logger="query_debouncer"):
            debouncer.push("colors=Black")
            debouncer.flush()
            await debouncer.drain()

        failures = [r for r in caplog.records if r.getMessage() == "debounce_callback_failed"]
        assert len(failures) == 1
        assert failures[0].context_data["signal"] == "filters"
        assert failures[0].context_data["error_type"] == "RuntimeError"

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            QueryDebouncer(-1, print)
