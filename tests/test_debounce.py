"""Tests for the keyed debouncer."""

import asyncio

import pytest

from fiori.address import Debouncer, DebouncerClosed

DELAY = 0.03


class Counter:
    def __init__(self) -> None:
        self.runs: list[str] = []

    def action(self, label: str):
        async def run():
            self.runs.append(label)
        return run


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_fires_after_quiet_period(self):
        debouncer = Debouncer(DELAY)
        counter = Counter()

        debouncer.schedule("k", counter.action("one"))
        assert debouncer.is_pending("k")
        assert counter.runs == []

        await debouncer.idle()

        assert counter.runs == ["one"]
        assert not debouncer.is_pending("k")

    @pytest.mark.asyncio
    async def test_reschedule_replaces_pending(self):
        debouncer = Debouncer(DELAY)
        counter = Counter()

        for label in ("a", "ab", "abc"):
            debouncer.schedule("k", counter.action(label))
            await asyncio.sleep(DELAY / 3)

        await debouncer.idle()

        assert counter.runs == ["abc"]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        debouncer = Debouncer(DELAY)
        counter = Counter()

        debouncer.schedule("x", counter.action("x"))
        debouncer.schedule("y", counter.action("y"))
        await debouncer.idle()

        assert sorted(counter.runs) == ["x", "y"]

    @pytest.mark.asyncio
    async def test_cancel(self):
        debouncer = Debouncer(DELAY)
        counter = Counter()

        debouncer.schedule("k", counter.action("one"))
        assert debouncer.cancel("k") is True
        assert debouncer.cancel("k") is False

        await asyncio.sleep(DELAY * 2)
        assert counter.runs == []

    @pytest.mark.asyncio
    async def test_close_cancels_and_refuses(self):
        debouncer = Debouncer(DELAY)
        counter = Counter()

        debouncer.schedule("k", counter.action("one"))
        debouncer.close()

        await asyncio.sleep(DELAY * 2)
        assert counter.runs == []
        assert debouncer.closed
        with pytest.raises(DebouncerClosed):
            debouncer.schedule("k", counter.action("two"))

    @pytest.mark.asyncio
    async def test_failing_action_does_not_escape(self):
        debouncer = Debouncer(0)

        async def explode():
            raise RuntimeError("collaborator down")

        debouncer.schedule("k", explode)
        await debouncer.idle()

        assert not debouncer.is_pending("k")

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            Debouncer(-1)
