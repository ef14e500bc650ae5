"""
Property-based tests for the debouncer.

These tests verify that bursts of scheduled callbacks collapse to the last one.
"""

import pytest
import asyncio
from hypothesis import given, settings, strategies as st
from catalog_core.timing import Debouncer


@given(burst=st.lists(st.integers(), min_size=1, max_size=20))
@settings(max_examples=25, deadline=None)
def test_burst_runs_only_last_callback(burst):
    """
    **Property: Last write wins**

    For any burst of schedule calls with no pause between them, exactly one
    callback runs and it is the last one scheduled.
    """
    fired = []

    async def scenario():
        debouncer = Debouncer(delay_ms=5)
        for value in burst:
            async def callback(value=value):
                fired.append(value)
            debouncer.schedule(callback)
        await debouncer.wait_idle()

    asyncio.run(scenario())

    assert fired == [burst[-1]]


def test_cancel_prevents_pending_callback():
    """A cancelled timer never fires."""
    fired = []

    async def scenario():
        debouncer = Debouncer(delay_ms=5)

        async def callback():
            fired.append(True)

        debouncer.schedule(callback)
        assert debouncer.pending
        debouncer.cancel()
        assert not debouncer.pending
        await debouncer.wait_idle()

    asyncio.run(scenario())

    assert fired == []


def test_running_callback_is_not_cancelled_by_new_schedule():
    """Once a timer has fired, a later schedule does not interrupt its callback."""
    finished = []

    async def scenario():
        debouncer = Debouncer(delay_ms=5)
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow():
            started.set()
            await release.wait()
            finished.append("slow")

        async def fast():
            finished.append("fast")

        debouncer.schedule(slow)
        await started.wait()
        debouncer.schedule(fast)
        release.set()
        await debouncer.wait_idle()

    asyncio.run(scenario())

    assert sorted(finished) == ["fast", "slow"]


def test_separated_calls_each_fire():
    """Calls separated by more than the delay are not coalesced."""
    fired = []

    async def scenario():
        debouncer = Debouncer(delay_ms=5)
        for value in ("first", "second"):
            async def callback(value=value):
                fired.append(value)
            debouncer.schedule(callback)
            await debouncer.wait_idle()

    asyncio.run(scenario())

    assert fired == ["first", "second"]


def test_invalid_delay_rejected():
    with pytest.raises(ValueError):
        Debouncer(delay_ms=0)
