"""Tests for the tick scheduler: drift compensation and wait phases."""

import asyncio

import pytest

from vlc_http.config import MIN_TICK_LENGTH_MS, VLCOptions
from vlc_http.events import EventBus
from vlc_http.ticker import NS_PER_MS, SPIN_WINDOW_NS, TickScheduler


class FakeClock:
    def __init__(self, now=1_000 * NS_PER_MS):
        self.now = now

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += int(ms * NS_PER_MS)


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeTask:
    def __init__(self):
        self.callbacks = []

    def add_done_callback(self, callback):
        self.callbacks.append(callback)

    def cancel(self):
        pass


class FakeLoop:
    """Records what the scheduler asks for instead of running it."""

    def __init__(self):
        self.later = []
        self.soon = 0
        self.tasks = []
        self.last = None

    def call_later(self, delay, callback):
        self.later.append(delay)
        self.last = ("later", delay)
        return FakeHandle()

    def call_soon(self, callback):
        self.soon += 1
        self.last = ("soon", None)
        return FakeHandle()

    def create_task(self, coro):
        coro.close()
        task = FakeTask()
        self.tasks.append(task)
        return task


async def noop_refresh():
    return None


def make_scheduler(tick_ms=100, clock=None, loop=None, refresh=noop_refresh):
    bus = EventBus()
    ticks = []
    bus.on("tick", ticks.append)
    scheduler = TickScheduler(tick_ms, refresh, bus,
                              clock=clock or FakeClock(), loop=loop or FakeLoop())
    return scheduler, ticks, bus


class TestFiring:

    def test_first_check_fires_immediately(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(clock=clock)
        start = clock.now
        scheduler.start()
        assert ticks == [0.0]
        assert scheduler.fires == 1
        assert scheduler.target == start + 100 * NS_PER_MS
        assert len(scheduler._loop.tasks) == 1

    def test_no_fire_before_target(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(clock=clock)
        scheduler.start()
        clock.advance_ms(50)
        scheduler._do_tick()
        assert scheduler.fires == 1

    def test_target_advances_one_period_per_fire_despite_late_callbacks(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(tick_ms=100, clock=clock)
        scheduler.start()
        start = clock.now

        for lateness in (7, 23, 2, 40, 0, 15):
            clock.now = scheduler.target + lateness * NS_PER_MS
            before = scheduler.target
            scheduler._do_tick()
            assert scheduler.target == before + 100 * NS_PER_MS

        assert scheduler.fires == 7
        assert scheduler.target == start + 7 * 100 * NS_PER_MS

    def test_long_run_rate_matches_period(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(tick_ms=50, clock=clock)
        scheduler.start()
        # every callback runs 30% of a period late
        for _ in range(99):
            clock.now = scheduler.target + 15 * NS_PER_MS
            scheduler._do_tick()
        elapsed = sum(ticks)
        assert scheduler.fires == 100
        assert elapsed == pytest.approx(99 * 0.05, abs=0.02)

    def test_delta_is_elapsed_seconds_since_previous_fire(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(tick_ms=100, clock=clock)
        scheduler.start()
        clock.advance_ms(130)
        scheduler._do_tick()
        assert ticks[-1] == pytest.approx(0.13)

    def test_stall_fires_once_then_resyncs(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(tick_ms=20, clock=clock)
        scheduler.start()
        clock.advance_ms(2000)
        for _ in range(200):
            scheduler._do_tick()
        assert scheduler.fires == 2
        assert ticks[-1] == pytest.approx(2.0)
        assert len(scheduler._loop.tasks) == 2
        assert scheduler.target == clock.now + 20 * NS_PER_MS

    def test_lateness_under_one_period_keeps_the_grid(self):
        clock = FakeClock()
        scheduler, _, _ = make_scheduler(tick_ms=20, clock=clock)
        scheduler.start()
        start = clock.now
        clock.advance_ms(39)
        scheduler._do_tick()
        assert scheduler.target == start + 2 * 20 * NS_PER_MS

    def test_clamped_period(self):
        options = VLCOptions(tick_length_ms=1)
        scheduler, _, _ = make_scheduler(tick_ms=options.tick_length_ms)
        assert scheduler.period == MIN_TICK_LENGTH_MS * NS_PER_MS


class TestWaitPhases:

    def test_coarse_wait_far_from_deadline(self):
        clock = FakeClock()
        scheduler, _, _ = make_scheduler(tick_ms=100, clock=clock)
        scheduler.start()
        kind, delay = scheduler._loop.last
        assert kind == "later"
        assert delay == pytest.approx((100 * NS_PER_MS - SPIN_WINDOW_NS) / 1e9)

    def test_near_spin_inside_window(self):
        clock = FakeClock()
        scheduler, _, _ = make_scheduler(tick_ms=100, clock=clock)
        scheduler.start()
        clock.now = scheduler.target - SPIN_WINDOW_NS // 2
        scheduler._do_tick()
        assert scheduler._loop.last == ("soon", None)
        assert scheduler.fires == 1

    def test_one_pending_handle(self):
        scheduler, _, _ = make_scheduler()
        scheduler.start()
        handle = scheduler._handle
        scheduler.stop()
        assert handle.cancelled
        assert scheduler._handle is None
        assert not scheduler.running

    def test_stopped_scheduler_does_not_fire(self):
        clock = FakeClock()
        scheduler, ticks, _ = make_scheduler(clock=clock)
        scheduler.start()
        scheduler.stop()
        clock.advance_ms(500)
        scheduler._do_tick()
        assert ticks == [0.0]


class TestRefreshes:

    def test_overlapping_refreshes_are_allowed(self):
        clock = FakeClock()
        scheduler, _, _ = make_scheduler(tick_ms=100, clock=clock)
        scheduler.start()
        clock.now = scheduler.target
        scheduler._do_tick()
        # neither fake task has completed
        assert scheduler.in_flight == 2

    def test_refresh_failure_emits_one_error_per_fire(self):
        calls = []

        async def failing_refresh():
            calls.append(1)
            raise ConnectionError("vlc gone")

        async def scenario():
            bus = EventBus()
            errors = []
            bus.on("error", errors.append)
            scheduler = TickScheduler(10_000, failing_refresh, bus)
            scheduler.start()
            await asyncio.sleep(0.05)
            scheduler.stop()
            return errors

        errors = asyncio.run(scenario())
        assert len(calls) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], ConnectionError)

    def test_real_loop_fires_at_cadence(self):
        async def scenario():
            bus = EventBus()
            ticks = []
            bus.on("tick", ticks.append)
            scheduler = TickScheduler(20, noop_refresh, bus)
            scheduler.start()
            await asyncio.sleep(0.2)
            scheduler.stop()
            return ticks

        ticks = asyncio.run(scenario())
        # ~10 fires in 200ms; allow for a slow CI box
        assert 5 <= len(ticks) <= 12
