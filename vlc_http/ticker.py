# vlc-http
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Fixed-cadence polling loop with drift compensation.

Each check compares the monotonic clock with the absolute ``target``.  When
the target has passed the scheduler fires: it emits ``tick(delta)``, starts a
refresh in the background and moves ``target`` forward by exactly one
period.  Because the next target comes from the previous target and not from
the time the callback actually ran, late callbacks do not add up and the long
run rate stays at 1000 / tick_length_ms per second.

Waiting is two-phase:
  * far from the deadline, one coarse ``loop.call_later`` that wakes up
    SPIN_WINDOW_NS before the target;
  * inside the window, ``loop.call_soon`` re-checks on every loop turn until
    the deadline passes.

Refreshes are fire-and-forget.  A refresh slower than the period overlaps
with the next one; failures go to the ``error`` event.
"""

import asyncio
import logging
import time

from .events import EventBus

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000
# near-spin window before each deadline
SPIN_WINDOW_NS = 1 * NS_PER_MS


class TickScheduler:
    def __init__(self, tick_length_ms: float, refresh, bus: EventBus, *,
                 clock=time.monotonic_ns, loop: asyncio.AbstractEventLoop | None = None):
        self.tick_length_ms = tick_length_ms
        self.period = int(tick_length_ms * NS_PER_MS)
        self.refresh = refresh
        self.bus = bus
        self.clock = clock
        self._loop = loop
        self.previous = clock()
        self.target = self.previous
        self.fires = 0
        self.running = False
        self._handle: asyncio.Handle | None = None
        self._tasks: set = set()

    @property
    def in_flight(self) -> int:
        """Number of refreshes started by this scheduler that have not settled."""
        return len(self._tasks)

    def start(self):
        """Arm the loop.  The first check fires immediately."""
        if self.running:
            return
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self.running = True
        self.previous = self.clock()
        self.target = self.previous
        logger.info("Tick loop armed (%.1f ms period)", self.tick_length_ms)
        self._do_tick()

    def stop(self):
        """Cancel the pending check and any refresh still in flight."""
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def _do_tick(self):
        self._handle = None
        if not self.running:
            return

        now = self.clock()
        if now >= self.target:
            delta = (now - self.previous) / NS_PER_S
            self.previous = now
            if now - self.target >= self.period:
                # a whole period behind: skip the missed ticks instead of bursting
                logger.debug("Tick loop %.1f ms behind, resyncing",
                             (now - self.target) / NS_PER_MS)
                self.target = now + self.period
            else:
                self.target += self.period
            self.fires += 1
            self.bus.emit("tick", delta)
            self._start_refresh()

        remaining = self.target - self.clock()
        if remaining > SPIN_WINDOW_NS:
            delay = (remaining - SPIN_WINDOW_NS) / NS_PER_S
            self._handle = self._loop.call_later(delay, self._do_tick)
        else:
            self._handle = self._loop.call_soon(self._do_tick)

    def _start_refresh(self):
        task = self._loop.create_task(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._refresh_done)

    def _refresh_done(self, task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Scheduled refresh failed: %s", exc)
            self.bus.emit("error", exc)
