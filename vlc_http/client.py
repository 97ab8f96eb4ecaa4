# vlc-http
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
VLC: stateful client for VLC's HTTP interface.

Wires the transport, dispatcher, state cache, tick scheduler and event bus
into one object:

    vlc = VLC(VLCOptions(password="secret"))

    @vlc.on("statuschange")
    def changed(prev, status):
        print(status.state, status.time)

    await vlc.start()          # probe, emit "connect", arm the tick loop
    await vlc.pause()          # actions return the fresh Status
    ...
    await vlc.close()

Events:
    tick(delta_seconds)            every scheduler fire
    update(status, playlist)       after each successful update_all()
    statuschange(prev, status)     status JSON differs from the cached one
    playlistchange(prev, playlist) playlist JSON differs from the cached one
    connect()                      start-up probe succeeded
    error(exc)                     probe / scheduled refresh / handler failure

``prev`` is None on the first change event of a kind.  Errors from calls the
caller awaits directly (actions, browse, update_*) are raised, not emitted.
"""

import asyncio
import logging
import time

import aiohttp

from .actions import ActionsMixin
from .config import VLCOptions
from .dispatcher import CommandScope, Dispatcher
from .errors import VLCError
from .events import EventBus
from .models import Playlist, Status
from .state import StateCache
from .ticker import TickScheduler
from .transport import Transport

logger = logging.getLogger(__name__)


class VLC(ActionsMixin):
    def __init__(self, options: VLCOptions | None = None, *,
                 session: aiohttp.ClientSession | None = None,
                 clock=time.monotonic_ns, **kwargs):
        if options is None:
            options = VLCOptions(**kwargs)
        elif kwargs:
            raise TypeError("Pass either a VLCOptions or keyword options, not both")
        self.options = options
        self.bus = EventBus()
        self.transport = Transport(
            options.base_url, options.username, options.password,
            timeout=options.request_timeout, session=session,
        )
        self.dispatcher = Dispatcher(self.transport)
        self.cache = StateCache(self.dispatcher, self.bus, options.change_events)
        self.scheduler = TickScheduler(
            options.tick_length_ms, self.update_all, self.bus, clock=clock,
        )
        self.connected = False

    # ── Events ──

    def on(self, event: str, handler=None):
        return self.bus.on(event, handler)

    def once(self, event: str, handler=None):
        return self.bus.once(event, handler)

    def off(self, event: str, handler) -> None:
        self.bus.off(event, handler)

    # ── Lifecycle ──

    async def start(self) -> bool:
        """Probe VLC, then arm the tick loop according to the options.

        Returns True when the probe succeeded.  A failed probe is reported on
        the ``error`` event, never raised.
        """
        await self.transport.start()
        self.connected = await self._probe()
        if self.options.auto_update and (self.connected or not self.options.require_probe):
            self.scheduler.start()
        elif self.options.auto_update:
            logger.warning("VLC unreachable at %s, tick loop not started",
                           self.options.base_url)
        return self.connected

    async def close(self):
        self.scheduler.stop()
        await self.transport.close()
        logger.info("VLC client closed")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _probe(self) -> bool:
        attempts = self.options.connect_attempts
        last_error = None
        for attempt in range(attempts):
            try:
                await self.dispatcher.dispatch(CommandScope.STATUS)
            except VLCError as e:
                last_error = e
                if attempt < attempts - 1:
                    logger.warning("VLC unreachable (attempt %d/%d, retry in %.1fs): %s",
                                   attempt + 1, attempts, self.options.connect_interval, e)
                    await asyncio.sleep(self.options.connect_interval)
                continue
            logger.info("Connected to VLC at %s", self.options.base_url)
            self.bus.emit("connect")
            return True

        logger.warning("VLC unreachable after %d attempt(s): %s", attempts, last_error)
        self.bus.emit("error", last_error)
        return False

    # ── State ──

    @property
    def status(self) -> Status | None:
        """Last Status seen by a refresh, None before the first one."""
        return self.cache.last_status

    @property
    def playlist(self) -> Playlist | None:
        return self.cache.last_playlist

    async def update_status(self) -> Status:
        return await self.cache.refresh_status()

    async def update_playlist(self) -> Playlist:
        return await self.cache.refresh_playlist()

    async def update_all(self) -> tuple[Status, Playlist]:
        return await self.cache.refresh_all()
