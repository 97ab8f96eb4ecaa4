"""
Last-known status/playlist cache with change detection.

Each refresh fetches a fresh value, compares its JSON with the cached one
and emits ``statuschange`` / ``playlistchange`` only when they differ.  The
cache cell is then replaced wholesale, whether or not change events are on.
On the very first refresh the previous value is reported as ``None``.
"""

import asyncio
import logging

from .dispatcher import CommandScope, Dispatcher
from .equality import deep_equal
from .events import EventBus
from .models import Playlist, Status, parse_playlist, parse_status

logger = logging.getLogger(__name__)


class StateCache:
    def __init__(self, dispatcher: Dispatcher, bus: EventBus, change_events: bool = True):
        self.dispatcher = dispatcher
        self.bus = bus
        self.change_events = change_events
        self.last_status: Status | None = None
        self.last_playlist: Playlist | None = None

    async def refresh_status(self) -> Status:
        data = await self.dispatcher.dispatch(CommandScope.STATUS)
        status = parse_status(data)
        previous = self.last_status
        if self.change_events and not self._same(previous, status):
            logger.debug("Status changed (%s)", status.state)
            self.bus.emit("statuschange", previous, status)
        self.last_status = status
        return status

    async def refresh_playlist(self) -> Playlist:
        data = await self.dispatcher.dispatch(CommandScope.PLAYLIST)
        playlist = parse_playlist(data)
        previous = self.last_playlist
        if self.change_events and not self._same(previous, playlist):
            logger.debug("Playlist changed")
            self.bus.emit("playlistchange", previous, playlist)
        self.last_playlist = playlist
        return playlist

    async def refresh_all(self) -> tuple[Status, Playlist]:
        """Refresh status and playlist concurrently, then emit ``update``.

        If either fetch fails the first failure is raised once both have
        settled, and no ``update`` is emitted.
        """
        results = await asyncio.gather(
            self.refresh_status(),
            self.refresh_playlist(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        status, playlist = results
        self.bus.emit("update", status, playlist)
        return status, playlist

    @staticmethod
    def _same(previous, current) -> bool:
        if previous is None:
            return False
        return deep_equal(previous.raw, current.raw)
