"""
Named-event publish/subscribe used by the VLC client.

Handlers are called in subscription order.  A handler that raises does not
stop the others: the exception is logged and re-emitted on ``error``.
Coroutine handlers are scheduled on the running loop and their failures
are routed the same way.

Usage:
    bus = EventBus()

    @bus.on("statuschange")
    def changed(prev, status):
        ...

    bus.emit("statuschange", None, status)
"""

import asyncio
import inspect
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)

ERROR = "error"


class EventBus:
    def __init__(self):
        self._handlers: dict[str, list] = defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def on(self, event: str, handler=None):
        """Subscribe ``handler`` to ``event``.  Usable as a decorator."""
        if handler is None:
            return lambda fn: self.on(event, fn)
        self._handlers[event].append(handler)
        return handler

    def once(self, event: str, handler=None):
        """Subscribe ``handler`` for the next emission of ``event`` only."""
        if handler is None:
            return lambda fn: self.once(event, fn)

        def wrapper(*args):
            self.off(event, wrapper)
            return handler(*args)

        wrapper.__wrapped__ = handler
        self._handlers[event].append(wrapper)
        return handler

    def off(self, event: str, handler) -> None:
        handlers = self._handlers.get(event)
        if not handlers:
            return
        for registered in handlers:
            if registered is handler or getattr(registered, "__wrapped__", None) is handler:
                handlers.remove(registered)
                break

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def emit(self, event: str, *args) -> bool:
        """Call every handler of ``event``.  Returns False if there were none."""
        handlers = list(self._handlers.get(event, ()))
        if not handlers:
            if event == ERROR:
                exc = args[0] if args else None
                logger.error("Unhandled error event: %s", exc,
                             exc_info=exc if isinstance(exc, BaseException) else None)
            return False

        for handler in handlers:
            try:
                result = handler(*args)
            except Exception as e:
                self._handler_failed(event, e)
                continue
            if inspect.isawaitable(result):
                self._schedule(event, result)
        return True

    async def wait_idle(self):
        """Wait for coroutine handlers scheduled so far to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _schedule(self, event: str, awaitable):
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)

        def done(t: asyncio.Task):
            self._tasks.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                self._handler_failed(event, exc)

        task.add_done_callback(done)

    def _handler_failed(self, event: str, exc: BaseException):
        if event == ERROR:
            logger.error("Error handler raised: %s", exc, exc_info=exc)
            return
        logger.warning("Handler for %r raised: %s", event, exc)
        self.emit(ERROR, exc)
