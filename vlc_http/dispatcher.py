"""
Command dispatch for the VLC HTTP interface.

Every remote operation is a GET against one of three fixed endpoints, with
an optional ``command`` and key/value parameters in the query string:

    /requests/status.json?command=pl_sort&id=5&val=1
    /requests/browse.json?dir=%2Fhome
"""

import enum
import logging
from urllib.parse import quote, urlencode

from .transport import Transport

logger = logging.getLogger(__name__)


class CommandScope(str, enum.Enum):
    BROWSE = "/requests/browse.json"
    STATUS = "/requests/status.json"
    PLAYLIST = "/requests/playlist.json"


def _query_value(value):
    # querystring convention: lowercase booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def build_query(command: str | None = None, params: dict | None = None) -> str:
    """Serialise ``command`` plus every param whose value is not None.

    The command always comes first.  Returns "" when there is nothing to send.
    """
    pairs = []
    if command:
        pairs.append(("command", command))
    for key, value in (params or {}).items():
        if value is None:
            continue
        pairs.append((key, _query_value(value)))
    if not pairs:
        return ""
    return urlencode(pairs, quote_via=quote)


def build_path(scope: CommandScope, command: str | None = None,
               params: dict | None = None) -> str:
    query = build_query(command, params)
    return f"{scope.value}?{query}" if query else scope.value


class Dispatcher:
    """Turns (scope, command, params) into exactly one transport round trip."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def dispatch(self, scope: CommandScope, command: str | None = None,
                       params: dict | None = None) -> dict:
        path = build_path(scope, command, params)
        if command:
            logger.debug("Dispatch %s -> %s", command, path)
        return await self.transport.get_json(path)
