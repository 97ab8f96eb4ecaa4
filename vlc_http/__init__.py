"""
vlc_http: asyncio client for VLC's HTTP interface.

Polls status and playlist at a fixed cadence, keeps the last known values and
emits change events; playback actions are single HTTP commands.
"""

from .client import VLC
from .config import VLCOptions
from .dispatcher import CommandScope
from .errors import DecodeError, TransportError, VLCError
from .models import (
    Browse,
    BrowseElement,
    Playlist,
    PlaylistLeaf,
    PlaylistNode,
    Status,
    StatusPaused,
    StatusPlaying,
    StatusStopped,
)

__all__ = [
    "VLC",
    "VLCOptions",
    "CommandScope",
    "VLCError",
    "TransportError",
    "DecodeError",
    "Browse",
    "BrowseElement",
    "Playlist",
    "PlaylistLeaf",
    "PlaylistNode",
    "Status",
    "StatusPaused",
    "StatusPlaying",
    "StatusStopped",
]
