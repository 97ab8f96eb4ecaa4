"""
vlc-monitor: log what a VLC instance is doing.

Connects to VLC's HTTP interface, polls it at the configured cadence and
logs status/playlist changes until SIGINT/SIGTERM.

Usage:
    python -m vlc_http [--host 127.0.0.1] [--port 8080] [--password secret]
"""

import argparse
import asyncio
import logging
import signal

from .client import VLC
from .config import VLCOptions
from .models import PlaylistNode

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger('vlc-monitor')


def _format_time(seconds) -> str:
    total = int(seconds or 0)
    if total >= 3600:
        return f"{total // 3600}:{(total % 3600) // 60:02d}:{total % 60:02d}"
    return f"{total // 60}:{total % 60:02d}"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Monitor a VLC instance over HTTP")
    parser.add_argument("--host", help="VLC host (default from config, else 127.0.0.1)")
    parser.add_argument("--port", type=int, help="VLC HTTP port (default 8080)")
    parser.add_argument("--username", help="HTTP username (VLC ignores it)")
    parser.add_argument("--password", help="HTTP password (default $VLC_PASSWORD)")
    parser.add_argument("--tick-ms", type=float, dest="tick_length_ms",
                        help="polling period in milliseconds (min 16)")
    parser.add_argument("--connect-attempts", type=int,
                        help="start-up probe attempts before giving up")
    parser.add_argument("--no-change-events", dest="change_events",
                        action="store_false", default=None,
                        help="do not emit statuschange/playlistchange")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def attach_logging(vlc: VLC):
    """Subscribe log handlers to the client's events."""

    @vlc.on("connect")
    def connected():
        logger.info("VLC reachable at %s", vlc.options.base_url)

    @vlc.on("statuschange")
    def status_changed(prev, status):
        if prev is None or prev.state != status.state:
            logger.info("State: %s", status.state)
        if prev is None or prev.title != status.title:
            logger.info("Now playing: %s (%s)", status.title or "—",
                        _format_time(status.length))
        if prev is not None and prev.volume != status.volume:
            logger.info("Volume: %s", status.volume)

    @vlc.on("playlistchange")
    def playlist_changed(prev, playlist):
        count = len(list(playlist.leaves())) if isinstance(playlist, PlaylistNode) else 1
        logger.info("Playlist changed: %d item(s)", count)

    @vlc.on("error")
    def errored(exc):
        logger.error("VLC error: %s", exc)


async def run(options: VLCOptions):
    vlc = VLC(options)
    attach_logging(vlc)
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_event.set)
    await vlc.start()
    try:
        await stop_event.wait()
    finally:
        await vlc.close()


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    options = VLCOptions.from_config(
        host=args.host,
        port=args.port,
        username=args.username,
        password=args.password,
        tick_length_ms=args.tick_length_ms,
        connect_attempts=args.connect_attempts,
        change_events=args.change_events,
    )
    asyncio.run(run(options))
