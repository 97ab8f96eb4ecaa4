# vlc-http
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Configuration for the VLC HTTP client.

Loads a single JSON config file.  Search order:
  1. $VLC_HTTP_CONFIG               (explicit override)
  2. /etc/vlc-http/config.json      (deployed)
  3. config.json                    (CWD, for local dev)

The VLC password stays in the environment (VLC_PASSWORD) unless the file
sets one.

Usage:
    from vlc_http.config import cfg, VLCOptions

    host    = cfg("vlc", "host", default="127.0.0.1")
    options = VLCOptions.from_config()
"""

import json
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_TICK_LENGTH_MS = 1000 / 30
# asyncio timers below ~16ms pile up callbacks faster than VLC can answer
MIN_TICK_LENGTH_MS = 16

_config: dict | None = None


def _search_paths() -> list[str]:
    paths = ["/etc/vlc-http/config.json", "config.json"]
    override = os.environ.get("VLC_HTTP_CONFIG")
    if override:
        paths.insert(0, override)
    return paths


def load_config() -> dict:
    """Load config from the first JSON file found. Cached after first call."""
    global _config
    if _config is not None:
        return _config

    for path in _search_paths():
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError:
            continue
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", path, e)
            continue
        if not isinstance(data, dict):
            logger.error("Config %s: top level must be an object, ignoring", path)
            continue
        logger.info("Config loaded from %s", path)
        _config = data
        return _config

    logger.debug("No config.json found, using empty config")
    _config = {}
    return _config


def cfg(section: str, key: str | None = None, *, default=None):
    """Read a config value.

    cfg("vlc")                       → config["vlc"]
    cfg("vlc", "host")               → config["vlc"]["host"]
    cfg("vlc", "port", default=8080) → config["vlc"]["port"] or 8080
    """
    config = load_config()
    val = config.get(section)
    if key is None:
        return val if val is not None else default
    if isinstance(val, dict):
        return val.get(key, default)
    return default


def reload_config():
    """Force re-read from disk (for testing or hot-reload)."""
    global _config
    _config = None
    return load_config()


@dataclass(frozen=True)
class VLCOptions:
    """Immutable client options.

    ``tick_length_ms`` is clamped to MIN_TICK_LENGTH_MS and a falsy value
    falls back to DEFAULT_TICK_LENGTH_MS.  ``connect_attempts`` and
    ``connect_interval`` only apply to the start-up reachability probe.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: str = ""
    password: str = ""
    auto_update: bool = True
    tick_length_ms: float = DEFAULT_TICK_LENGTH_MS
    change_events: bool = True
    connect_attempts: int = 1
    connect_interval: float = 1.0
    request_timeout: float = 5.0
    require_probe: bool = True

    def __post_init__(self):
        tick = self.tick_length_ms or DEFAULT_TICK_LENGTH_MS
        if tick < MIN_TICK_LENGTH_MS:
            tick = MIN_TICK_LENGTH_MS
        object.__setattr__(self, "tick_length_ms", float(tick))
        object.__setattr__(self, "host", self.host or DEFAULT_HOST)
        object.__setattr__(self, "port", int(self.port or DEFAULT_PORT))
        object.__setattr__(self, "connect_attempts", max(1, int(self.connect_attempts)))
        object.__setattr__(self, "connect_interval", max(0.0, float(self.connect_interval)))

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_config(cls, **overrides) -> "VLCOptions":
        """Build options from the "vlc" config section.

        Keyword overrides win over the file; ``None`` overrides are ignored
        so CLI flags that were not given fall through to the file.
        """
        section = cfg("vlc", default={})
        if not isinstance(section, dict):
            logger.warning("Config section 'vlc' is not an object, ignoring")
            section = {}
        values = {
            "host": section.get("host", DEFAULT_HOST),
            "port": section.get("port", DEFAULT_PORT),
            "username": section.get("username", ""),
            "password": section.get("password") or os.getenv("VLC_PASSWORD", ""),
            "auto_update": section.get("auto_update", True),
            "tick_length_ms": section.get("tick_length_ms", DEFAULT_TICK_LENGTH_MS),
            "change_events": section.get("change_events", True),
            "connect_attempts": section.get("connect_attempts", 1),
            "connect_interval": section.get("connect_interval", 1.0),
            "request_timeout": section.get("request_timeout", 5.0),
            "require_probe": section.get("require_probe", True),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
