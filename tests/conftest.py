"""Shared fixtures: canned VLC JSON and a fake VLC HTTP interface."""

import contextlib
import copy

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

STATUS_PLAYING = {
    "fullscreen": False,
    "stats": {"readbytes": 1024, "demuxbitrate": 0.02},
    "aspectratio": "16:9",
    "audiodelay": 0,
    "apiversion": 3,
    "currentplid": 4,
    "time": 12,
    "volume": 256,
    "length": 240,
    "random": False,
    "audiofilters": {"filter_0": ""},
    "rate": 1,
    "videoeffects": {"hue": 0, "saturation": 1, "contrast": 1, "brightness": 1, "gamma": 1},
    "state": "playing",
    "loop": False,
    "version": "3.0.18 Vetinari",
    "position": 0.05,
    "information": {
        "chapter": 0,
        "chapters": [],
        "title": 0,
        "titles": [],
        "category": {
            "meta": {"filename": "song.mp3", "title": "Song", "artist": "Band"},
            "Stream 0": {"Type": "Audio", "Codec": "MPEG Audio layer 1/2/3 (mpga)"},
        },
    },
    "repeat": False,
    "subtitledelay": 0,
    "equalizer": [],
}

STATUS_STOPPED = {
    "fullscreen": 0,
    "stats": None,
    "aspectratio": None,
    "audiodelay": 0,
    "apiversion": 3,
    "currentplid": -1,
    "time": 0,
    "volume": 256,
    "length": 0,
    "random": False,
    "audiofilters": {"filter_0": ""},
    "rate": 1,
    "videoeffects": {"hue": 0, "saturation": 1, "contrast": 1, "brightness": 1, "gamma": 1},
    "state": "stopped",
    "loop": False,
    "version": "3.0.18 Vetinari",
    "position": 0,
    "repeat": False,
    "subtitledelay": 0,
    "equalizer": [],
}

PLAYLIST = {
    "ro": "rw",
    "type": "node",
    "name": "Undefined",
    "id": "1",
    "children": [
        {
            "ro": "ro",
            "type": "node",
            "name": "Playlist",
            "id": "2",
            "children": [
                {"ro": "rw", "type": "leaf", "name": "song.mp3", "id": "4",
                 "duration": 240, "uri": "file:///music/song.mp3"},
                {"ro": "rw", "type": "leaf", "name": "other.mp3", "id": "5",
                 "duration": 180, "uri": "file:///music/other.mp3"},
            ],
        },
        {"ro": "ro", "type": "node", "name": "Media Library", "id": "3", "children": []},
    ],
}

BROWSE = {
    "element": [
        {"type": "dir", "path": "/music/..", "name": "..", "uri": "file:///",
         "size": 4096, "uid": 0, "gid": 0, "mode": 16877,
         "creation_time": 1600000000, "modification_time": 1600000000},
        {"type": "file", "path": "/music/song.mp3", "name": "song.mp3",
         "uri": "file:///music/song.mp3", "size": 5120000, "uid": 1000, "gid": 1000,
         "mode": 33188, "creation_time": 1600000100, "modification_time": 1600000200},
    ],
}

STATUS_PATH = "/requests/status.json"
PLAYLIST_PATH = "/requests/playlist.json"
BROWSE_PATH = "/requests/browse.json"


def status_playing(**changes) -> dict:
    data = copy.deepcopy(STATUS_PLAYING)
    data.update(changes)
    return data


def status_stopped(**changes) -> dict:
    data = copy.deepcopy(STATUS_STOPPED)
    data.update(changes)
    return data


def playlist() -> dict:
    return copy.deepcopy(PLAYLIST)


class FakeVLC:
    """Serves canned JSON on VLC's request paths and records every request."""

    def __init__(self):
        self.bodies = {
            STATUS_PATH: status_playing(),
            PLAYLIST_PATH: playlist(),
            BROWSE_PATH: copy.deepcopy(BROWSE),
        }
        self.raw = {}
        self.fail = {}
        self.requests = []

    def app(self) -> web.Application:
        app = web.Application()
        for path in (STATUS_PATH, PLAYLIST_PATH, BROWSE_PATH):
            app.router.add_get(path, self._handle)
        return app

    def commands(self, path=STATUS_PATH) -> list:
        return [r["query"].get("command") for r in self.requests
                if r["path"] == path and "command" in r["query"]]

    async def _handle(self, request: web.Request) -> web.Response:
        self.requests.append({
            "path": request.path,
            "query": dict(request.query),
            "query_string": request.query_string,
            "authorization": request.headers.get("Authorization"),
        })
        if request.path in self.fail:
            return web.Response(status=self.fail[request.path], text="nope")
        if request.path in self.raw:
            raw = self.raw[request.path]
            if isinstance(raw, bytes):
                return web.Response(body=raw, content_type="application/json")
            return web.Response(text=raw, content_type="application/json")
        return web.json_response(self.bodies[request.path])


@contextlib.asynccontextmanager
async def serve(fake: FakeVLC):
    server = TestServer(fake.app())
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


class FakeDispatcher:
    """Dispatcher double: answers each scope from a queue of canned values."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def queue(self, scope, *values):
        self.responses.setdefault(scope, []).extend(values)

    async def dispatch(self, scope, command=None, params=None):
        self.calls.append((scope, command, params))
        value = self.responses[scope].pop(0)
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value)


@pytest.fixture
def fake_vlc():
    return FakeVLC()


@pytest.fixture
def fake_dispatcher():
    return FakeDispatcher()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep a developer's config.json / env out of the tests."""
    from vlc_http import config

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VLC_HTTP_CONFIG", raising=False)
    monkeypatch.delenv("VLC_PASSWORD", raising=False)
    monkeypatch.setattr(config, "_config", None)
    yield
    config._config = None
