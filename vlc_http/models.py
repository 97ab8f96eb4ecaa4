"""
Typed views of the JSON VLC returns.

Status is a sum type over the player state (playing / paused / stopped) and
Playlist over the tree entry kind (node / leaf).  Every model keeps the JSON
it was parsed from in ``raw``; change detection compares ``raw`` so fields
not modelled here still count as changes.
"""

from dataclasses import dataclass, field

from .errors import DecodeError

ASPECT_RATIOS = ("1:1", "4:3", "5:4", "16:9", "16:10", "221:100", "235:100", "239:100")

# pl_sort modes (non exhaustive)
SORT_ID = 0
SORT_NAME = 1
SORT_AUTHOR = 3
SORT_RANDOM = 5
SORT_TRACK_NUMBER = 7

SORT_NORMAL = 0
SORT_REVERSE = 1


def _num(value, default=0):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _flag(value) -> bool:
    # VLC reports some flags as 0/1 and some as true/false
    if isinstance(value, str):
        return value.lower() in ("true", "1")
    return bool(value)


@dataclass(frozen=True)
class Information:
    chapter: int = 0
    chapters: tuple = ()
    title: int = 0
    titles: tuple = ()
    category: dict = field(default_factory=dict)

    @property
    def meta(self) -> dict:
        return self.category.get("meta") or {}

    @classmethod
    def from_json(cls, data: dict) -> "Information":
        return cls(
            chapter=int(_num(data.get("chapter"))),
            chapters=tuple(data.get("chapters") or ()),
            title=int(_num(data.get("title"))),
            titles=tuple(data.get("titles") or ()),
            category=dict(data.get("category") or {}),
        )


@dataclass(frozen=True)
class _StatusBase:
    fullscreen: bool = False
    audiodelay: float = 0
    apiversion: int = 0
    currentplid: int = -1
    time: float = 0
    volume: float = 0
    length: float = 0
    random: bool = False
    loop: bool = False
    repeat: bool = False
    rate: float = 1
    position: float = 0
    version: str = ""
    subtitledelay: float = 0
    audiofilters: dict = field(default_factory=dict)
    videoeffects: dict = field(default_factory=dict)
    equalizer: tuple = ()
    information: Information | None = None
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def title(self) -> str:
        """Best-effort display title of the current item."""
        if self.information is None:
            return ""
        meta = self.information.meta
        return meta.get("title") or meta.get("filename") or ""


@dataclass(frozen=True)
class StatusPlaying(_StatusBase):
    stats: dict = field(default_factory=dict)
    aspectratio: str | None = None
    state: str = "playing"


@dataclass(frozen=True)
class StatusPaused(_StatusBase):
    stats: dict = field(default_factory=dict)
    aspectratio: str | None = None
    state: str = "paused"


@dataclass(frozen=True)
class StatusStopped(_StatusBase):
    state: str = "stopped"

    @property
    def stats(self) -> None:
        return None

    @property
    def aspectratio(self) -> None:
        return None


Status = StatusPlaying | StatusPaused | StatusStopped


def parse_status(data: dict) -> Status:
    """Build the Status variant matching ``data["state"]``."""
    state = data.get("state")
    common = dict(
        fullscreen=_flag(data.get("fullscreen")),
        audiodelay=_num(data.get("audiodelay")),
        apiversion=int(_num(data.get("apiversion"))),
        currentplid=int(_num(data.get("currentplid"), -1)),
        time=_num(data.get("time")),
        volume=_num(data.get("volume")),
        length=_num(data.get("length")),
        random=_flag(data.get("random")),
        loop=_flag(data.get("loop")),
        repeat=_flag(data.get("repeat")),
        rate=_num(data.get("rate"), 1),
        position=_num(data.get("position")),
        version=str(data.get("version") or ""),
        subtitledelay=_num(data.get("subtitledelay")),
        audiofilters=dict(data.get("audiofilters") or {}),
        videoeffects=dict(data.get("videoeffects") or {}),
        equalizer=tuple(data.get("equalizer") or ()),
        information=(Information.from_json(data["information"])
                     if isinstance(data.get("information"), dict) else None),
        raw=data,
    )
    if state == "stopped":
        return StatusStopped(**common)
    if state in ("playing", "paused"):
        cls = StatusPlaying if state == "playing" else StatusPaused
        return cls(
            stats=dict(data.get("stats") or {}),
            aspectratio=data.get("aspectratio"),
            **common,
        )
    raise DecodeError(f"Unknown player state {state!r}")


@dataclass(frozen=True)
class PlaylistLeaf:
    id: str
    name: str = ""
    ro: str = "rw"
    uri: str = ""
    duration: float = 0
    raw: dict = field(default_factory=dict, repr=False, compare=False)
    type: str = "leaf"

    @property
    def read_only(self) -> bool:
        return self.ro == "ro"


@dataclass(frozen=True)
class PlaylistNode:
    id: str
    name: str = ""
    ro: str = "rw"
    children: tuple = ()
    raw: dict = field(default_factory=dict, repr=False, compare=False)
    type: str = "node"

    @property
    def read_only(self) -> bool:
        return self.ro == "ro"

    def leaves(self):
        """Yield every leaf below this node, depth first, in playlist order."""
        for child in self.children:
            if isinstance(child, PlaylistNode):
                yield from child.leaves()
            else:
                yield child

    def find(self, entry_id) -> "PlaylistNode | PlaylistLeaf | None":
        entry_id = str(entry_id)
        if self.id == entry_id:
            return self
        for child in self.children:
            if isinstance(child, PlaylistNode):
                found = child.find(entry_id)
                if found is not None:
                    return found
            elif child.id == entry_id:
                return child
        return None


Playlist = PlaylistNode | PlaylistLeaf


def parse_playlist(data: dict) -> Playlist:
    """Build the playlist tree rooted at ``data``."""
    if not isinstance(data, dict):
        raise DecodeError(f"Playlist entry must be an object, got {type(data).__name__}")
    entry_type = data.get("type")
    if entry_type == "node" or (entry_type is None and "children" in data):
        return PlaylistNode(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            ro=data.get("ro", "rw"),
            children=tuple(parse_playlist(child) for child in data.get("children") or ()),
            raw=data,
        )
    return PlaylistLeaf(
        id=str(data.get("id", "")),
        name=data.get("name", ""),
        ro=data.get("ro", "rw"),
        uri=data.get("uri", ""),
        duration=_num(data.get("duration")),
        raw=data,
    )


@dataclass(frozen=True)
class BrowseElement:
    type: str
    path: str
    name: str = ""
    uri: str = ""
    size: int = 0
    uid: int = 0
    gid: int = 0
    mode: int = 0
    creation_time: int = 0
    modification_time: int = 0

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


@dataclass(frozen=True)
class Browse:
    elements: tuple = ()
    raw: dict = field(default_factory=dict, repr=False, compare=False)


def parse_browse(data: dict) -> Browse:
    # VLC 2/3 call the list "element"; accept both spellings
    items = data.get("elements", data.get("element")) or []
    elements = []
    for item in items:
        if not isinstance(item, dict):
            raise DecodeError("Browse element must be an object")
        elements.append(BrowseElement(
            type=item.get("type", "file"),
            path=item.get("path", ""),
            name=item.get("name", ""),
            uri=item.get("uri", ""),
            size=int(_num(item.get("size"))),
            uid=int(_num(item.get("uid"))),
            gid=int(_num(item.get("gid"))),
            mode=int(_num(item.get("mode"))),
            creation_time=int(_num(item.get("creation_time"))),
            modification_time=int(_num(item.get("modification_time"))),
        ))
    return Browse(elements=tuple(elements), raw=data)
