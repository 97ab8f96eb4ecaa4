"""
Playback actions.

Each action is one STATUS-scope command: a wire command name plus a function
that turns the Python arguments into query parameters.  Actions return the
Status VLC answers with; they never touch the cache or emit events, the next
scheduled refresh picks up whatever they changed.
"""

import logging

from .dispatcher import CommandScope
from .models import Browse, Status, parse_browse, parse_status

logger = logging.getLogger(__name__)


class Action:
    """Descriptor binding a wire command to an async client method."""

    def __init__(self, command: str, params=None, doc: str = ""):
        self.command = command
        self.params = params
        self.__doc__ = doc
        self.name = command

    def __set_name__(self, owner, name):
        self.name = name

    def build(self, *args, **kwargs) -> dict | None:
        if self.params is None:
            if args or kwargs:
                raise TypeError(f"{self.name}() takes no arguments")
            return None
        return self.params(*args, **kwargs)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        async def action(*args, **kwargs) -> Status:
            params = self.build(*args, **kwargs)
            logger.debug("Action %s -> %s %s", self.name, self.command, params or "")
            data = await instance.dispatcher.dispatch(CommandScope.STATUS, self.command, params)
            return parse_status(data)

        action.__name__ = self.name
        action.__doc__ = self.__doc__
        return action


class ActionsMixin:
    """Playback action surface.  Needs ``self.dispatcher``."""

    add_to_queue_and_play = Action(
        "in_play", lambda uri, option=None: {"input": uri, "option": option},
        "Add `uri` to the playlist and start playback. `option` is 'noaudio' or 'novideo'.")
    add_to_queue = Action(
        "in_enqueue", lambda uri: {"input": uri},
        "Add `uri` to the playlist.")
    add_subtitle = Action(
        "addsubtitle", lambda uri: {"input": uri},
        "Add a subtitle file to the item currently playing.")
    play = Action(
        "pl_play", lambda id=None: {"id": id},
        "Play playlist item `id`; without `id`, the last active item.")
    pause = Action(
        "pl_pause", lambda id=None: {"id": id},
        "Toggle pause. When stopped, play item `id` (or the current/first item).")
    # VLC has pl_stop, but stop has always been sent as pl_forcepause
    stop = Action("pl_forcepause", doc="Stop playback.")
    resume = Action("pl_forceresume", doc="Resume playback if paused, else do nothing.")
    force_pause = Action("pl_forcepause", doc="Pause playback, do nothing if already paused.")
    playlist_next = Action("pl_next", doc="Jump to the next playlist item.")
    playlist_previous = Action("pl_previous", doc="Jump to the previous playlist item.")
    playlist_delete = Action(
        "pl_delete", lambda id: {"id": id},
        "Delete item `id` from the playlist.")
    playlist_empty = Action("pl_empty", doc="Empty the playlist.")
    # the wire swaps the names: id carries the mode, val the order
    sort_playlist = Action(
        "pl_sort", lambda order, mode: {"id": mode, "val": order},
        "Sort the playlist by `mode` (one of the `models.SORT_*` modes); "
        "`order` is `models.SORT_NORMAL` or `models.SORT_REVERSE`.")
    set_audio_delay = Action("audiodelay", lambda delay: {"val": delay}, "Set audio delay.")
    set_subtitle_delay = Action("subdelay", lambda delay: {"val": delay}, "Set subtitle delay.")
    set_playback_rate = Action("rate", lambda rate: {"val": rate}, "Set playback rate.")
    set_aspect_ratio = Action(
        "aspectratio", lambda ratio: {"val": ratio},
        "Set aspect ratio, e.g. one of `models.ASPECT_RATIOS`.")
    set_volume = Action(
        "volume", lambda volume: {"val": volume},
        "Set volume to `volume` (absolute, or relative like '+10' / '-10').")
    set_preamp = Action("preamp", lambda value: {"val": value}, "Set the equalizer preamp.")
    set_equalizer = Action(
        "equalizer", lambda band, gain: {"band": band, "val": gain},
        "Set the gain of one equalizer band.")
    set_equalizer_preset = Action(
        "equalizer", lambda id: {"val": id},
        "Select equalizer preset `id`.")
    toggle_random = Action("pl_random", doc="Toggle random playback.")
    toggle_loop = Action("pl_loop", doc="Toggle loop.")
    toggle_repeat = Action("pl_repeat", doc="Toggle repeat.")
    toggle_fullscreen = Action("fullscreen", doc="Toggle fullscreen.")
    seek = Action("seek", lambda time: {"val": time}, "Seek to `time`.")
    seek_to_chapter = Action("chapter", lambda chapter: {"val": chapter}, "Seek to `chapter`.")

    async def browse(self, path: str) -> Browse:
        """List the directory ``path`` on the VLC host.  Not cached."""
        data = await self.dispatcher.dispatch(CommandScope.BROWSE, None, {"dir": path})
        return parse_browse(data)


ACTIONS = {
    name: value for name, value in vars(ActionsMixin).items()
    if isinstance(value, Action)
}
