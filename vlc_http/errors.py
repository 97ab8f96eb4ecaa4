"""Exceptions raised by the VLC HTTP client."""


class VLCError(Exception):
    """Base class for every error raised by vlc_http."""


class TransportError(VLCError):
    """Connection failure, timeout, or a non-2xx HTTP answer."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class DecodeError(VLCError):
    """VLC answered, but the body was not a JSON object."""
