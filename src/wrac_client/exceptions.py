"""Exceptions raised by the wRAC client."""


class WracError(Exception):
    """Base class for wRAC client errors."""


class NotConnectedError(WracError, ConnectionError):
    """Raised when a frame is sent while the transport is not open."""

    def __init__(self, message: str = "Transport is not open"):
        super().__init__(message)
