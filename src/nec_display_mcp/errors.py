"""Exceptions raised while talking to a display.

Every failure in the connection and I/O path is reported as a
:class:`DisplayError` carrying an :class:`ErrorKind` and a human-readable
detail. The two concrete subclasses also derive from the matching builtin
(``ConnectionError`` / ``IOError``) so either category can be caught.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    ADDRESS_RESOLUTION = "address_resolution"
    SOCKET_CREATE = "socket_create"
    CONNECT = "connect"
    WRITE = "write"
    READ = "read"


class DisplayError(Exception):
    """Base class for all display communication failures."""

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.name}, detail={self.detail!r})"


class DisplayConnectionError(DisplayError, ConnectionError):
    """Address resolution, socket creation or connect failed."""


class DisplayIOError(DisplayError, IOError):
    """Writing a frame or reading a reply failed."""
