"""TCP connection to a display's LAN control port.

One connection carries a strictly ordered sequence of request/reply pairs.
Receive operations are bounded by a fixed timeout; writes and the connect
handshake use the operating system defaults.
"""

from __future__ import annotations

import logging
import socket
import struct
import sys

from ..errors import DisplayConnectionError, DisplayIOError, ErrorKind
from ..protocol.parser import hex_dump

logger = logging.getLogger(__name__)

DEFAULT_HOST = "10.0.0.240"
DEFAULT_PORT = 7142
READ_TIMEOUT = 2.0  # seconds the display has to answer
MAX_REPLY_LENGTH = 64


class TCPConnection:
    """Manages the TCP connection to one display.

    Usage::

        with TCPConnection("10.0.0.240") as conn:
            reply = conn.send_and_receive(frame_bytes)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = READ_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._socket: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._socket is not None

    @property
    def address(self) -> str:
        return f"{self._host}:{self._port}"

    def __enter__(self) -> TCPConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """Resolve the address and connect.

        Raises:
            DisplayConnectionError: If resolution, socket creation or the
                connect handshake fails.
        """
        if self._socket is not None:
            return

        try:
            infos = socket.getaddrinfo(
                self._host, self._port, type=socket.SOCK_STREAM
            )
        except (socket.gaierror, UnicodeError) as e:
            raise DisplayConnectionError(
                ErrorKind.ADDRESS_RESOLUTION,
                f"cannot get address info for {self.address}: {e}",
            ) from e
        family, _, _, _, sockaddr = infos[0]

        try:
            sock = socket.socket(family, socket.SOCK_STREAM)
        except OSError as e:
            raise DisplayConnectionError(
                ErrorKind.SOCKET_CREATE, f"cannot create socket: {e}"
            ) from e

        try:
            # Only reads are bounded; the connect keeps the OS default.
            sock.setsockopt(
                socket.SOL_SOCKET,
                socket.SO_RCVTIMEO,
                _timeval(self._timeout),
            )
            sock.connect(sockaddr)
        except OSError as e:
            sock.close()
            raise DisplayConnectionError(
                ErrorKind.CONNECT, f"cannot connect to monitor at {self.address}: {e}"
            ) from e

        self._socket = sock
        logger.info("Connected to %s", self.address)

    def close(self) -> None:
        """Close the connection. Does nothing if already closed."""
        if self._socket is None:
            return

        try:
            self._socket.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._socket = None
            logger.info("Disconnected from %s", self.address)

    def write(self, data: bytes) -> None:
        """Write a whole frame to the display.

        Raises:
            DisplayIOError: If not connected or the write fails.
        """
        sock = self._require_socket(ErrorKind.WRITE)
        logger.debug("[%s] write %s", self.address, hex_dump(data))
        try:
            sock.sendall(data)
        except OSError as e:
            raise DisplayIOError(
                ErrorKind.WRITE, f"cannot write to socket: {e}"
            ) from e

    def read(self, max_bytes: int = MAX_REPLY_LENGTH) -> bytes:
        """Read one chunk of at most ``max_bytes``, waiting up to the timeout.

        The result of a single receive is returned as is, so a reply split
        across segments comes back truncated.

        Raises:
            DisplayIOError: On timeout or a socket error.
        """
        sock = self._require_socket(ErrorKind.READ)
        try:
            data = sock.recv(max_bytes)
        except OSError as e:
            # BlockingIOError and socket.timeout are both OSError
            raise DisplayIOError(
                ErrorKind.READ, f"cannot read from socket: {e}"
            ) from e
        logger.debug("[%s] read %s", self.address, hex_dump(data))
        return data

    def send_and_receive(self, data: bytes) -> bytes:
        """Write a frame and read the reply."""
        self.write(data)
        return self.read()

    def _require_socket(self, kind: ErrorKind) -> socket.socket:
        if self._socket is None:
            raise DisplayIOError(kind, f"not connected to {self.address}")
        return self._socket


def _timeval(seconds: float) -> bytes:
    """Pack seconds into the ``SO_RCVTIMEO`` option value.

    Winsock takes a DWORD of milliseconds; POSIX systems take a
    ``struct timeval``.
    """
    if sys.platform == "win32":
        return struct.pack("L", int(seconds * 1000))
    whole = int(seconds)
    micro = int((seconds - whole) * 1_000_000)
    return struct.pack("ll", whole, micro)
