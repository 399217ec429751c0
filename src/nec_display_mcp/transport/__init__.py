"""Transport layer: TCP connection to the display."""

from .tcp_connection import TCPConnection
