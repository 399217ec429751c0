"""Command dispatch over an open display connection.

Each call performs exactly one round trip: one frame written, one reply
read. Replies are returned unmodified; see :mod:`.protocol.parser` for
opt-in decoding.
"""

from __future__ import annotations

import logging

from .models.settings import DisplaySettings, PowerState
from .protocol.commands import (
    BACKLIGHT_MAX,
    BACKLIGHT_MIN,
    CommandId,
    build_command,
)
from .transport.tcp_connection import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    READ_TIMEOUT,
    TCPConnection,
)

logger = logging.getLogger(__name__)


def execute(session: TCPConnection, command_id: CommandId, value: int) -> bytes:
    """Send one catalog command and return the raw reply.

    Args:
        session: An open connection (anything with ``write``/``read``).
        command_id: Command to send.
        value: Numeric argument, 0-65535.
    """
    frame = build_command(command_id, value)
    logger.debug("Sending %s=%d", command_id.value, value)
    session.write(frame)
    return session.read()


def set_power(session: TCPConnection, state: PowerState) -> bytes:
    """Switch the display on or off."""
    return execute(session, CommandId.POWER, state.command_value)


def set_backlight(session: TCPConnection, level: int) -> bytes:
    """Set the backlight percentage (0-100)."""
    if not BACKLIGHT_MIN <= level <= BACKLIGHT_MAX:
        raise ValueError(
            f"Backlight must be {BACKLIGHT_MIN}-{BACKLIGHT_MAX}, got {level}"
        )
    return execute(session, CommandId.BACKLIGHT, level)


def apply_to_session(session: TCPConnection, settings: DisplaySettings) -> list[bytes]:
    """Apply power, then backlight, over an open connection.

    Returns:
        The raw replies in the order the commands were sent. The first
        failure propagates and the remaining commands are not sent.
    """
    replies: list[bytes] = []
    if settings.power is not None:
        replies.append(set_power(session, settings.power))
    if settings.backlight is not None:
        replies.append(set_backlight(session, settings.backlight))
    return replies


def apply_settings(
    settings: DisplaySettings,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    timeout: float = READ_TIMEOUT,
) -> list[bytes]:
    """Connect once, apply ``settings``, and disconnect.

    The connection is closed on every exit path, including errors.
    """
    with TCPConnection(host, port, timeout) as conn:
        return apply_to_session(conn, settings)
