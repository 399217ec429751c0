"""Reply inspection helpers.

Replies are handed back to callers as raw bytes; nothing in the command
path validates them. :func:`parse_reply` is an opt-in decoder for callers
that want to look inside a reply without trusting it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..utils.bcc import bcc
from .framing import CR, ETX, SOH, STX, MessageType

HEADER_LENGTH = 7  # SOH, reserved, dest, source, type, 2 length chars


def hex_dump(data: bytes) -> str:
    """Format bytes as space separated lowercase hex pairs."""
    return data.hex(" ")


@dataclass
class Reply:
    """A decoded reply frame."""

    message_type: MessageType | None
    destination: int
    source: int
    body: bytes  # bytes between STX and ETX
    bcc_ok: bool
    raw: bytes

    def to_dict(self) -> dict:
        return {
            "message_type": self.message_type.name if self.message_type else None,
            "destination": chr(self.destination),
            "source": chr(self.source),
            "body": self.body.decode("ascii", errors="replace"),
            "bcc_ok": self.bcc_ok,
        }

    def __repr__(self) -> str:
        return (
            f"Reply(type={self.message_type.name if self.message_type else '?'}, "
            f"body={self.body!r}, bcc_ok={self.bcc_ok})"
        )


def parse_reply(data: bytes) -> Reply | None:
    """Decode a reply frame.

    Returns:
        A ``Reply`` if ``data`` has the frame layout (SOH header, STX..ETX
        body, BCC, CR), or ``None`` otherwise. A checksum mismatch does not
        reject the frame; it is reported through ``bcc_ok``.
    """
    if len(data) < HEADER_LENGTH + 4:
        return None
    if data[0] != SOH or data[HEADER_LENGTH] != STX:
        return None

    etx_index = data.find(bytes([ETX]), HEADER_LENGTH + 1)
    if etx_index < 0 or etx_index + 2 >= len(data):
        return None
    if data[etx_index + 2] != CR:
        return None

    try:
        message_type = MessageType(data[4:5])
    except ValueError:
        message_type = None

    return Reply(
        message_type=message_type,
        destination=data[2],
        source=data[3],
        body=data[HEADER_LENGTH + 1 : etx_index],
        bcc_ok=bcc(data[1 : etx_index + 1]) == data[etx_index + 1],
        raw=data,
    )
