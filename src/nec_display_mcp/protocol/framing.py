"""Frame builder for the PD/LCD control protocol.

Frame layout::

    +-----+----------+------+--------+----------+--------+-----+--------+---------+-----+-----+----+
    | SOH | Reserved | Dest | Source | Msg type | Length | STX | Opcode | Number  | ETX | BCC | CR |
    | 01  |   '0'    | 'A'  |  '0'   |  'A'-'F' | 2 chr  | 02  | n chr  | 4 chr   | 03  | 1 B | 0D |
    +-----+----------+------+--------+----------+--------+-----+--------+---------+-----+-----+----+

- Dest: 'A' addresses monitor ID 1; Source: '0' is always the controller
- Length: byte count from STX to ETX inclusive, as two characters. The
  first is always '0'; the second is '0' + length, shifted by 7 above 9
  so that 10..15 come out as 'A'..'F'
- Number: 16-bit value as 4 lowercase hex characters
- BCC: XOR of every byte from the reserved '0' through ETX, sent raw
"""

from __future__ import annotations

from enum import Enum

from ..utils.bcc import bcc

SOH = 0x01
STX = 0x02
ETX = 0x03
CR = 0x0D

RESERVED = 0x30  # '0'
MONITOR_ID = 0x41  # 'A' == monitor 1
CONTROLLER_ID = 0x30  # '0' == controller

NUMBER_LENGTH = 4
STX_ETX_LENGTH = 2
MAX_PAYLOAD_LENGTH = 15  # only the second length character is ever used


class MessageType(Enum):
    """Header message type byte (case sensitive)."""

    COMMAND = b"A"
    COMMAND_REPLY = b"B"
    GET_PARAMETER = b"C"
    GET_PARAMETER_REPLY = b"D"
    SET_PARAMETER = b"E"
    SET_PARAMETER_REPLY = b"F"

    @property
    def byte(self) -> int:
        return self.value[0]


def encode_number(value: int) -> bytes:
    """Encode an unsigned 16-bit value as 4 lowercase hex ASCII bytes.

    >>> encode_number(50)
    b'0032'
    """
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Value must be 0-65535, got {value}")
    return f"{value:04x}".encode("ascii")


def encode_length(payload_length: int) -> bytes:
    """Encode the STX..ETX byte count as the two header length characters.

    Raises:
        ValueError: If the length needs the first length character, which
            is always sent as '0'.
    """
    if not 0 <= payload_length <= MAX_PAYLOAD_LENGTH:
        raise ValueError(
            f"Payload length must be 0-{MAX_PAYLOAD_LENGTH}, got {payload_length}"
        )
    if payload_length > 9:
        payload_length += 7  # distance between '9' and 'A'
    return bytes([RESERVED, RESERVED + payload_length])


def build_frame(
    message_type: MessageType,
    opcode: bytes,
    number: bytes,
    destination: int = MONITOR_ID,
) -> bytes:
    """Build a complete request frame.

    Args:
        message_type: Header message type.
        opcode: ASCII opcode bytes of the command or parameter.
        number: Already encoded numeric argument (see :func:`encode_number`).
        destination: Destination equipment ID byte, monitor 1 by default.

    Returns:
        The frame bytes, ready to be written to the socket.
    """
    length = len(opcode) + len(number) + STX_ETX_LENGTH
    header = bytes([SOH, RESERVED, destination, CONTROLLER_ID, message_type.byte])
    header += encode_length(length)
    body = bytes([STX]) + opcode + number + bytes([ETX])
    checked = header[1:] + body
    return header + body + bytes([bcc(checked), CR])
