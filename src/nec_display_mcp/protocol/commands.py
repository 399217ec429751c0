"""Command catalog and the frame builder for catalog commands.

Each supported command is identified by a :class:`CommandId` and maps to a
fixed message type and ASCII opcode. The catalog is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .framing import MessageType, build_frame, encode_number

POWER_ON = 1
POWER_OFF = 4

BACKLIGHT_MIN = 0
BACKLIGHT_MAX = 100


class CommandId(Enum):
    """Supported display commands."""

    POWER = "power"
    BACKLIGHT = "backlight"


@dataclass(frozen=True)
class CommandSpec:
    """Message type and opcode of a catalog entry."""

    message_type: MessageType
    opcode: bytes

    def to_dict(self) -> dict:
        return {
            "message_type": self.message_type.name,
            "opcode": self.opcode.decode("ascii"),
        }


COMMANDS: Mapping[CommandId, CommandSpec] = MappingProxyType({
    CommandId.POWER: CommandSpec(MessageType.COMMAND, b"C203D6"),
    CommandId.BACKLIGHT: CommandSpec(MessageType.SET_PARAMETER, b"0010"),
})


def lookup(command_id: CommandId) -> CommandSpec:
    """Return the catalog entry for ``command_id``."""
    return COMMANDS[command_id]


def build_command(command_id: CommandId, value: int) -> bytes:
    """Build the request frame for a catalog command and its value."""
    spec = lookup(command_id)
    return build_frame(spec.message_type, spec.opcode, encode_number(value))
