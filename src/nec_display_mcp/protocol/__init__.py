"""Protocol layer: frame building, BCC, command catalog, and reply inspection."""

from .framing import MessageType, build_frame, encode_number
from .commands import CommandId, CommandSpec, build_command, lookup
