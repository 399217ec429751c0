"""MCP server entry point for NEC LAN-controlled displays.

Exposes tools and a resource via the Model Context Protocol using the
official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import set_backlight as send_backlight
from .client import set_power as send_power
from .errors import DisplayError
from .models.settings import PowerState
from .protocol.commands import BACKLIGHT_MAX, BACKLIGHT_MIN, COMMANDS
from .protocol.parser import hex_dump, parse_reply
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, TCPConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "nec-display",
    instructions="Control power and backlight of an NEC display over LAN",
)

# Global connection state
_connection: TCPConnection | None = None


def _get_connection() -> TCPConnection:
    """Get the active connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to a display. Use the 'connect' tool first."
        )
    return _connection


def _drop_connection(conn: TCPConnection) -> None:
    """Close a connection whose reply can no longer be trusted.

    A late reply would otherwise be read as the answer to the next command.
    """
    global _connection
    conn.close()
    if _connection is conn:
        _connection = None


def _reply_result(reply: bytes) -> dict[str, Any]:
    result: dict[str, Any] = {"reply_hex": hex_dump(reply)}
    parsed = parse_reply(reply)
    if parsed is not None:
        result["reply"] = parsed.to_dict()
    return result


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> dict[str, Any]:
    """Open a TCP connection to the display's LAN control port.

    Args:
        host: Display IP address or hostname (default 10.0.0.240).
        port: Control port (default 7142).
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "address": _connection.address,
        }

    conn = TCPConnection(host, port)
    try:
        conn.open()
    except DisplayError as e:
        return {"connected": False, "error": e.detail, "kind": e.kind.value}

    _connection = conn
    return {"connected": True, "address": conn.address}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the display."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


@mcp.tool()
def get_connection_status() -> dict[str, Any]:
    """Report whether a display connection is open."""
    if _connection is None or not _connection.connected:
        return {"connected": False}
    return {"connected": True, "address": _connection.address}


# ─── DISPLAY TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def set_power(state: str) -> dict[str, Any]:
    """Switch the display on or off.

    Args:
        state: "on" or "off".
    """
    try:
        power = PowerState(state.lower())
    except ValueError:
        return {"error": "State must be 'on' or 'off'"}

    conn = _get_connection()
    try:
        reply = send_power(conn, power)
    except DisplayError as e:
        _drop_connection(conn)
        return {"error": e.detail, "kind": e.kind.value}

    result = {"power": power.value}
    result.update(_reply_result(reply))
    return result


@mcp.tool()
def set_backlight(level: int) -> dict[str, Any]:
    """Set the backlight level.

    Args:
        level: Backlight percentage (0-100).
    """
    if not BACKLIGHT_MIN <= level <= BACKLIGHT_MAX:
        return {"error": f"Backlight must be {BACKLIGHT_MIN}-{BACKLIGHT_MAX}"}

    conn = _get_connection()
    try:
        reply = send_backlight(conn, level)
    except DisplayError as e:
        _drop_connection(conn)
        return {"error": e.detail, "kind": e.kind.value}

    result: dict[str, Any] = {"backlight": level}
    result.update(_reply_result(reply))
    return result


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("nec://commands")
def resource_commands() -> str:
    """Supported commands with their message types and opcodes."""
    return json.dumps({
        command_id.value: spec.to_dict() for command_id, spec in COMMANDS.items()
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
