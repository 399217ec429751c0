"""Tests for the MCP server tools."""

from __future__ import annotations

import json
import socket
import sys
import threading
from unittest.mock import MagicMock, patch

import pytest

from nec_display_mcp.errors import DisplayConnectionError, DisplayIOError, ErrorKind
from nec_display_mcp.protocol.framing import MessageType, build_frame
from nec_display_mcp.transport.tcp_connection import TCPConnection

POWER_ON_FRAME = bytes.fromhex(
    "01 30 41 30 41 30 43 02 43 32 30 33 44 36 30 30 30 31 03 73 0D"
)
BACKLIGHT_50_FRAME = bytes.fromhex(
    "01 30 41 30 45 30 41 02 30 30 31 30 30 30 33 32 03 74 0D"
)
POWER_REPLY = build_frame(MessageType.COMMAND_REPLY, b"00C203D6", b"0001")


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("nec_display_mcp.server", None)
        import nec_display_mcp.server as server_mod

    return server_mod


def test_set_power_sends_frame_and_decodes_reply():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.read.return_value = POWER_REPLY

    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.set_power("ON")

    mock_conn.write.assert_called_once_with(POWER_ON_FRAME)
    assert result["power"] == "on"
    assert result["reply_hex"] == POWER_REPLY.hex(" ")
    assert result["reply"]["message_type"] == "COMMAND_REPLY"
    assert result["reply"]["bcc_ok"] is True


def test_set_power_invalid_state():
    server = _get_server_module()
    mock_conn = MagicMock()
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.set_power("standby")
    assert "error" in result
    mock_conn.write.assert_not_called()


def test_set_backlight_raw_reply_only():
    """Replies that are not frames are still returned as hex."""
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.read.return_value = b"\x01\x02"

    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.set_backlight(50)

    mock_conn.write.assert_called_once_with(BACKLIGHT_50_FRAME)
    assert result == {"backlight": 50, "reply_hex": "01 02"}


def test_set_backlight_out_of_range():
    server = _get_server_module()
    mock_conn = MagicMock()
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.set_backlight(150)
    assert "error" in result
    mock_conn.write.assert_not_called()


def test_set_backlight_io_error():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.read.side_effect = DisplayIOError(ErrorKind.READ, "timed out")
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.set_backlight(10)
    assert result == {"error": "timed out", "kind": "read"}


def test_connect_and_disconnect():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.connected = True
    mock_conn.address = "10.0.0.9:7142"

    with patch.object(server, "TCPConnection", return_value=mock_conn) as conn_cls:
        result = server.connect("10.0.0.9")
        assert result == {"connected": True, "address": "10.0.0.9:7142"}
        conn_cls.assert_called_once_with("10.0.0.9", 7142)
        mock_conn.open.assert_called_once()

        again = server.connect("10.0.0.9")
        assert again["message"] == "Already connected"
        assert server.get_connection_status() == {
            "connected": True,
            "address": "10.0.0.9:7142",
        }

    assert server.disconnect() == {"disconnected": True}
    mock_conn.close.assert_called_once()
    assert server.get_connection_status() == {"connected": False}


def test_connect_failure():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.open.side_effect = DisplayConnectionError(
        ErrorKind.ADDRESS_RESOLUTION, "cannot get address info"
    )
    with patch.object(server, "TCPConnection", return_value=mock_conn):
        result = server.connect("bad host")
    assert result == {
        "connected": False,
        "error": "cannot get address info",
        "kind": "address_resolution",
    }
    assert server.get_connection_status() == {"connected": False}


def test_tools_require_connection():
    server = _get_server_module()
    with pytest.raises(RuntimeError, match="connect"):
        server.set_power("on")


def test_commands_resource():
    server = _get_server_module()
    catalog = json.loads(server.resource_commands())
    assert catalog == {
        "power": {"message_type": "COMMAND", "opcode": "C203D6"},
        "backlight": {"message_type": "SET_PARAMETER", "opcode": "0010"},
    }


def test_read_error_drops_connection():
    """After a failed round trip the connection is closed and forgotten."""
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.connected = True
    mock_conn.read.side_effect = DisplayIOError(ErrorKind.READ, "timed out")
    server._connection = mock_conn

    result = server.set_power("on")

    assert result == {"error": "timed out", "kind": "read"}
    mock_conn.close.assert_called_once()
    assert server._connection is None
    assert server.get_connection_status() == {"connected": False}
    with pytest.raises(RuntimeError, match="connect"):
        server.set_backlight(50)


def test_late_reply_not_read_by_next_command():
    """A reply arriving after the timeout never answers a later command."""
    server = _get_server_module()
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(2)
    port = listener.getsockname()[1]
    late = threading.Event()

    def slow_display():
        # first connection answers too late, the second one on time
        conn, _ = listener.accept()
        with conn:
            conn.recv(1024)
            late.wait(timeout=5)
            try:
                conn.sendall(b"POWER-REPLY")
            except OSError:
                pass
        conn, _ = listener.accept()
        with conn:
            conn.recv(1024)
            conn.sendall(b"BACKLIGHT-REPLY")
        listener.close()

    thread = threading.Thread(target=slow_display, daemon=True)
    thread.start()

    server._connection = TCPConnection("127.0.0.1", port, timeout=0.2)
    server._connection.open()
    assert server.set_power("on")["kind"] == "read"
    late.set()
    assert server.get_connection_status() == {"connected": False}

    assert server.connect("127.0.0.1", port)["connected"] is True
    result = server.set_backlight(50)
    assert result["reply_hex"] == b"BACKLIGHT-REPLY".hex(" ")
    server.disconnect()
    thread.join(timeout=5)
