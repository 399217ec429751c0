"""Command-line entry point: set power and backlight on a display."""

from __future__ import annotations

import argparse
import logging
import sys

from .client import apply_to_session
from .errors import DisplayError
from .models.settings import DisplaySettings, PowerState
from .protocol.commands import BACKLIGHT_MAX, BACKLIGHT_MIN
from .protocol.parser import hex_dump
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, TCPConnection


def _backlight(value: str) -> int:
    try:
        level = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if not BACKLIGHT_MIN <= level <= BACKLIGHT_MAX:
        raise argparse.ArgumentTypeError(
            f"{level} not in range [{BACKLIGHT_MIN} - {BACKLIGHT_MAX}]"
        )
    return level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nec-control",
        description="NEC CONTROL: set power and backlight of a display over LAN.",
    )
    parser.add_argument(
        "address",
        nargs="?",
        default=None,
        help="Address to connect to (same as --address).",
    )
    parser.add_argument(
        "-a", "--address",
        dest="address_option",
        default=None,
        help=f"Address to connect to (default: {DEFAULT_HOST}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to connect to (default: {DEFAULT_PORT}).",
    )
    parser.add_argument(
        "-p", "--power",
        choices=[state.value for state in PowerState],
        help="Set power to on or off.",
    )
    parser.add_argument(
        "-b", "--backlight",
        type=_backlight,
        help="Set backlight to a specific value (0-100).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Speak more to me.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    host = args.address_option or args.address or DEFAULT_HOST
    settings = DisplaySettings.from_strings(args.power, args.backlight)

    if args.verbose:
        print(f"Connecting to IP {host}: ", end="", flush=True)

    try:
        with TCPConnection(host, args.port) as conn:
            if args.verbose:
                print("connected.")
            for reply in apply_to_session(conn, settings):
                print(hex_dump(reply))
    except DisplayError as e:
        print(f'Not able to set the parameter: "{e.detail}"', file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
