"""
Command-line interface for psasign.

Argument parsing, logging setup and dispatch.
Signing logic lives in ``sign``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ...config import get_service_config
from ...constants import DEFAULT_TIMEOUT_HTTP, __version__
from .setup import cmd_logout, cmd_setup
from .sign import cmd_sign

_LOG_FORMAT = "[%(levelname)s] %(message)s"


def _configure_logging(verbosity: int) -> None:
    """Route log records to stderr; stdout carries only the signature."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr, force=True)


def _cmd_reset() -> None:
    """Clear all configuration: saved token and key service settings."""
    from ...config import reset_all

    reset_all()
    print("All configuration cleared.")
    print("Run 'psasign setup' to reconfigure.")


def _timeout_arg(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    url, _ = get_service_config()
    url_hint = f" (current: {url})" if url else " (run `psasign setup` first)"

    parser = argparse.ArgumentParser(
        prog="psasign",
        description="Sign data with keys held by a remote key-management service.",
        epilog=(
            "Environment variables:\n"
            f"  PSASIGN_URL      Key service URL{url_hint}\n"
            f"  PSASIGN_TIMEOUT  Timeout in seconds (default: {DEFAULT_TIMEOUT_HTTP})\n"
            "  PSASIGN_TOKEN    API token (overrides saved token)\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"psasign {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v: info, -vv: debug)",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # sign
    p_sign = sub.add_parser(
        "sign",
        help="Sign data",
        description="Sign data. Uses the algorithm set in the key's policy.",
    )
    p_sign.add_argument("-k", "--key-name", required=True, help="Name of the signing key")
    p_sign.add_argument("input_data", help="String of UTF-8 text")
    p_sign.add_argument(
        "--encode-asn1",
        action="store_true",
        default=False,
        help="Encode the signature in ASN.1 format (for ECC signatures only)",
    )

    # setup
    p_setup = sub.add_parser("setup", help="Configure key service URL and API token")
    p_setup.add_argument("--url", required=True, help="Key service base URL")
    p_setup.add_argument(
        "--timeout", type=_timeout_arg, default=None, help="Request timeout in seconds"
    )
    p_setup.add_argument(
        "--no-token",
        action="store_true",
        default=False,
        help="Do not prompt for an API token",
    )

    # logout
    sub.add_parser("logout", help="Clear the saved API token (keep service config)")

    # reset
    sub.add_parser("reset", help="Clear all configuration (service URL, timeout, token)")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if args.command == "sign":
        cmd_sign(args)
    elif args.command == "setup":
        cmd_setup(args)
    elif args.command == "logout":
        cmd_logout()
    elif args.command == "reset":
        _cmd_reset()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
