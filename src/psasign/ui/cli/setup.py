"""
Setup and logout commands for psasign CLI.

Saves the key service URL/timeout and stores an API token.
"""

from __future__ import annotations

import getpass
import sys
from typing import TYPE_CHECKING

from ...config import (
    CONFIG_FILE,
    clear_token,
    get_token_storage_info,
    save_service_config,
    save_token,
)
from ...errors import ConfigError

if TYPE_CHECKING:
    import argparse


def _prompt_token() -> str:
    """Prompt for an API token without echo. Empty input means no token."""
    try:
        return getpass.getpass("API token (leave empty for none): ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        sys.exit(1)


def cmd_setup(args: argparse.Namespace) -> None:
    """Handle the 'setup' subcommand."""
    url = args.url.strip()
    try:
        save_service_config(url, args.timeout)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)
    print(f"Key service: {url}")
    print(f"Config saved to {CONFIG_FILE}")

    if args.no_token:
        return

    token = _prompt_token()
    if not token:
        print("No token saved.")
        return

    if save_token(url, token):
        print(f"Token saved to {get_token_storage_info()}.")
    else:
        print(f"Token saved to {CONFIG_FILE} (plaintext).")


def cmd_logout() -> None:
    """Handle the 'logout' subcommand: clear the saved token, keep config."""
    clear_token()
    print("Logged out. Key service configuration preserved.")
