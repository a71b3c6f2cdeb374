"""Sign command handler for psasign CLI."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from ...api import build_key_service
from ...core.signing import sign_message_b64
from ...errors import InternalEncodingError, PsaSignError

if TYPE_CHECKING:
    import argparse

_logger = logging.getLogger(__name__)


def cmd_sign(args: argparse.Namespace) -> None:
    """Handle the 'sign' subcommand.

    Prints exactly one base64 line on success. On failure nothing is
    written to stdout and the process exits with the error's exit code.
    """
    try:
        service = build_key_service()
        signature = sign_message_b64(
            args.key_name,
            args.input_data.encode("utf-8"),
            service,
            encode_asn1=args.encode_asn1,
        )
    except InternalEncodingError as e:
        print(f"Internal error: {e}", file=sys.stderr)
        print("  This is a bug; please report it.", file=sys.stderr)
        sys.exit(e.exit_code)
    except PsaSignError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)

    print(signature)
