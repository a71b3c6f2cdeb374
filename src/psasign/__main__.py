"""
Entry point for `python -m psasign`.

Usage:
    python -m psasign sign -k my-key "text to sign"
    python -m psasign sign -k my-ec-key --encode-asn1 "text to sign"
"""

from .ui.cli import main

main()
