"""
Application-wide constants for psasign.

Timeouts, size limits, environment variable names and other magic numbers
are centralized here for easy maintenance.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("psasign")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "BYTES_PER_MB",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_BACKOFF",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT_HTTP",
    "ENV_TIMEOUT",
    "ENV_TOKEN",
    "ENV_URL",
    "LOOPBACK_HOSTS",
    "MAX_RESPONSE_SIZE",
    "MAX_TIMEOUT",
    "MIN_TIMEOUT",
    "RECV_BUFFER_SIZE",
    "SHA224_DIGEST_SIZE",
    "SHA256_DIGEST_SIZE",
    "SHA384_DIGEST_SIZE",
    "SHA512_DIGEST_SIZE",
    "__version__",
]

# ── Timeout values (seconds) ──────────────────────────────────────────

# Key service request timeout (attribute lookup and sign-hash)
DEFAULT_TIMEOUT_HTTP = 60


# ── Size units ────────────────────────────────────────────────────────

BYTES_PER_MB = 1024 * 1024


# ── Size limits (bytes) ───────────────────────────────────────────────

# Maximum response body accepted from the key service (4 MB)
MAX_RESPONSE_SIZE = 4 * 1024 * 1024

# Chunk size for reading HTTP response bodies
RECV_BUFFER_SIZE = 8192


# ── Retry configuration ───────────────────────────────────────────────
#
# Applies to idempotent lookups only. Sign requests are sent once.

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_RETRY_BACKOFF = 2.0


# ── Digest sizes (bytes) ──────────────────────────────────────────────

SHA224_DIGEST_SIZE = 28
SHA256_DIGEST_SIZE = 32
SHA384_DIGEST_SIZE = 48
SHA512_DIGEST_SIZE = 64


# ── Environment variable names ──────────────────────────────────────

ENV_URL = "PSASIGN_URL"
ENV_TIMEOUT = "PSASIGN_TIMEOUT"
ENV_TOKEN = "PSASIGN_TOKEN"


# ── Timeout validation ──────────────────────────────────────────────

MIN_TIMEOUT = 1
MAX_TIMEOUT = 3600


# ── Transport ───────────────────────────────────────────────────────

# Hosts allowed to use plain HTTP (local key service daemons)
LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})
