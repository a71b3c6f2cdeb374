"""Message digest selection for sign-hash requests."""

from __future__ import annotations

__all__ = ["SUPPORTED_HASHES", "compute_digest", "digest_size"]

import hashlib
import logging
from typing import TYPE_CHECKING

from ..constants import (
    SHA224_DIGEST_SIZE,
    SHA256_DIGEST_SIZE,
    SHA384_DIGEST_SIZE,
    SHA512_DIGEST_SIZE,
)
from ..errors import NotSupportedError
from .algorithms import HashAlgorithm

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

_HASH_CONSTRUCTORS: dict[HashAlgorithm, Callable[[bytes], hashlib._Hash]] = {
    HashAlgorithm.SHA_224: hashlib.sha224,
    HashAlgorithm.SHA_256: hashlib.sha256,
    HashAlgorithm.SHA_384: hashlib.sha384,
    HashAlgorithm.SHA_512: hashlib.sha512,
}

_DIGEST_SIZES: dict[HashAlgorithm, int] = {
    HashAlgorithm.SHA_224: SHA224_DIGEST_SIZE,
    HashAlgorithm.SHA_256: SHA256_DIGEST_SIZE,
    HashAlgorithm.SHA_384: SHA384_DIGEST_SIZE,
    HashAlgorithm.SHA_512: SHA512_DIGEST_SIZE,
}

SUPPORTED_HASHES = frozenset(_HASH_CONSTRUCTORS)


def _require_supported(hash_alg: HashAlgorithm | None) -> HashAlgorithm:
    if hash_alg is None or hash_alg not in _HASH_CONSTRUCTORS:
        shown = "unspecified" if hash_alg is None else hash_alg.value
        _logger.error("Hashing algorithm (%s) not supported", shown)
        raise NotSupportedError(f"Hashing algorithm ({shown}) not supported")
    return hash_alg


def digest_size(hash_alg: HashAlgorithm | None) -> int:
    """Return the digest length in bytes for a supported hash.

    Raises:
        NotSupportedError: If the hash is not one of SHA-224/256/384/512.
    """
    return _DIGEST_SIZES[_require_supported(hash_alg)]


def compute_digest(message: bytes, hash_alg: HashAlgorithm | None) -> bytes:
    """
    Hash a message with the algorithm required by a key's policy.

    Args:
        message: Message bytes (hashed as opaque bytes, in one pass).
        hash_alg: Required hash; None means the policy names no
            specific hash.

    Returns:
        The digest (28, 32, 48 or 64 bytes).

    Raises:
        NotSupportedError: If the hash is absent or outside the
            supported set. No digest is computed in that case.
    """
    supported = _require_supported(hash_alg)
    digest = _HASH_CONSTRUCTORS[supported](message).digest()
    _logger.debug("Computed %s digest: %d bytes", supported.value, len(digest))
    return digest
