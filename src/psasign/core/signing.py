"""
Core sign operation: hash with the key's policy hash, sign remotely,
optionally re-encode.

All functions accept a KeyService, making them transport-agnostic.
Use network.HttpKeyService(url) to create a service instance.
"""

from __future__ import annotations

__all__ = ["encode_for_display", "sign_message", "sign_message_b64"]

import base64
import logging
from typing import TYPE_CHECKING

from ..errors import NotSupportedError, WrongKeyAlgorithmError
from .algorithms import AlgorithmFamily, AsymmetricSignature
from .asn1 import reencode_signature
from .hashing import compute_digest

if TYPE_CHECKING:
    from ..network.protocol import KeyService
    from .algorithms import Algorithm

_logger = logging.getLogger(__name__)


def _require_signature_algorithm(algorithm: Algorithm) -> AsymmetricSignature:
    """Reject any key policy that is not an asymmetric signature algorithm."""
    if algorithm.family is not AlgorithmFamily.ASYMMETRIC_SIGNATURE or not isinstance(
        algorithm, AsymmetricSignature
    ):
        _logger.error("Key's algorithm is %s which can not be used for signing.", algorithm)
        raise WrongKeyAlgorithmError(
            f"Key's algorithm is {algorithm} which can not be used for signing."
        )
    return algorithm


def sign_message(
    key_name: str,
    message: bytes,
    service: KeyService,
    *,
    encode_asn1: bool = False,
) -> bytes:
    """
    Sign a message with a key held by the key service.

    Steps:
    1. Resolve the key's permitted algorithm
    2. Require an asymmetric signature algorithm with a specific hash
    3. Hash the message locally
    4. Ask the service to sign the hash
    5. Re-encode ECC signatures as DER if requested

    Args:
        key_name: Name of a provisioned key.
        message: Message bytes to sign.
        service: KeyService implementation.
        encode_asn1: Encode ECC signatures as DER SEQUENCE { r, s }.
            Ignored for non-ECC schemes.

    Returns:
        Signature bytes.

    Raises:
        WrongKeyAlgorithmError: The key's policy is not a signature algorithm.
        NotSupportedError: The policy names no specific supported hash.
        InternalEncodingError: The signature could not be re-encoded.
        ServiceError: Propagated unchanged from the service.
    """
    algorithm = _require_signature_algorithm(
        service.key_attributes(key_name).permitted_algorithm
    )

    sign_hash = algorithm.hash()
    if sign_hash is None or sign_hash.is_any:
        _logger.error("Asymmetric signing algorithm (%s) is not supported", algorithm)
        raise NotSupportedError(f"Asymmetric signing algorithm ({algorithm}) is not supported")

    _logger.info("Hashing data...")
    digest = compute_digest(message, sign_hash.specific)

    _logger.info("Signing data...")
    signature = service.sign_hash(key_name, digest, algorithm)
    _logger.debug("Received %d-byte signature for key %r", len(signature), key_name)

    return reencode_signature(signature, algorithm, encode_asn1)


def encode_for_display(signature: bytes) -> str:
    """Base64 (standard alphabet, padded) text form of a signature."""
    return base64.b64encode(signature).decode("ascii")


def sign_message_b64(
    key_name: str,
    message: bytes,
    service: KeyService,
    *,
    encode_asn1: bool = False,
) -> str:
    """Sign a message and return the signature as base64 text."""
    return encode_for_display(sign_message(key_name, message, service, encode_asn1=encode_asn1))
