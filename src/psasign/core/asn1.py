# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false
"""ASN.1/DER re-encoding of raw elliptic-curve signatures.

Signers return ECDSA signatures as the fixed-width concatenation R||S.
Most consumers (X.509, CMS, OpenSSL) expect the DER structure instead::

    ECDSA-Sig-Value ::= SEQUENCE { r INTEGER, s INTEGER }
"""

from __future__ import annotations

__all__ = ["decode_ecc_signature", "encode_ecc_signature", "reencode_signature"]

import logging
from typing import TYPE_CHECKING

from asn1crypto.algos import DSASignature

from ..errors import InternalEncodingError
from .algorithms import AsymmetricSignature

if TYPE_CHECKING:
    from .algorithms import Algorithm

_logger = logging.getLogger(__name__)


def encode_ecc_signature(raw: bytes) -> bytes:
    """Encode a raw R||S signature as a DER SEQUENCE of two INTEGERs.

    The input is split at its midpoint; each half is read as a big-endian
    unsigned integer. DER integer rules add a 0x00 prefix where the high
    bit is set and drop redundant leading zeros.

    Raises:
        InternalEncodingError: If the input is empty or has odd length,
            or the encoder fails.
    """
    if not raw or len(raw) % 2:
        _logger.error("Cannot split %d-byte signature into R and S", len(raw))
        raise InternalEncodingError(
            f"Raw ECC signature must have a non-zero even length, got {len(raw)} bytes"
        )

    try:
        der = DSASignature.from_p1363(raw).dump()
    except (ValueError, TypeError) as exc:
        _logger.error("ASN.1 encoding of ECC signature failed: %s", exc)
        raise InternalEncodingError(f"ASN.1 encoding of ECC signature failed: {exc}") from exc

    _logger.debug("Encoded %d-byte R||S signature as %d-byte DER", len(raw), len(der))
    return der


def decode_ecc_signature(der: bytes, component_size: int | None = None) -> bytes:
    """Decode a DER ECDSA signature back to R||S.

    Args:
        der: DER-encoded SEQUENCE { r INTEGER, s INTEGER }.
        component_size: Width in bytes of each of R and S (half the raw
            signature length, e.g. 32 for P-256). When omitted, both are
            padded to the width of the larger value.

    Raises:
        InternalEncodingError: If the DER is malformed, an integer is
            negative, or a value does not fit in ``component_size``.
    """
    try:
        sig = DSASignature.load(der, strict=True)
        r = sig["r"].native
        s = sig["s"].native
    except (ValueError, TypeError, KeyError) as exc:
        raise InternalEncodingError(f"Malformed DER ECC signature: {exc}") from exc

    if not isinstance(r, int) or not isinstance(s, int) or r < 0 or s < 0:
        raise InternalEncodingError("DER ECC signature components must be non-negative integers")

    if component_size is None:
        component_size = max(1, (max(r, s).bit_length() + 7) // 8)

    try:
        return r.to_bytes(component_size, "big") + s.to_bytes(component_size, "big")
    except OverflowError as exc:
        raise InternalEncodingError(
            f"ECC signature component does not fit in {component_size} bytes"
        ) from exc


def reencode_signature(raw: bytes, algorithm: Algorithm, want_asn1: bool) -> bytes:
    """
    Apply the requested output encoding to a signer's raw signature.

    Only elliptic-curve schemes are re-encoded; RSA signatures are a single
    integer with no R/S split and are returned unchanged, as is everything
    when ``want_asn1`` is False.
    """
    if not want_asn1 or not isinstance(algorithm, AsymmetricSignature):
        return raw
    if not algorithm.is_ecc_alg():
        return raw
    return encode_ecc_signature(raw)
