"""Core algorithm model, hashing, signing and signature encoding."""

from __future__ import annotations

from .algorithms import (
    AlgorithmFamily,
    AsymmetricSignature,
    HashAlgorithm,
    KeyAttributes,
    OpaqueAlgorithm,
    SignatureScheme,
    SignHash,
)
from .asn1 import decode_ecc_signature, encode_ecc_signature, reencode_signature
from .hashing import compute_digest
from .signing import sign_message, sign_message_b64

__all__ = [
    "AlgorithmFamily",
    "AsymmetricSignature",
    "HashAlgorithm",
    "KeyAttributes",
    "OpaqueAlgorithm",
    "SignHash",
    "SignatureScheme",
    "compute_digest",
    "decode_ecc_signature",
    "encode_ecc_signature",
    "reencode_signature",
    "sign_message",
    "sign_message_b64",
]
