"""
psasign -- sign data with keys held by a remote key-management service.

Hashes text with the algorithm mandated by the key's policy, has the
service sign the hash, and optionally re-encodes ECDSA signatures as DER.
"""

from __future__ import annotations

from .api import build_key_service, sign
from .constants import __version__
from .core.algorithms import (
    AlgorithmFamily,
    AsymmetricSignature,
    HashAlgorithm,
    KeyAttributes,
    OpaqueAlgorithm,
    SignatureScheme,
    SignHash,
)
from .core.asn1 import decode_ecc_signature, encode_ecc_signature
from .core.hashing import compute_digest
from .core.signing import sign_message, sign_message_b64
from .errors import (
    AuthError,
    ConfigError,
    InternalEncodingError,
    KeyNotFoundError,
    NotSupportedError,
    PsaSignError,
    ServiceError,
    TransportError,
    WrongKeyAlgorithmError,
)
from .network import HttpKeyService, KeyService

__all__ = [
    "AlgorithmFamily",
    "AsymmetricSignature",
    "AuthError",
    "ConfigError",
    "HashAlgorithm",
    "HttpKeyService",
    "InternalEncodingError",
    "KeyAttributes",
    "KeyNotFoundError",
    "KeyService",
    "NotSupportedError",
    "OpaqueAlgorithm",
    "PsaSignError",
    "ServiceError",
    "SignHash",
    "SignatureScheme",
    "TransportError",
    "WrongKeyAlgorithmError",
    "__version__",
    "build_key_service",
    "compute_digest",
    "decode_ecc_signature",
    "encode_ecc_signature",
    "sign",
    "sign_message",
    "sign_message_b64",
]
