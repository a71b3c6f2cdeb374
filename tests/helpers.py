"""Shared algorithm descriptors and key attributes for psasign tests."""

from __future__ import annotations

from psasign.core.algorithms import (
    AlgorithmFamily,
    AsymmetricSignature,
    HashAlgorithm,
    KeyAttributes,
    OpaqueAlgorithm,
    SignatureScheme,
    SignHash,
)

ECDSA_SHA256 = AsymmetricSignature(SignatureScheme.ECDSA, SignHash(HashAlgorithm.SHA_256))
RSA_PKCS1_SHA256 = AsymmetricSignature(
    SignatureScheme.RSA_PKCS1V15_SIGN, SignHash(HashAlgorithm.SHA_256)
)
CIPHER_CBC = OpaqueAlgorithm(AlgorithmFamily.CIPHER, "cbc-pkcs7")

# P-256 sized R||S; R has its high bit set, S has a leading zero byte.
FAKE_ECC_SIGNATURE = b"\x9a" + b"\x11" * 31 + b"\x00" + b"\x22" * 31


def make_attributes(algorithm, key_type="ecc-key-pair(secp-r1)", bits=256) -> KeyAttributes:
    return KeyAttributes(
        key_type=key_type,
        bits=bits,
        permitted_algorithm=algorithm,
        usage=frozenset({"sign-hash"}),
    )
