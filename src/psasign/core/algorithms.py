"""
Algorithm and key-policy model.

Closed enumerations mirroring the PSA Crypto algorithm identifiers, the
immutable descriptors built from them, and their JSON wire form as used by
the key service.
"""

from __future__ import annotations

__all__ = [
    "Algorithm",
    "AlgorithmFamily",
    "AsymmetricSignature",
    "HashAlgorithm",
    "KeyAttributes",
    "OpaqueAlgorithm",
    "SignHash",
    "SignatureScheme",
    "algorithm_from_dict",
    "algorithm_to_dict",
    "key_attributes_from_dict",
]

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from ..errors import ServiceError


class HashAlgorithm(Enum):
    """PSA hash algorithms, valued by their wire names."""

    MD2 = "md2"
    MD4 = "md4"
    MD5 = "md5"
    RIPEMD160 = "ripemd-160"
    SHA_1 = "sha-1"
    SHA_224 = "sha-224"
    SHA_256 = "sha-256"
    SHA_384 = "sha-384"
    SHA_512 = "sha-512"
    SHA_512_224 = "sha-512/224"
    SHA_512_256 = "sha-512/256"
    SHA3_224 = "sha3-224"
    SHA3_256 = "sha3-256"
    SHA3_384 = "sha3-384"
    SHA3_512 = "sha3-512"


class AlgorithmFamily(Enum):
    NONE = "none"
    HASH = "hash"
    MAC = "mac"
    CIPHER = "cipher"
    AEAD = "aead"
    ASYMMETRIC_SIGNATURE = "asymmetric-signature"
    ASYMMETRIC_ENCRYPTION = "asymmetric-encryption"
    KEY_AGREEMENT = "key-agreement"
    KEY_DERIVATION = "key-derivation"


class SignatureScheme(Enum):
    RSA_PKCS1V15_SIGN = "rsa-pkcs1v15-sign"
    RSA_PKCS1V15_SIGN_RAW = "rsa-pkcs1v15-sign-raw"
    RSA_PSS = "rsa-pss"
    ECDSA = "ecdsa"
    ECDSA_ANY = "ecdsa-any"
    DETERMINISTIC_ECDSA = "deterministic-ecdsa"


# Schemes that sign caller-formatted input and carry no hash requirement
_HASHLESS_SCHEMES = frozenset({SignatureScheme.RSA_PKCS1V15_SIGN_RAW, SignatureScheme.ECDSA_ANY})

# Schemes producing fixed-width R||S signatures
_ECC_SCHEMES = frozenset(
    {SignatureScheme.ECDSA, SignatureScheme.ECDSA_ANY, SignatureScheme.DETERMINISTIC_ECDSA}
)

# Wire value of the wildcard hash requirement
_ANY_HASH = "any"


@dataclass(frozen=True)
class SignHash:
    """Hash requirement of a signature scheme.

    ``specific`` is the mandated hash, or None for the ``ANY`` wildcard
    (the policy allows any hash, so none can be chosen on its behalf).
    """

    specific: HashAlgorithm | None = None

    ANY: ClassVar[SignHash]

    @property
    def is_any(self) -> bool:
        return self.specific is None

    def __str__(self) -> str:
        return _ANY_HASH if self.specific is None else self.specific.value


SignHash.ANY = SignHash()


@dataclass(frozen=True)
class AsymmetricSignature:
    """Asymmetric signature algorithm descriptor.

    Attributes:
        scheme: Signature scheme.
        hash_alg: Hash requirement; must be None for hash-less schemes
            (raw PKCS#1 v1.5, ECDSA-any) and set for all others.
    """

    scheme: SignatureScheme
    hash_alg: SignHash | None = None

    family: ClassVar[AlgorithmFamily] = AlgorithmFamily.ASYMMETRIC_SIGNATURE

    def __post_init__(self) -> None:
        if self.scheme in _HASHLESS_SCHEMES:
            if self.hash_alg is not None:
                raise ValueError(f"{self.scheme.value} does not take a hash algorithm")
        elif self.hash_alg is None:
            raise ValueError(f"{self.scheme.value} requires a hash algorithm")

    def hash(self) -> SignHash | None:
        return self.hash_alg

    def is_ecc_alg(self) -> bool:
        return self.scheme in _ECC_SCHEMES

    def __str__(self) -> str:
        if self.hash_alg is None:
            return self.scheme.value
        return f"{self.scheme.value}({self.hash_alg})"


@dataclass(frozen=True)
class OpaqueAlgorithm:
    """Descriptor for any algorithm family other than asymmetric signature.

    The core only needs to recognize and reject these, so the concrete
    algorithm is kept as its wire name.
    """

    family: AlgorithmFamily
    name: str = ""

    def __post_init__(self) -> None:
        if self.family is AlgorithmFamily.ASYMMETRIC_SIGNATURE:
            raise ValueError("Use AsymmetricSignature for signature algorithms")

    def __str__(self) -> str:
        return f"{self.family.value}({self.name})" if self.name else self.family.value


Algorithm = Union[AsymmetricSignature, OpaqueAlgorithm]


@dataclass(frozen=True)
class KeyAttributes:
    """Key attributes as stored by the key service."""

    key_type: str
    bits: int
    permitted_algorithm: Algorithm
    usage: frozenset[str] = field(default_factory=frozenset)


# ── JSON wire form ───────────────────────────────────────────────────


def _enum_value(enum_cls: type[Enum], value: object, what: str) -> Any:
    if not isinstance(value, str):
        raise ServiceError(f"Malformed {what}: expected string, got {value!r}")
    try:
        return enum_cls(value)
    except ValueError:
        raise ServiceError(f"Unknown {what}: {value!r}") from None


def algorithm_from_dict(data: object) -> Algorithm:
    """Build an algorithm descriptor from its JSON form.

    Raises:
        ServiceError: If the descriptor is malformed or names an unknown
            family, scheme or hash.
    """
    if not isinstance(data, dict):
        raise ServiceError(f"Malformed algorithm descriptor: {data!r}")

    family = _enum_value(AlgorithmFamily, data.get("family"), "algorithm family")
    if family is not AlgorithmFamily.ASYMMETRIC_SIGNATURE:
        name = data.get("name", "")
        if not isinstance(name, str):
            raise ServiceError(f"Malformed algorithm name: {name!r}")
        return OpaqueAlgorithm(family, name)

    scheme = _enum_value(SignatureScheme, data.get("scheme"), "signature scheme")
    raw_hash = data.get("hash")
    if raw_hash is None:
        hash_alg = None
    elif raw_hash == _ANY_HASH:
        hash_alg = SignHash.ANY
    else:
        hash_alg = SignHash(_enum_value(HashAlgorithm, raw_hash, "hash algorithm"))

    try:
        return AsymmetricSignature(scheme, hash_alg)
    except ValueError as exc:
        raise ServiceError(f"Malformed signature algorithm: {exc}") from exc


def algorithm_to_dict(algorithm: Algorithm) -> dict[str, str]:
    """Serialize an algorithm descriptor to its JSON form."""
    if isinstance(algorithm, OpaqueAlgorithm):
        result = {"family": algorithm.family.value}
        if algorithm.name:
            result["name"] = algorithm.name
        return result

    result = {"family": algorithm.family.value, "scheme": algorithm.scheme.value}
    if algorithm.hash_alg is not None:
        result["hash"] = str(algorithm.hash_alg)
    return result


def key_attributes_from_dict(data: object) -> KeyAttributes:
    """Build KeyAttributes from the key service's JSON response.

    Expected shape::

        {"type": "ecc-key-pair(secp-r1)", "bits": 256,
         "policy": {"usage": ["sign-hash"], "permitted_algorithm": {...}}}

    Raises:
        ServiceError: If required fields are missing or have the wrong type.
    """
    if not isinstance(data, dict):
        raise ServiceError("Malformed key attributes: expected a JSON object")

    policy = data.get("policy")
    if not isinstance(policy, dict) or "permitted_algorithm" not in policy:
        raise ServiceError("Malformed key attributes: missing policy.permitted_algorithm")

    key_type = data.get("type", "")
    bits = data.get("bits", 0)
    usage = policy.get("usage", [])
    if not isinstance(key_type, str) or not isinstance(bits, int):
        raise ServiceError("Malformed key attributes: bad type or bits")
    if not isinstance(usage, list) or not all(isinstance(u, str) for u in usage):
        raise ServiceError("Malformed key attributes: usage must be a list of strings")

    return KeyAttributes(
        key_type=key_type,
        bits=bits,
        permitted_algorithm=algorithm_from_dict(policy["permitted_algorithm"]),
        usage=frozenset(usage),
    )
