"""
Key service protocol abstraction.

Defines the interface that key-management service adapters must
implement. The core signing logic depends on this protocol, not on
concrete implementations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..core.algorithms import AsymmetricSignature, KeyAttributes


class KeyService(Protocol):
    """Protocol for remote key-management services.

    Implementations look up key attributes and perform sign-hash
    operations with keys that never leave the service (HTTP, local
    daemon socket, HSM bridge, etc.).
    """

    def key_attributes(self, key_name: str) -> KeyAttributes:
        """
        Fetch the stored attributes and policy of a key.

        Args:
            key_name: Name of a provisioned key.

        Returns:
            KeyAttributes including the key's permitted algorithm.

        Raises:
            KeyNotFoundError: If no key with this name exists.
            ServiceError: If the lookup fails.
        """
        ...

    def sign_hash(self, key_name: str, hash_bytes: bytes, algorithm: AsymmetricSignature) -> bytes:
        """
        Sign a pre-computed hash with a named key.

        The service signs exactly the hash provided (does not re-hash).

        Args:
            key_name: Name of a provisioned key.
            hash_bytes: Digest computed with the algorithm's hash.
            algorithm: Full signature algorithm descriptor.

        Returns:
            Raw signature bytes (R||S for ECC schemes).

        Raises:
            ServiceError: If the signing operation fails.
        """
        ...
