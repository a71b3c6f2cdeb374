"""psasign error types.

Every error carries an ``exit_code`` that the CLI uses as the process
exit status.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AuthError",
    "ConfigError",
    "InternalEncodingError",
    "KeyNotFoundError",
    "NotSupportedError",
    "PsaSignError",
    "ServiceError",
    "TransportError",
    "WrongKeyAlgorithmError",
]


class PsaSignError(Exception):
    """Base error for psasign operations."""

    exit_code = 1


class NotSupportedError(PsaSignError):
    """Hash or signature algorithm outside the supported set."""

    exit_code = 3


class WrongKeyAlgorithmError(PsaSignError):
    """The key's policy algorithm cannot be used for signing."""

    exit_code = 4


class ServiceError(PsaSignError):
    """The key service returned an error or an unusable response.

    Args:
        message: Human-readable error description.
        status: HTTP status code, when the error came from an HTTP response.
    """

    exit_code = 5

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    def __reduce__(self) -> tuple[type[ServiceError], tuple[str], dict[str, Any]]:
        """Preserve keyword-only attributes across pickle/unpickle."""
        return (type(self), (str(self),), dict(self.__dict__))

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.__dict__.update(state)


class KeyNotFoundError(ServiceError):
    """The named key does not exist in the key service."""

    exit_code = 6


class AuthError(ServiceError):
    """The key service rejected the credentials."""

    exit_code = 7


class TransportError(ServiceError):
    """Connection-level failure talking to the key service.

    Args:
        message: Human-readable error description.
        retryable: Whether this error is transient and worth retrying.
            True for timeouts and connection resets;
            False for TLS configuration issues and refused redirects.
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class InternalEncodingError(PsaSignError):
    """Signature re-encoding failed.

    Indicates a logic defect or a malformed signer response, not a user
    input error.
    """

    exit_code = 70


class ConfigError(PsaSignError):
    """Configuration validation error."""

    exit_code = 78
