"""High-level convenience API.

Provides :func:`sign`, which resolves the service URL, timeout and token
from the environment and saved config, builds an
:class:`~psasign.network.http_service.HttpKeyService` and returns the
printable signature.

For lower-level control, use :func:`~psasign.core.signing.sign_message`
directly with any :class:`~psasign.network.protocol.KeyService`.
"""

from __future__ import annotations

__all__ = ["build_key_service", "sign"]

import logging

from .config import get_service_config, resolve_token
from .constants import ENV_URL
from .core.signing import sign_message_b64
from .errors import ConfigError
from .network.http_service import HttpKeyService

_logger = logging.getLogger(__name__)


def build_key_service(
    url: str | None = None,
    token: str | None = None,
    timeout: int | None = None,
) -> HttpKeyService:
    """Create an HTTP key service adapter from explicit args or saved config.

    Explicit arguments take precedence over environment and config file.

    Raises:
        ConfigError: If no service URL is available from any source.
    """
    config_url, config_timeout = get_service_config()
    url = url or config_url
    if not url:
        raise ConfigError(
            f"No key service configured. Set {ENV_URL} or run `psasign setup --url URL`."
        )
    if token is None:
        token = resolve_token(url)
    service = HttpKeyService(url, token=token, timeout=timeout or config_timeout)
    _logger.debug("Using key service %s (token: %s)", url, "yes" if token else "no")
    return service


def sign(
    key_name: str,
    input_data: str,
    *,
    encode_asn1: bool = False,
    url: str | None = None,
    token: str | None = None,
    timeout: int | None = None,
) -> str:
    """Sign UTF-8 text with a named key and return base64 signature text.

    Args:
        key_name: Name of a key provisioned in the key service.
        input_data: Text to sign (hashed as its UTF-8 bytes).
        encode_asn1: Encode ECC signatures as DER SEQUENCE { r, s }.
        url: Key service URL. Defaults to PSASIGN_URL / saved config.
        token: API token. Defaults to PSASIGN_TOKEN / saved token.
        timeout: Request timeout in seconds.

    Returns:
        Base64 (standard alphabet, padded) signature.
    """
    service = build_key_service(url, token, timeout)
    return sign_message_b64(
        key_name, input_data.encode("utf-8"), service, encode_asn1=encode_asn1
    )
