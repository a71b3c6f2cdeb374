"""
HTTP/JSON key service implementation.

Implements the KeyService protocol for key-management services exposing a
small REST API::

    GET  {url}/v1/keys/{name}            -> key attributes
    POST {url}/v1/keys/{name}/sign-hash  -> {"signature": <base64>}
"""

from __future__ import annotations

__all__ = ["HttpKeyService"]

import base64
import binascii
import json
import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

from ..constants import DEFAULT_TIMEOUT_HTTP
from ..core.algorithms import algorithm_to_dict, key_attributes_from_dict
from ..errors import AuthError, KeyNotFoundError, ServiceError
from .transport import http_get, http_post

if TYPE_CHECKING:
    from ..core.algorithms import AsymmetricSignature, KeyAttributes

_logger = logging.getLogger(__name__)

_AUTH_STATUSES = frozenset({401, 403})


def _parse_json(data: bytes, what: str) -> object:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ServiceError(f"Invalid JSON in {what} response: {exc}") from exc


class HttpKeyService:
    """HTTP implementation of the KeyService protocol.

    Each call is a single request/response exchange; no session state is
    kept between calls.
    """

    def __init__(
        self, url: str, token: str | None = None, timeout: int = DEFAULT_TIMEOUT_HTTP
    ) -> None:
        """
        Initialize the HTTP key service adapter.

        Args:
            url: Service base URL (e.g., https://kms.example.com).
            token: Optional bearer token sent with every request.
            timeout: Request timeout in seconds.
        """
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _key_url(self, key_name: str) -> str:
        return f"{self.url}/v1/keys/{quote(key_name, safe='')}"

    def _headers(self, *, json_body: bool = False) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _translate(self, exc: ServiceError, key_name: str) -> ServiceError:
        """Map HTTP statuses onto the error taxonomy."""
        if exc.status == 404:
            return KeyNotFoundError(f"Key '{key_name}' not found", status=exc.status)
        if exc.status in _AUTH_STATUSES:
            return AuthError(f"Key service rejected credentials: {exc}", status=exc.status)
        return exc

    def key_attributes(self, key_name: str) -> KeyAttributes:
        """Fetch a key's attributes and policy."""
        _logger.debug("Fetching attributes of key %r from %s", key_name, self.url)
        try:
            data = http_get(self._key_url(key_name), headers=self._headers(), timeout=self.timeout)
        except ServiceError as exc:
            translated = self._translate(exc, key_name)
            if translated is exc:
                raise
            raise translated from exc

        attributes = key_attributes_from_dict(_parse_json(data, "key attributes"))
        _logger.info(
            "Key %r: %s, %d bits, policy %s",
            key_name,
            attributes.key_type,
            attributes.bits,
            attributes.permitted_algorithm,
        )
        return attributes

    def sign_hash(self, key_name: str, hash_bytes: bytes, algorithm: AsymmetricSignature) -> bytes:
        """Sign a pre-computed hash. The request is sent exactly once."""
        body = json.dumps(
            {
                "hash": base64.b64encode(hash_bytes).decode("ascii"),
                "algorithm": algorithm_to_dict(algorithm),
            }
        ).encode("utf-8")

        _logger.debug("Requesting %s signature over %d-byte hash", algorithm, len(hash_bytes))
        try:
            data = http_post(
                f"{self._key_url(key_name)}/sign-hash",
                body,
                headers=self._headers(json_body=True),
                timeout=self.timeout,
            )
        except ServiceError as exc:
            translated = self._translate(exc, key_name)
            if translated is exc:
                raise
            raise translated from exc

        response = _parse_json(data, "sign-hash")
        sig_b64 = response.get("signature") if isinstance(response, dict) else None
        if not isinstance(sig_b64, str) or not sig_b64:
            raise ServiceError("Sign-hash response has no signature")
        try:
            signature = base64.b64decode(sig_b64, validate=True)
        except binascii.Error as exc:
            raise ServiceError(f"Sign-hash response signature is not valid base64: {exc}") from exc

        _logger.info("Received signature: %d bytes", len(signature))
        return signature
