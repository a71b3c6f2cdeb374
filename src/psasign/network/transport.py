"""
HTTP transport for the key service.

Thin wrapper over ``urllib.request``:

- HTTPS only (plain HTTP is accepted for loopback daemons)
- HTTPS to HTTP redirects are refused
- Response bodies are size-limited
- Non-2xx responses become ServiceError carrying the HTTP status
- Optional retry with exponential backoff on transient failures

Public API:
- http_get / http_post for HTTP requests
"""

from __future__ import annotations

__all__ = ["http_get", "http_post"]

import http.client
import logging
import time
import urllib.error
import urllib.request
from typing import TYPE_CHECKING, Protocol, TypeVar
from urllib.parse import urlparse

from ..constants import (
    BYTES_PER_MB,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT_HTTP,
    LOOPBACK_HOSTS,
    MAX_RESPONSE_SIZE,
    RECV_BUFFER_SIZE,
)
from ..errors import PsaSignError, ServiceError, TransportError

if TYPE_CHECKING:
    from collections.abc import Callable

_T = TypeVar("_T")

_logger = logging.getLogger(__name__)

# Maximum characters of an error response body quoted in messages
_ERROR_BODY_PREVIEW = 200


def _require_secure_url(url: str) -> None:
    """Reject non-HTTPS URLs unless they point at a loopback host.

    Raises:
        ServiceError: If the URL is not HTTPS (or loopback HTTP), or has
            no hostname.
    """
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    host = parsed.hostname
    if not host:
        raise ServiceError(f"Cannot extract hostname from URL: {url}")
    if scheme == "https":
        return
    if scheme == "http" and host in LOOPBACK_HOSTS:
        return
    raise ServiceError(
        f"Only HTTPS URLs are allowed (got {scheme}://{host}). "
        "Tokens must not be sent over unencrypted connections."
    )


# ── Retry logic ──────────────────────────────────────────────────────


def _is_retryable_error(exc: PsaSignError) -> bool:
    """Check if an error is transient and worth retrying."""
    if isinstance(exc, TransportError):
        return exc.retryable
    return False


def _with_retry(
    fn: Callable[[], _T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    delay: float = DEFAULT_RETRY_DELAY,
    backoff: float = DEFAULT_RETRY_BACKOFF,
    operation: str = "request",
) -> _T:
    """
    Execute a function with exponential backoff retry.

    Args:
        fn: Function to execute (takes no arguments, returns result).
        max_retries: Maximum number of retry attempts.
        delay: Initial delay between retries in seconds.
        backoff: Multiplier for delay after each retry.
        operation: Description of operation for logging.

    Returns:
        Result from successful fn() call.

    Raises:
        Last exception if all retries fail.
    """
    current_delay = delay

    for attempt in range(max_retries + 1):
        try:
            return fn()
        except PsaSignError as exc:  # noqa: PERF203 -- try-except is the retry mechanism
            if attempt >= max_retries or not _is_retryable_error(exc):
                raise

            _logger.warning(
                "%s failed (attempt %d/%d): %s. Retrying in %.1fs...",
                operation,
                attempt + 1,
                max_retries + 1,
                exc,
                current_delay,
            )
            time.sleep(current_delay)
            current_delay *= backoff

    raise RuntimeError("Retry logic error")


# ── urllib plumbing ──────────────────────────────────────────────────


class _Readable(Protocol):
    def read(self, amt: int = ...) -> bytes: ...


def _read_with_limit(response: _Readable, url: str) -> bytes:
    """Read an HTTP response body with size limit to prevent memory exhaustion."""
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = response.read(RECV_BUFFER_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > MAX_RESPONSE_SIZE:
            raise ServiceError(
                f"Response from {url} exceeds {MAX_RESPONSE_SIZE // BYTES_PER_MB} MB limit"
            )
        chunks.append(chunk)
    return b"".join(chunks)


class _SafeRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that refuses HTTPS to HTTP downgrades."""

    def redirect_request(  # type: ignore[override]  # urllib stubs use incompatible signature
        self,
        req: urllib.request.Request,
        fp: http.client.HTTPResponse,
        code: int,
        msg: str,
        headers: http.client.HTTPMessage,
        newurl: str,
    ) -> urllib.request.Request | None:
        parsed_orig = urlparse(req.full_url)
        parsed_new = urlparse(newurl)
        if parsed_orig.scheme == "https" and parsed_new.scheme == "http":
            raise TransportError(f"Refused redirect from HTTPS to HTTP: {newurl}")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


_safe_opener = urllib.request.build_opener(_SafeRedirectHandler)


def _safe_urlopen(request: urllib.request.Request, *, timeout: int) -> http.client.HTTPResponse:
    """Open a Request with safe redirect handling. Thin wrapper to simplify testing."""
    return _safe_opener.open(request, timeout=timeout)


def _http_error(url: str, exc: urllib.error.HTTPError) -> ServiceError:
    """Convert an HTTP error response into a ServiceError with its status."""
    try:
        body = exc.read(_ERROR_BODY_PREVIEW).decode("utf-8", errors="replace").strip()
    except OSError:
        body = ""
    detail = f": {body}" if body else ""
    return ServiceError(f"HTTP {exc.code} from {url}{detail}", status=exc.code)


def _urllib_request(
    method: str,
    url: str,
    body: bytes | None,
    headers: dict[str, str] | None,
    timeout: int,
) -> bytes:
    """Send one request via urllib.request."""
    _logger.debug(
        "%s %s (timeout=%ds, %d bytes)", method, url, timeout, len(body) if body else 0
    )
    req = urllib.request.Request(url, data=body, method=method)  # noqa: S310 -- URL is validated by _require_secure_url in caller
    if headers:
        for k, v in headers.items():
            req.add_header(k, v)
    try:
        with _safe_urlopen(req, timeout=timeout) as response:
            data = _read_with_limit(response, url)
            _logger.debug("%s %s -> %d bytes", method, url, len(data))
            return data
    except urllib.error.HTTPError as exc:
        raise _http_error(url, exc) from exc
    except urllib.error.URLError as exc:
        reason = str(exc.reason) if exc.reason else str(exc)
        if "ssl" in reason.lower() or "certificate" in reason.lower():
            raise TransportError(f"SSL error: {url}: {reason}", retryable=False) from exc
        raise TransportError(f"Connection failed: {url}: {reason}", retryable=True) from exc
    except TimeoutError as exc:
        raise TransportError(
            f"Connection timed out after {timeout}s: {url}",
            retryable=True,
        ) from exc
    except (http.client.HTTPException, OSError) as exc:
        # Dropped connections during getresponse() or the body read
        raise TransportError(f"Connection failed: {url}: {exc}", retryable=True) from exc


# ── Public API ───────────────────────────────────────────────────────


def http_get(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT_HTTP,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> bytes:
    """
    Fetch a URL, retrying transient failures.

    Args:
        url: Target URL.
        headers: Additional HTTP headers.
        timeout: HTTP timeout in seconds.
        max_retries: Maximum retry attempts on transient failures.

    Returns:
        Response body as bytes.

    Raises:
        TransportError: On connection issues.
        ServiceError: On HTTP error responses (``status`` is set).
    """
    _require_secure_url(url)

    def _do_get() -> bytes:
        return _urllib_request("GET", url, None, headers, timeout)

    if max_retries > 0:
        return _with_retry(_do_get, max_retries=max_retries, operation=f"GET {url}")
    return _do_get()


def http_post(
    url: str,
    body: bytes,
    *,
    headers: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT_HTTP,
    max_retries: int = 0,
) -> bytes:
    """
    Send an HTTP POST.

    Not retried by default. Sign requests are sent at most once.

    Args:
        url: Target URL.
        body: Request body bytes.
        headers: Additional HTTP headers.
        timeout: HTTP timeout in seconds.
        max_retries: Maximum retry attempts on transient failures.

    Returns:
        Response body as bytes.

    Raises:
        TransportError: On connection issues.
        ServiceError: On HTTP error responses (``status`` is set).
    """
    _require_secure_url(url)

    def _do_post() -> bytes:
        return _urllib_request("POST", url, body, headers, timeout)

    if max_retries > 0:
        return _with_retry(_do_post, max_retries=max_retries, operation=f"POST {url}")
    return _do_post()
