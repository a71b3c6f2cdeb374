"""
Configuration management for psasign.

Stores the key service URL and request timeout in ~/.psasign/config.json.
Token storage lives in ``credentials.py``; this module handles only
service config.
"""

from __future__ import annotations

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "get_service_config",
    "reset_all",
    "save_service_config",
]

import logging
import os

from ..constants import DEFAULT_TIMEOUT_HTTP, ENV_TIMEOUT, ENV_URL, MAX_TIMEOUT, MIN_TIMEOUT
from ..errors import ConfigError
from ._storage import CONFIG_DIR, CONFIG_FILE, load_config, load_raw_config, save_config

_logger = logging.getLogger(__name__)


def _env_timeout() -> int | None:
    """Parse PSASIGN_TIMEOUT, falling back to the default when invalid."""
    timeout_str = os.environ.get(ENV_TIMEOUT, "").strip()
    if not timeout_str:
        return None
    try:
        timeout = int(timeout_str)
    except ValueError:
        _logger.warning("Invalid %s value %r, using default", ENV_TIMEOUT, timeout_str)
        return DEFAULT_TIMEOUT_HTTP
    if timeout < MIN_TIMEOUT or timeout > MAX_TIMEOUT:
        _logger.warning(
            "%s=%d out of range [%d, %d], using default",
            ENV_TIMEOUT,
            timeout,
            MIN_TIMEOUT,
            MAX_TIMEOUT,
        )
        return DEFAULT_TIMEOUT_HTTP
    return timeout


def get_service_config() -> tuple[str | None, int]:
    """
    Resolve the key service URL and timeout.

    Priority: env vars > config file > defaults.

    Returns:
        (url, timeout). url is None if neither PSASIGN_URL nor the
        config file provide one.
    """
    config = load_config()

    url = os.environ.get(ENV_URL, "").strip() or config.get("url", "").strip() or None

    timeout = _env_timeout()
    if timeout is None:
        timeout = config.get("timeout", DEFAULT_TIMEOUT_HTTP)

    return url, timeout


def save_service_config(url: str, timeout: int | None = None) -> None:
    """
    Save the key service URL (and optionally timeout) to config.

    Raises:
        ConfigError: If the URL is empty or the timeout is out of range.
    """
    url = url.strip()
    if not url:
        raise ConfigError("Key service URL must not be empty.")
    if timeout is not None and not MIN_TIMEOUT <= timeout <= MAX_TIMEOUT:
        raise ConfigError(f"Timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds.")

    config = load_raw_config()
    config["url"] = url
    if timeout is not None:
        config["timeout"] = timeout
    save_config(config)
    _logger.info("Saved key service config: url=%s, timeout=%s", url, timeout)


def reset_all() -> None:
    """Clear all config: token and service settings."""
    from .credentials import clear_token

    clear_token()
    save_config({})
