"""
API token management for psasign.

Tokens are stored in the system keychain (keyring), keyed by the service
URL, falling back to config file storage when the keychain is unusable.
"""

from __future__ import annotations

__all__ = [
    "clear_token",
    "get_token",
    "get_token_storage_info",
    "resolve_token",
    "save_token",
]

import logging
import os

import keyring
from keyring.errors import KeyringError

from ..constants import ENV_TOKEN
from ._storage import CONFIG_FILE, load_config, load_raw_config, save_config

# Keyring service name for token storage
_KEYRING_SERVICE = "psasign"

_logger = logging.getLogger(__name__)


def _keyring_delete(url: str) -> None:
    """Delete the keyring entry for a service URL (best-effort)."""
    if not url:
        return
    try:
        keyring.delete_password(_KEYRING_SERVICE, url)
        _logger.debug("Deleted keyring entry")
    except KeyringError:
        pass  # entry doesn't exist
    except (OSError, RuntimeError) as e:
        _logger.debug("Keyring delete failed: %s", e)


def get_token_storage_info() -> str:
    """Return a human-readable description of where tokens are stored."""
    backend = keyring.get_keyring()
    module = type(backend).__module__ or ""
    if "fail" in module or "null" in module:
        return f"{CONFIG_FILE} (plaintext)"
    if "macOS" in module:
        return "macOS Keychain"
    if "Windows" in module or "WinVault" in module:
        return "Windows Credential Manager"
    if "SecretService" in module:
        return "Linux Secret Service"
    if "KWallet" in module:
        return "KDE Wallet"
    return f"System keychain ({type(backend).__name__})"


def get_token(url: str) -> str | None:
    """
    Get the saved token for a key service.

    Returns:
        The token from the keychain, else from the config file, else None.
    """
    try:
        token = keyring.get_password(_KEYRING_SERVICE, url)
    except KeyringError as e:
        _logger.debug("Keyring read failed, trying config file: %s", e)
    except (OSError, RuntimeError) as e:
        _logger.debug("Keyring backend error, trying config file: %s", e)
    else:
        if token:
            _logger.debug("get_token: found token in keyring")
            return token

    token = load_config().get("token")
    if token:
        _logger.debug("get_token: found token in config file (plaintext)")
        return token
    return None


def resolve_token(url: str) -> str | None:
    """Resolve the token to use: PSASIGN_TOKEN env var > saved token."""
    env_token = os.environ.get(ENV_TOKEN, "").strip()
    if env_token:
        _logger.debug("resolve_token: using %s", ENV_TOKEN)
        return env_token
    return get_token(url)


def save_token(url: str, token: str) -> bool:
    """
    Save a key service token.

    Args:
        url: Key service URL the token belongs to.
        token: API token.

    Returns:
        True if the token was stored in the system keychain (secure).
        False if it fell back to the config file (plaintext).
    """
    config = load_raw_config()
    try:
        keyring.set_password(_KEYRING_SERVICE, url, token)
    except KeyringError as e:
        _logger.warning("Keyring save failed, using config file: %s", e)
    except (OSError, RuntimeError) as e:
        _logger.warning("Keyring backend error, using config file: %s", e)
    else:
        if config.pop("token", None) is not None:
            save_config(config)
        return True

    _logger.warning("Token will be saved in plaintext (%s).", CONFIG_FILE)
    config["token"] = token
    save_config(config)
    return False


def clear_token() -> None:
    """Remove the saved token from all storage backends."""
    config = load_raw_config()
    url = config.get("url")
    if isinstance(url, str):
        _keyring_delete(url)
    if config.pop("token", None) is not None:
        save_config(config)
    _logger.info("Cleared saved token")
