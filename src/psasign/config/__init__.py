"""
Configuration and credential management.

Import from this package directly instead of from the individual
submodules (config, credentials).
"""

from __future__ import annotations

from .config import (
    CONFIG_FILE,
    get_service_config,
    reset_all,
    save_service_config,
)
from .credentials import (
    clear_token,
    get_token,
    get_token_storage_info,
    resolve_token,
    save_token,
)

__all__ = [
    "CONFIG_FILE",
    "clear_token",
    "get_service_config",
    "get_token",
    "get_token_storage_info",
    "reset_all",
    "resolve_token",
    "save_service_config",
    "save_token",
]
