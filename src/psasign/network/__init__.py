"""Key service protocol and HTTP transport layer."""

from __future__ import annotations

from .http_service import HttpKeyService
from .protocol import KeyService

__all__ = ["HttpKeyService", "KeyService"]
