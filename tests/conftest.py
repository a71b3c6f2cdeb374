"""Shared test fixtures for psasign test suite."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from helpers import ECDSA_SHA256, FAKE_ECC_SIGNATURE, make_attributes

from psasign.network.http_service import HttpKeyService


@pytest.fixture
def mock_service():
    """Create a mock key service whose keys use ECDSA with SHA-256."""
    service = Mock(spec=HttpKeyService)
    service.url = "https://kms.example.com"
    service.key_attributes.return_value = make_attributes(ECDSA_SHA256)
    service.sign_hash.return_value = FAKE_ECC_SIGNATURE
    return service


@pytest.fixture
def config_dir(tmp_path):
    """Redirect config to a temp directory."""
    config_file = tmp_path / "config.json"
    with (
        patch("psasign.config._storage.CONFIG_DIR", tmp_path),
        patch("psasign.config._storage.CONFIG_FILE", config_file),
        patch("psasign.config.credentials.CONFIG_FILE", config_file),
    ):
        yield tmp_path, config_file
