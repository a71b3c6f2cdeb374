"""Tests for psasign.config -- service config and token storage."""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from psasign.config._storage import load_config, load_raw_config, save_config
from psasign.config.config import get_service_config, reset_all, save_service_config
from psasign.config.credentials import clear_token, get_token, resolve_token, save_token
from psasign.errors import ConfigError


class _MemoryKeyring:
    """In-memory stand-in for the keyring module's password API."""

    def __init__(self) -> None:
        self.store: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.store.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.store[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        if (service, username) not in self.store:
            raise PasswordDeleteError("not found")
        del self.store[(service, username)]


@pytest.fixture
def memory_keyring():
    backend = _MemoryKeyring()
    with (
        patch("psasign.config.credentials.keyring.get_password", backend.get_password),
        patch("psasign.config.credentials.keyring.set_password", backend.set_password),
        patch("psasign.config.credentials.keyring.delete_password", backend.delete_password),
    ):
        yield backend


@pytest.fixture
def broken_keyring():
    with (
        patch(
            "psasign.config.credentials.keyring.get_password",
            side_effect=KeyringError("locked"),
        ),
        patch(
            "psasign.config.credentials.keyring.set_password",
            side_effect=KeyringError("locked"),
        ),
        patch(
            "psasign.config.credentials.keyring.delete_password",
            side_effect=KeyringError("locked"),
        ),
    ):
        yield


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=False) as env:
        for key in ("PSASIGN_URL", "PSASIGN_TIMEOUT", "PSASIGN_TOKEN"):
            env.pop(key, None)
        yield env


# ── load_config / save_config ─────────────────────────────────────


def test_load_empty(config_dir):
    assert load_config() == {}


def test_save_and_load(config_dir):
    save_config({"url": "https://kms.example.com", "timeout": 30})
    assert load_config() == {"url": "https://kms.example.com", "timeout": 30}


def test_save_preserves_unknown_keys(config_dir):
    _, config_file = config_dir
    save_config({"url": "https://kms.example.com", "future_key": [1, 2]})
    assert load_raw_config()["future_key"] == [1, 2]
    assert "future_key" not in load_config()
    assert json.loads(config_file.read_text())["future_key"] == [1, 2]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_save_permissions(config_dir):
    tmp_path, config_file = config_dir
    save_config({"url": "https://kms.example.com"})
    assert config_file.stat().st_mode & 0o777 == 0o600
    assert list(tmp_path.glob("*.tmp")) == []


def test_corrupted_config_ignored(config_dir):
    _, config_file = config_dir
    config_file.write_text("{not json")
    assert load_config() == {}


def test_non_object_config_ignored(config_dir):
    _, config_file = config_dir
    config_file.write_text("[1, 2, 3]")
    assert load_raw_config() == {}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"url": 5}, {}),
        ({"timeout": 0}, {}),
        ({"timeout": 99999}, {}),
        ({"timeout": "30"}, {}),
        ({"timeout": True}, {}),
        ({"timeout": 30, "token": "t"}, {"timeout": 30, "token": "t"}),
    ],
)
def test_config_validation(config_dir, raw, expected):
    _, config_file = config_dir
    config_file.write_text(json.dumps(raw))
    assert load_config() == expected


# ── get_service_config ────────────────────────────────────────────


def test_service_config_unconfigured(config_dir, clean_env):
    assert get_service_config() == (None, 60)


def test_service_config_from_file(config_dir, clean_env):
    save_service_config("https://kms.example.com", 30)
    assert get_service_config() == ("https://kms.example.com", 30)


def test_service_config_env_overrides_file(config_dir, clean_env):
    save_service_config("https://kms.example.com", 30)
    clean_env["PSASIGN_URL"] = "https://other.example.com"
    clean_env["PSASIGN_TIMEOUT"] = "15"
    assert get_service_config() == ("https://other.example.com", 15)


@pytest.mark.parametrize("value", ["abc", "0", "100000"])
def test_service_config_bad_env_timeout_uses_default(config_dir, clean_env, value):
    save_service_config("https://kms.example.com", 30)
    clean_env["PSASIGN_TIMEOUT"] = value
    assert get_service_config() == ("https://kms.example.com", 60)


def test_save_service_config_validation(config_dir):
    with pytest.raises(ConfigError, match="must not be empty"):
        save_service_config("  ")
    with pytest.raises(ConfigError, match="Timeout"):
        save_service_config("https://kms.example.com", 0)


def test_save_service_config_keeps_timeout(config_dir, clean_env):
    save_service_config("https://kms.example.com", 30)
    save_service_config("https://kms2.example.com")
    assert get_service_config() == ("https://kms2.example.com", 30)


# ── tokens ─────────────────────────────────────────────────────────


def test_save_token_in_keyring(config_dir, memory_keyring):
    assert save_token("https://kms.example.com", "tok") is True
    assert memory_keyring.store[("psasign", "https://kms.example.com")] == "tok"
    assert "token" not in load_raw_config()
    assert get_token("https://kms.example.com") == "tok"


def test_save_token_falls_back_to_config(config_dir, broken_keyring):
    assert save_token("https://kms.example.com", "tok") is False
    assert load_config()["token"] == "tok"
    assert get_token("https://kms.example.com") == "tok"


def test_save_token_in_keyring_removes_plaintext(config_dir, memory_keyring):
    save_config({"url": "https://kms.example.com", "token": "old"})
    save_token("https://kms.example.com", "new")
    assert "token" not in load_raw_config()


def test_get_token_none(config_dir, memory_keyring):
    assert get_token("https://kms.example.com") is None


def test_resolve_token_env_first(config_dir, memory_keyring, clean_env):
    save_token("https://kms.example.com", "saved")
    clean_env["PSASIGN_TOKEN"] = "from-env"
    assert resolve_token("https://kms.example.com") == "from-env"
    del clean_env["PSASIGN_TOKEN"]
    assert resolve_token("https://kms.example.com") == "saved"


def test_clear_token(config_dir, memory_keyring):
    save_service_config("https://kms.example.com")
    save_token("https://kms.example.com", "tok")
    raw = load_raw_config()
    raw["token"] = "plain"
    save_config(raw)

    clear_token()
    assert memory_keyring.store == {}
    assert "token" not in load_raw_config()
    assert load_config()["url"] == "https://kms.example.com"


def test_clear_token_when_nothing_saved(config_dir, memory_keyring):
    clear_token()
    assert load_raw_config() == {}


def test_reset_all(config_dir, memory_keyring, clean_env):
    save_service_config("https://kms.example.com", 30)
    save_token("https://kms.example.com", "tok")
    reset_all()
    assert load_raw_config() == {}
    assert memory_keyring.store == {}
