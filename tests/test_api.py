"""Tests for psasign.api -- service construction and the sign() convenience API."""

from __future__ import annotations

import base64
import hashlib
import json
from unittest.mock import patch

import pytest
from asn1crypto.algos import DSASignature
from helpers import FAKE_ECC_SIGNATURE

from psasign.api import build_key_service, sign
from psasign.errors import ConfigError, WrongKeyAlgorithmError
from psasign.network.http_service import HttpKeyService


def _attrs(permitted_algorithm: dict) -> bytes:
    return json.dumps(
        {"type": "key", "bits": 256, "policy": {"permitted_algorithm": permitted_algorithm}}
    ).encode()


# ── build_key_service ────────────────────────────────────────────────


def test_build_from_config():
    with (
        patch("psasign.api.get_service_config", return_value=("https://kms.example.com", 45)),
        patch("psasign.api.resolve_token", return_value="tok"),
    ):
        service = build_key_service()
    assert isinstance(service, HttpKeyService)
    assert service.url == "https://kms.example.com"
    assert service.token == "tok"
    assert service.timeout == 45


def test_build_explicit_args_win():
    with (
        patch("psasign.api.get_service_config", return_value=("https://kms.example.com", 45)),
        patch("psasign.api.resolve_token") as resolve,
    ):
        service = build_key_service("https://other.example.com", "explicit", 10)
    assert (service.url, service.token, service.timeout) == (
        "https://other.example.com",
        "explicit",
        10,
    )
    resolve.assert_not_called()


def test_build_without_url():
    with (
        patch("psasign.api.get_service_config", return_value=(None, 60)),
        pytest.raises(ConfigError, match="No key service configured"),
    ):
        build_key_service()


# ── sign ─────────────────────────────────────────────────────────────


def test_sign_end_to_end_over_http():
    """k1: ECDSA/SHA-256 policy, "hello", ASN.1 output."""
    sign_response = json.dumps(
        {"signature": base64.b64encode(FAKE_ECC_SIGNATURE).decode()}
    ).encode()
    with (
        patch(
            "psasign.network.http_service.http_get",
            return_value=_attrs(
                {"family": "asymmetric-signature", "scheme": "ecdsa", "hash": "sha-256"}
            ),
        ),
        patch("psasign.network.http_service.http_post", return_value=sign_response) as post,
    ):
        text = sign("k1", "hello", encode_asn1=True, url="https://kms.example.com", token="t")

    sent = json.loads(post.call_args.args[1])
    assert base64.b64decode(sent["hash"]) == hashlib.sha256(b"hello").digest()

    parsed = DSASignature.load(base64.b64decode(text))
    assert parsed["r"].native == int.from_bytes(FAKE_ECC_SIGNATURE[:32], "big")
    assert parsed["s"].native == int.from_bytes(FAKE_ECC_SIGNATURE[32:], "big")


def test_sign_cipher_key_makes_no_sign_request():
    with (
        patch(
            "psasign.network.http_service.http_get",
            return_value=_attrs({"family": "cipher", "name": "cbc-pkcs7"}),
        ),
        patch("psasign.network.http_service.http_post") as post,
        pytest.raises(WrongKeyAlgorithmError),
    ):
        sign("k2", "anything", url="https://kms.example.com", token="t")
    post.assert_not_called()


def test_sign_hashes_utf8():
    with (
        patch(
            "psasign.network.http_service.http_get",
            return_value=_attrs(
                {"family": "asymmetric-signature", "scheme": "rsa-pss", "hash": "sha-512"}
            ),
        ),
        patch(
            "psasign.network.http_service.http_post",
            return_value=b'{"signature": "AAEC"}',
        ) as post,
    ):
        text = sign("rsa", "ünïcode", url="https://kms.example.com", token="t")
    assert text == "AAEC"
    sent = json.loads(post.call_args.args[1])
    assert base64.b64decode(sent["hash"]) == hashlib.sha512("ünïcode".encode()).digest()
