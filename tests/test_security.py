import time

import pytest
from jose import jwt

import entrevisto.core.security as security_mod
from entrevisto.core.security import decode_identity_token, generate_id

SECRET = "unit-test-secret"


@pytest.fixture(autouse=True)
def _hs256_settings(monkeypatch):
    monkeypatch.setattr(security_mod.settings, "identity_jwt_key", SECRET)
    monkeypatch.setattr(security_mod.settings, "identity_jwt_algorithms", "HS256")
    monkeypatch.setattr(security_mod.settings, "identity_issuer", None)
    monkeypatch.setattr(security_mod.settings, "identity_audience", None)


def _token(claims, key=SECRET):
    payload = {"exp": int(time.time()) + 300}
    payload.update(claims)
    return jwt.encode(payload, key, algorithm="HS256")


def test_decode_valid_token():
    identity = decode_identity_token(_token({"sub": "user_123", "email": "a@example.com"}))
    assert identity.user_id == "user_123"
    assert identity.email == "a@example.com"


def test_decode_rejects_bad_signature_and_garbage():
    assert decode_identity_token(_token({"sub": "user_123"}, key="other-secret")) is None
    assert decode_identity_token("not-a-jwt") is None


def test_decode_rejects_expired_token():
    assert decode_identity_token(_token({"sub": "user_123", "exp": int(time.time()) - 10})) is None


def test_decode_requires_subject():
    assert decode_identity_token(_token({"email": "a@example.com"})) is None


def test_audience_and_issuer_are_enforced_when_configured(monkeypatch):
    monkeypatch.setattr(security_mod.settings, "identity_audience", "entrevisto")
    monkeypatch.setattr(security_mod.settings, "identity_issuer", "https://idp.example.com")
    good = _token({"sub": "u1", "aud": "entrevisto", "iss": "https://idp.example.com"})
    wrong_aud = _token({"sub": "u1", "aud": "other", "iss": "https://idp.example.com"})
    assert decode_identity_token(good).user_id == "u1"
    assert decode_identity_token(wrong_aud) is None


def test_custom_email_claim(monkeypatch):
    monkeypatch.setattr(security_mod.settings, "identity_email_claim", "primary_email")
    identity = decode_identity_token(_token({"sub": "u1", "primary_email": "p@example.com"}))
    assert identity.email == "p@example.com"


def test_generate_id():
    assert len(generate_id()) > 10
    assert generate_id() != generate_id()
