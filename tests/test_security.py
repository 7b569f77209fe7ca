from types import SimpleNamespace

import pytest
from starlette.requests import Request

from sportrent.core import security
from sportrent.core.exceptions import UnauthenticatedError
from sportrent.core.security import (
    JWTIdentityVerifier,
    SupabaseIdentityVerifier,
    extract_bearer_token,
    get_identity_verifier,
)

from conftest import TEST_JWT_SECRET, make_token


def _request(headers):
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "headers": raw})


@pytest.fixture
def verifier():
    return JWTIdentityVerifier(TEST_JWT_SECRET)


def test_valid_token(verifier):
    assert verifier.verify(make_token("user-a")) == "user-a"


@pytest.mark.parametrize("token", [
    make_token("user-a", secret="some-other-secret"),
    make_token("user-a", expires_in=-60),
    make_token("user-a", audience="anon"),
    "not-a-jwt",
    "",
    None,
])
def test_bad_tokens_fail_closed(verifier, token):
    with pytest.raises(UnauthenticatedError):
        verifier.verify(token)


def test_token_without_subject(verifier):
    from jose import jwt
    token = jwt.encode({"aud": "authenticated"}, TEST_JWT_SECRET, algorithm="HS256")
    with pytest.raises(UnauthenticatedError):
        verifier.verify(token)


def test_verifier_needs_secret():
    with pytest.raises(ValueError):
        JWTIdentityVerifier("")


def test_supabase_verifier_returns_user_id():
    client = SimpleNamespace(auth=SimpleNamespace(
        get_user=lambda token: SimpleNamespace(user=SimpleNamespace(id="sb-user-1"))
    ))
    assert SupabaseIdentityVerifier(client).verify("token") == "sb-user-1"


def test_supabase_verifier_fails_closed():
    def reject(token):
        raise RuntimeError("invalid JWT")

    client = SimpleNamespace(auth=SimpleNamespace(get_user=reject))
    with pytest.raises(UnauthenticatedError):
        SupabaseIdentityVerifier(client).verify("token")

    empty = SimpleNamespace(auth=SimpleNamespace(get_user=lambda token: SimpleNamespace(user=None)))
    with pytest.raises(UnauthenticatedError):
        SupabaseIdentityVerifier(empty).verify("token")


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Basic abc"},
    {"Authorization": "Bearer "},
    {"Authorization": "Bearer"},
])
def test_malformed_authorization_header(headers):
    with pytest.raises(UnauthenticatedError):
        extract_bearer_token(_request(headers))


def test_bearer_token_extracted():
    assert extract_bearer_token(_request({"Authorization": "Bearer abc.def"})) == "abc.def"


def test_provider_selection(monkeypatch):
    get_identity_verifier.cache_clear()
    monkeypatch.setattr(security.settings, "AUTH_PROVIDER", "jwt")
    monkeypatch.setattr(security.settings, "SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    try:
        assert isinstance(get_identity_verifier(), JWTIdentityVerifier)
        get_identity_verifier.cache_clear()
        monkeypatch.setattr(security.settings, "AUTH_PROVIDER", "carrier-pigeon")
        with pytest.raises(ValueError):
            get_identity_verifier()
    finally:
        get_identity_verifier.cache_clear()
