"""
Tests for session token issuing and verification.
"""

from datetime import timedelta

import pytest
from jose import jwt

from app.auth.jwt import ExpiredToken, InvalidToken, TokenService, ValidToken


def test_valid_token_carries_identity(tokens):
    token = tokens.issue(user_id=42, email="ada@example.com", role="investor")

    result = tokens.verify(token)

    assert isinstance(result, ValidToken)
    assert result.claims.user_id == 42
    assert result.claims.email == "ada@example.com"
    assert result.claims.role == "investor"
    assert result.claims.expires_at - result.claims.issued_at == timedelta(days=7)


def test_every_token_is_unique(tokens):
    first = tokens.issue(user_id=1, email="a@example.com", role="investor")
    second = tokens.issue(user_id=1, email="a@example.com", role="investor")
    assert first != second


def test_zero_lifetime_is_expired(tokens):
    token = tokens.issue(user_id=1, email="a@example.com", role="investor", ttl=timedelta(0))
    assert tokens.verify(token) == ExpiredToken()


def test_past_expiry_is_expired(tokens):
    token = tokens.issue(user_id=1, email="a@example.com", role="investor", ttl=timedelta(hours=-1))
    assert isinstance(tokens.verify(token), ExpiredToken)


def test_wrong_secret_is_invalid(tokens):
    other = TokenService(secret_key="some-other-secret")
    token = other.issue(user_id=1, email="a@example.com", role="investor")
    assert isinstance(tokens.verify(token), InvalidToken)


def test_wrong_secret_is_invalid_even_when_expired(tokens):
    other = TokenService(secret_key="some-other-secret")
    token = other.issue(user_id=1, email="a@example.com", role="investor", ttl=timedelta(hours=-1))
    assert isinstance(tokens.verify(token), InvalidToken)


def test_tampered_payload_is_invalid(tokens):
    token = tokens.issue(user_id=1, email="a@example.com", role="investor")
    header, payload, signature = token.split(".")
    forged = tokens.issue(user_id=1, email="a@example.com", role="admin").split(".")[1]
    assert isinstance(tokens.verify(f"{header}.{forged}.{signature}"), InvalidToken)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "Bearer x.y.z"])
def test_garbage_is_invalid(tokens, garbage):
    assert isinstance(tokens.verify(garbage), InvalidToken)


def test_wrong_issuer_is_invalid(tokens, settings):
    other = TokenService(secret_key=settings.jwt_secret_key, issuer="someone-else")
    token = other.issue(user_id=1, email="a@example.com", role="investor")
    assert isinstance(tokens.verify(token), InvalidToken)


def test_missing_claims_are_invalid(tokens, settings):
    token = jwt.encode(
        {"sub": "1", "iat": 0, "exp": 9999999999, "iss": settings.token_issuer},
        settings.jwt_secret_key,
        algorithm="HS256",
    )
    result = tokens.verify(token)
    assert isinstance(result, InvalidToken)
    assert "email" in result.reason


def test_non_numeric_subject_is_invalid(tokens, settings):
    token = jwt.encode(
        {
            "sub": "not-a-number",
            "email": "a@example.com",
            "role": "investor",
            "iat": 0,
            "exp": 9999999999,
            "iss": settings.token_issuer,
        },
        settings.jwt_secret_key,
        algorithm="HS256",
    )
    assert isinstance(tokens.verify(token), InvalidToken)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenService(secret_key="")
