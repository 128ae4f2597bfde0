"""
Tests for token and password helpers.
"""

from datetime import timedelta

import pytest
from jose import jwt

from core.security import (
    TOKEN_AUDIENCE,
    TOKEN_ISSUER,
    create_access_token,
    decode_token,
    generate_secure_token,
    hash_password,
    hash_token,
    verify_password,
)

SECRET = "unit-test-signing-key"


@pytest.mark.unit
class TestAccessTokens:
    """Test JWT creation and validation."""

    def test_round_trip_carries_standard_claims(self) -> None:
        token = create_access_token({"sub": "user-1"}, SECRET)

        payload = decode_token(token, SECRET)

        assert payload is not None
        assert payload["sub"] == "user-1"
        assert payload["iss"] == TOKEN_ISSUER
        assert payload["aud"] == TOKEN_AUDIENCE
        assert payload["type"] == "access"
        assert payload["jti"]

    def test_each_token_has_unique_jti(self) -> None:
        first = decode_token(create_access_token({"sub": "user-1"}, SECRET), SECRET)
        second = decode_token(create_access_token({"sub": "user-1"}, SECRET), SECRET)

        assert first["jti"] != second["jti"]

    def test_expired_token_is_rejected(self) -> None:
        token = create_access_token({"sub": "user-1"}, SECRET, expires_delta=timedelta(seconds=-5))

        assert decode_token(token, SECRET) is None

    def test_wrong_type_is_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "user-1", "type": "refresh", "iss": TOKEN_ISSUER, "aud": TOKEN_AUDIENCE},
            SECRET,
            algorithm="HS256",
        )

        assert decode_token(token, SECRET) is None
        assert decode_token(token, SECRET, expected_type="refresh") is not None

    def test_wrong_audience_is_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "user-1", "type": "access", "iss": TOKEN_ISSUER, "aud": "someone-else"},
            SECRET,
            algorithm="HS256",
        )

        assert decode_token(token, SECRET) is None

    def test_token_from_another_key_is_rejected(self) -> None:
        token = create_access_token({"sub": "user-1"}, "some-other-key")

        assert decode_token(token, SECRET) is None

    def test_garbage_is_rejected(self) -> None:
        assert decode_token("definitely.not.ajwt", SECRET) is None


@pytest.mark.unit
class TestOpaqueTokens:
    """Test session token helpers."""

    def test_generated_tokens_are_unique(self) -> None:
        assert generate_secure_token() != generate_secure_token()

    def test_hash_is_stable_hex_digest(self) -> None:
        digest = hash_token("abc")

        assert digest == hash_token("abc")
        assert len(digest) == 64
        assert digest != hash_token("abd")


@pytest.mark.unit
class TestPasswords:
    """Test Argon2 password hashing."""

    def test_hash_and_verify(self) -> None:
        password_hash = hash_password("correct-horse-battery")

        assert password_hash.startswith("$argon2id$")
        assert verify_password("correct-horse-battery", password_hash) is True

    def test_wrong_password_fails(self) -> None:
        password_hash = hash_password("correct-horse-battery")

        assert verify_password("wrong-horse-battery", password_hash) is False

    def test_missing_or_corrupt_hash_fails(self) -> None:
        assert verify_password("anything-at-all", None) is False
        assert verify_password("anything-at-all", "not-an-argon2-hash") is False

    def test_short_password_is_refused(self) -> None:
        with pytest.raises(ValueError):
            hash_password("short")
