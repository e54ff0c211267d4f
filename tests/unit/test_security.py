"""Tests for utils.security: password hashing and the token service."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from utils.errors import ConfigError
from utils.security import (
    TokenService,
    TokenExpired,
    TokenInvalid,
    TokenError,
    hash_password,
    verify_password,
)

ACCESS_SECRET = "access-secret-for-unit-tests-0123456789"
REFRESH_SECRET = "refresh-secret-for-unit-tests-0123456789"


@pytest.fixture
def tokens():
    return TokenService(ACCESS_SECRET, REFRESH_SECRET)


class TestPasswordHashing:
    def test_hash_is_argon2_and_salted(self):
        first = hash_password("correct")
        second = hash_password("correct")
        assert first.startswith("$argon2")
        assert first != second

    def test_verify_password(self):
        hashed = hash_password("correct")
        assert verify_password("correct", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_verify_against_garbage_hash_is_false(self):
        assert verify_password("correct", "not-a-hash") is False


class TestTokenService:
    def test_missing_secret_is_a_config_error(self):
        """The service refuses to exist without both secrets."""
        with pytest.raises(ConfigError):
            TokenService(None, REFRESH_SECRET)
        with pytest.raises(ConfigError):
            TokenService(ACCESS_SECRET, "")

    def test_access_token_round_trip(self, tokens):
        token = tokens.issue_access_token({"id": "a1", "username": "admin", "role": "admin"})
        claims = tokens.verify_access_token(token)
        assert claims["id"] == "a1"
        assert claims["role"] == "admin"
        assert claims["type"] == "access"

    def test_access_token_expires_in_15_minutes(self, tokens):
        now = datetime.now(timezone.utc)
        claims = tokens.verify_access_token(tokens.issue_access_token({"id": "a1"}))
        exp = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        assert abs((exp - (now + timedelta(minutes=15))).total_seconds()) < 5

    def test_refresh_token_expires_in_7_days(self, tokens):
        now = datetime.now(timezone.utc)
        claims = tokens.verify_refresh_token(tokens.issue_refresh_token({"id": "a1"}))
        exp = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        assert abs((exp - (now + timedelta(days=7))).total_seconds()) < 5

    def test_refresh_token_rejected_as_access_token(self, tokens):
        refresh = tokens.issue_refresh_token({"id": "a1"})
        with pytest.raises(TokenInvalid):
            tokens.verify_access_token(refresh)

    def test_access_token_rejected_as_refresh_token(self, tokens):
        access = tokens.issue_access_token({"id": "a1"})
        with pytest.raises(TokenInvalid):
            tokens.verify_refresh_token(access)

    def test_type_claim_alone_does_not_cross_secrets(self, tokens):
        """A token forged with the access secret but claiming type=refresh still fails."""
        now = datetime.now(timezone.utc)
        forged = jwt.encode(
            {"id": "a1", "type": "refresh", "iat": now, "exp": now + timedelta(days=7)},
            ACCESS_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenInvalid):
            tokens.verify_refresh_token(forged)

    def test_expired_access_token(self):
        expired = TokenService(ACCESS_SECRET, REFRESH_SECRET, access_expires=timedelta(seconds=-30))
        token = expired.issue_access_token({"id": "a1"})
        with pytest.raises(TokenExpired):
            expired.verify_access_token(token)

    def test_expired_refresh_token(self):
        expired = TokenService(ACCESS_SECRET, REFRESH_SECRET, refresh_expires=timedelta(seconds=-30))
        token = expired.issue_refresh_token({"id": "a1"})
        with pytest.raises(TokenExpired):
            expired.verify_refresh_token(token)

    def test_tampered_token(self, tokens):
        token = tokens.issue_access_token({"id": "a1"})
        with pytest.raises(TokenInvalid):
            tokens.verify_access_token(token[:-4] + "abcd")

    @pytest.mark.parametrize("token", ["", "not.a.token", "garbage"])
    def test_malformed_tokens(self, tokens, token):
        with pytest.raises(TokenError):
            tokens.verify_access_token(token)
