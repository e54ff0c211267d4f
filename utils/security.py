"""
security helpers:
- Argon2 password hashing via argon2-cffi
- TokenService: JWT access/refresh tokens via PyJWT, one secret per token class
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError

from utils.errors import ConfigError

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


class TokenError(Exception):
    """Token rejected. Callers treat every subclass as "invalid or expired"."""


class TokenInvalid(TokenError):
    pass


class TokenExpired(TokenError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Mints and verifies the two token classes.

    Access and refresh tokens are signed with different secrets, so a token of
    one class never verifies as the other.
    """

    def __init__(
        self,
        access_secret: str | None,
        refresh_secret: str | None,
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ):
        if not access_secret or not refresh_secret:
            raise ConfigError("JWT_SECRET and REFRESH_SECRET must be set")
        self._secrets = {ACCESS: access_secret, REFRESH: refresh_secret}
        self._expires = {ACCESS: access_expires, REFRESH: refresh_expires}
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenService":
        return cls(
            access_secret=config.get("JWT_SECRET"),
            refresh_secret=config.get("REFRESH_SECRET"),
            access_expires=config.get("ACCESS_TOKEN_EXPIRES", timedelta(minutes=15)),
            refresh_expires=config.get("REFRESH_TOKEN_EXPIRES", timedelta(days=7)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    @property
    def access_expires(self) -> timedelta:
        return self._expires[ACCESS]

    @property
    def refresh_expires(self) -> timedelta:
        return self._expires[REFRESH]

    def issue_access_token(self, claims: Dict[str, Any]) -> str:
        return self._issue(ACCESS, claims)

    def issue_refresh_token(self, claims: Dict[str, Any]) -> str:
        return self._issue(REFRESH, claims)

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return self._verify(ACCESS, token)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._verify(REFRESH, token)

    def _issue(self, token_type: str, claims: Dict[str, Any]) -> str:
        now = _now()
        payload = dict(claims)
        payload.update(
            {
                "type": token_type,
                "iat": int(now.timestamp()),
                "exp": int((now + self._expires[token_type]).timestamp()),
            }
        )
        return jwt.encode(payload, self._secrets[token_type], algorithm=self.algorithm)

    def _verify(self, token_type: str, token: str) -> Dict[str, Any]:
        if not token:
            raise TokenInvalid("Invalid token: empty token")
        try:
            decoded = jwt.decode(
                token,
                self._secrets[token_type],
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token expired")
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(f"Invalid token: {exc}")

        if decoded.get("type") != token_type:
            raise TokenInvalid("Wrong token type")
        return decoded
