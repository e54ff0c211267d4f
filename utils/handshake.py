"""
Admin session handshake: sign-in, sign-up, verify, refresh.

No session state is kept server-side. A client is Authenticated while it holds
a valid access token, AccessExpired while only its refresh cookie is valid,
and Unauthenticated otherwise. Refresh tokens are not rotated and access
tokens cannot be revoked before they expire.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from models.credential_store import CredentialStore
from utils.errors import AuthError, ConflictError, ValidationError
from utils.security import TokenError, TokenService, hash_password, verify_password

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
INVALID_CREDENTIALS = "Invalid username or password"

# Verified against when the username is unknown, so both failures cost one argon2 verify
_UNKNOWN_USER_HASH = hash_password("unknown-user-placeholder")


class SessionHandshake:
    def __init__(self, tokens: TokenService, credentials: CredentialStore, max_admins: int = 2):
        self.tokens = tokens
        self.credentials = credentials
        self.max_admins = max_admins

    def sign_in(self, username: str, password: str) -> Tuple[str, str]:
        """Return (access_token, refresh_token) for a valid username/password pair."""
        if not username or not password:
            raise ValidationError("Username and password are required")

        admin = self.credentials.find_by_username(username)
        stored_hash = admin.password_hash if admin is not None else _UNKNOWN_USER_HASH
        # Unknown user and wrong password are reported identically
        if not verify_password(password, stored_hash) or admin is None:
            logger.info("Rejected sign-in for username %r", username)
            raise AuthError(INVALID_CREDENTIALS)

        access_token = self.tokens.issue_access_token(
            {"id": admin.id, "username": admin.username, "role": ADMIN_ROLE}
        )
        refresh_token = self.tokens.issue_refresh_token({"id": admin.id})
        logger.info("Admin %s signed in", admin.username)
        return access_token, refresh_token

    def sign_up(self, full_name: str, username: str, email: str, password: str):
        if not full_name or not username or not email or not password:
            raise ValidationError("All fields are required")

        if self.credentials.count() >= self.max_admins:
            raise AuthError("There are already two admins", status=403)
        if self.credentials.username_exists(username):
            raise ConflictError("Username is taken")
        if self.credentials.email_exists(email):
            raise ConflictError("Email is registered")

        admin = self.credentials.create(
            full_name=full_name,
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        logger.info("Registered admin %s", admin.username)
        return admin

    def verify(self, access_token: str | None) -> Dict[str, Any]:
        """Decoded identity claims of a valid access token."""
        if not access_token:
            raise AuthError("No access token")
        try:
            return self.tokens.verify_access_token(access_token)
        except TokenError as exc:
            logger.debug("Access token rejected: %s", exc)
            raise AuthError("Invalid or expired token")

    def refresh(self, refresh_token: str | None) -> str:
        """Mint a new access token. The refresh token itself is left untouched."""
        if not refresh_token:
            raise AuthError("No refresh token")
        try:
            decoded = self.tokens.verify_refresh_token(refresh_token)
        except TokenError as exc:
            logger.debug("Refresh token rejected: %s", exc)
            raise AuthError("Invalid or expired refresh token", status=403)
        return self.tokens.issue_access_token({"id": decoded["id"], "role": ADMIN_ROLE})
