"""
Client side of the admin session handshake.

ClientSession is the state a browser would keep in local storage: the access
token and when it expires. The refresh token never appears here; it lives in
the HTTP client's cookie jar, as an HTTP-only cookie does in a browser.

AdminSessionClient.ensure_session() is the protected-page check: refresh when
no usable access token is held, then verify, at most once per call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
import jwt

logger = logging.getLogger(__name__)

SIGN_IN_PAGE = "/auth/sign-in"

SESSION_EXPIRED = "session_expired"
UNAUTHORIZED = "unauthorized"
SERVER_ERROR = "server_error"


class SessionError(Exception):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


@dataclass
class ClientSession:
    access_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_token(cls, token: str) -> "ClientSession":
        """Read exp from the token without verifying it; only the server can verify."""
        claims = jwt.decode(token, options={"verify_signature": False})
        exp = claims.get("exp")
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
        return cls(access_token=token, expires_at=expires_at)

    def is_usable(self, now: datetime | None = None) -> bool:
        if not self.access_token:
            return False
        if self.expires_at is None:
            return True
        return (now or datetime.now(timezone.utc)) < self.expires_at

    def clear(self) -> None:
        self.access_token = None
        self.expires_at = None


@dataclass
class SessionCheck:
    """Outcome of a protected-page check: either a user or a sign-in redirect."""
    user: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def redirect_to(self) -> Optional[str]:
        if self.error is None:
            return None
        return f"{SIGN_IN_PAGE}?error={self.error}"


@dataclass
class AdminSessionClient:
    http: httpx.Client
    api_prefix: str = "/api"
    session: ClientSession = field(default_factory=ClientSession)

    @classmethod
    def connect(cls, base_url: str, timeout: float = 10.0) -> "AdminSessionClient":
        return cls(http=httpx.Client(base_url=base_url, timeout=timeout))

    def _post(self, path: str, **kwargs) -> httpx.Response:
        return self.http.post(f"{self.api_prefix}{path}", **kwargs)

    @staticmethod
    def _error(response: httpx.Response) -> SessionError:
        try:
            message = response.json().get("error", response.reason_phrase)
        except ValueError:
            message = response.reason_phrase
        return SessionError(message, status=response.status_code)

    def sign_in(self, username: str, password: str) -> ClientSession:
        response = self._post("/auth/sign-in", json={"username": username, "password": password})
        if response.status_code != 200:
            raise self._error(response)
        self.session = ClientSession.from_token(response.json()["accessToken"])
        return self.session

    def refresh(self) -> ClientSession:
        """Trade the refresh cookie for a new access token."""
        response = self._post("/auth/refresh")
        if response.status_code != 200:
            raise self._error(response)
        token = response.json().get("accessToken")
        if not token:
            raise SessionError("Refresh returned no access token", status=response.status_code)
        self.session = ClientSession.from_token(token)
        return self.session

    def verify(self) -> Dict[str, Any]:
        response = self._post("/auth/verify", json={"accessToken": self.session.access_token})
        body = response.json()
        if response.status_code != 200 or not body.get("valid"):
            raise SessionError(body.get("error", "Invalid or expired token"), status=response.status_code)
        return body["user"]

    def sign_out(self) -> None:
        response = self._post("/auth/sign-out")
        self.session.clear()
        if response.status_code != 200:
            raise self._error(response)

    def ensure_session(self) -> SessionCheck:
        try:
            if not self.session.is_usable():
                try:
                    self.refresh()
                except SessionError as exc:
                    if exc.status is not None and exc.status >= 500:
                        raise
                    return SessionCheck(error=SESSION_EXPIRED)
            try:
                return SessionCheck(user=self.verify())
            except SessionError as exc:
                if exc.status is not None and exc.status >= 500:
                    raise
                self.session.clear()
                return SessionCheck(error=UNAUTHORIZED)
        except (SessionError, httpx.HTTPError, ValueError) as exc:
            logger.error("Auth check failed: %s", exc)
            self.session.clear()
            return SessionCheck(error=SERVER_ERROR)
