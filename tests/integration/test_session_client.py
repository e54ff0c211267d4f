"""Tests for the client side of the handshake, driven through httpx against the WSGI app."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from utils.security import TokenService
from utils.session import (
    SERVER_ERROR,
    SESSION_EXPIRED,
    UNAUTHORIZED,
    AdminSessionClient,
    ClientSession,
    SessionError,
)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct"


@pytest.fixture
def session_client(app):
    http = httpx.Client(transport=httpx.WSGITransport(app=app), base_url="http://localhost")
    yield AdminSessionClient(http=http)
    http.close()


def _mock_client(handler) -> AdminSessionClient:
    return AdminSessionClient(http=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://api"))


class TestClientSession:
    def test_from_token_reads_expiry(self, app):
        tokens = TokenService.from_config(app.config)
        session = ClientSession.from_token(tokens.issue_access_token({"id": "a1"}))
        remaining = session.expires_at - datetime.now(timezone.utc)
        assert timedelta(minutes=14) < remaining <= timedelta(minutes=15)
        assert session.is_usable()

    def test_expired_token_is_not_usable(self):
        session = ClientSession(access_token="t", expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))
        assert not session.is_usable()

    def test_empty_session(self):
        assert not ClientSession().is_usable()

    def test_clear(self):
        session = ClientSession(access_token="t", expires_at=datetime.now(timezone.utc))
        session.clear()
        assert session.access_token is None
        assert session.expires_at is None


class TestSignIn:
    def test_sign_in_keeps_refresh_token_out_of_session(self, session_client, admin):
        session = session_client.sign_in(ADMIN_USERNAME, ADMIN_PASSWORD)
        assert session.access_token
        assert session_client.http.cookies.get("refreshToken")
        assert session_client.http.cookies.get("refreshToken") != session.access_token

    def test_bad_credentials(self, session_client, admin):
        with pytest.raises(SessionError) as exc:
            session_client.sign_in(ADMIN_USERNAME, "wrong")
        assert exc.value.status == 401
        assert str(exc.value) == "Invalid username or password"


class TestEnsureSession:
    def test_signed_in(self, session_client, admin):
        session_client.sign_in(ADMIN_USERNAME, ADMIN_PASSWORD)
        check = session_client.ensure_session()
        assert check.ok
        assert check.user["id"] == admin.id
        assert check.redirect_to is None

    def test_refreshes_when_no_access_token(self, session_client, admin):
        session_client.sign_in(ADMIN_USERNAME, ADMIN_PASSWORD)
        session_client.session.clear()
        check = session_client.ensure_session()
        assert check.ok
        assert check.user["username"] == ADMIN_USERNAME
        assert session_client.session.is_usable()

    def test_locally_expired_token_triggers_refresh(self, session_client, admin):
        session_client.sign_in(ADMIN_USERNAME, ADMIN_PASSWORD)
        stale = session_client.session.access_token
        session_client.session.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        assert session_client.ensure_session().ok
        assert session_client.session.access_token != stale
        assert session_client.session.is_usable()

    def test_no_cookie_means_session_expired(self, session_client):
        check = session_client.ensure_session()
        assert check.error == SESSION_EXPIRED
        assert check.redirect_to == "/auth/sign-in?error=session_expired"

    def test_rejected_access_token_means_unauthorized(self, session_client, admin):
        session_client.session = ClientSession(access_token="not-a-jwt")
        check = session_client.ensure_session()
        assert check.error == UNAUTHORIZED
        assert session_client.session.access_token is None

    def test_after_sign_out(self, session_client, admin):
        session_client.sign_in(ADMIN_USERNAME, ADMIN_PASSWORD)
        session_client.sign_out()
        assert session_client.session.access_token is None
        assert session_client.http.cookies.get("refreshToken") is None
        assert session_client.ensure_session().error == SESSION_EXPIRED

    def test_server_failure_on_refresh(self):
        client = _mock_client(lambda request: httpx.Response(500, json={"error": "Internal Server Error"}))
        assert client.ensure_session().error == SERVER_ERROR

    def test_malformed_verify_response(self):
        client = _mock_client(lambda request: httpx.Response(200, text="<html>"))
        client.session = ClientSession(access_token="t")
        assert client.ensure_session().error == SERVER_ERROR

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _mock_client(handler)
        check = client.ensure_session()
        assert check.error == SERVER_ERROR
        assert check.redirect_to == "/auth/sign-in?error=server_error"
