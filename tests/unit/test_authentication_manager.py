"""
Authentication Manager Unit Tests
"""

import json
from typing import List

import pytest
import requests

from xgate.auth import AuthenticationManager, TokenStore
from xgate.client.http_client import HttpClient
from xgate.client.retry import RetryPolicy
from xgate.exceptions import (
    ApiError,
    AuthenticationError,
    NetworkError,
    ValidationError,
)

from tests.support import BASE_URL, ManualClock, QueueSession, header_count


@pytest.fixture
def token_store(clock: ManualClock) -> TokenStore:
    return TokenStore(ttl_seconds=3600, clock=clock)


@pytest.fixture
def auth(http_client: HttpClient, token_store: TokenStore) -> AuthenticationManager:
    return AuthenticationManager(http_client, token_store)


class TestLogin:
    """Tests for AuthenticationManager.login"""

    def test_login_stores_token(self, auth: AuthenticationManager, session: QueueSession):
        session.queue_response(200, {"token": "abc123"})

        assert auth.login("user@example.com", "secret") is True
        assert auth.is_authenticated() is True
        assert auth.get_token() == "abc123"

    def test_login_request(self, auth: AuthenticationManager, session: QueueSession):
        """Should POST credentials to the login endpoint without Authorization"""
        session.queue_response(200, {"token": "abc123"})

        auth.login("user@example.com", "secret")

        sent = session.last
        assert sent.method == "POST"
        assert sent.url == f"{BASE_URL}/auth/token"
        assert json.loads(sent.body) == {"email": "user@example.com", "password": "secret"}
        assert header_count(sent, "Authorization") == 0

    def test_login_replaces_existing_token(self, auth: AuthenticationManager, session: QueueSession):
        session.queue_response(200, {"token": "first"})
        session.queue_response(200, {"token": "second"})

        auth.login("user@example.com", "secret")
        auth.login("user@example.com", "secret")

        assert auth.get_token() == "second"

    @pytest.mark.parametrize("email,password,field", [
        ("", "secret", "email"),
        ("user@example.com", "", "password"),
    ])
    def test_login_requires_credentials(self, auth, session: QueueSession, email, password, field):
        with pytest.raises(ValidationError) as exc_info:
            auth.login(email, password)

        assert exc_info.value.field == field
        assert session.sent == []

    def test_invalid_credentials(self, auth: AuthenticationManager, session: QueueSession):
        session.queue_response(401, {"message": "Invalid credentials"})

        with pytest.raises(AuthenticationError) as exc_info:
            auth.login("user@example.com", "wrong")

        assert exc_info.value.reason == "invalid_credentials"
        assert exc_info.value.status_code == 401
        assert auth.is_authenticated() is False

    @pytest.mark.parametrize("status", [400, 403, 422])
    def test_other_client_errors_fail_login(self, auth, session: QueueSession, status):
        session.queue_response(status, {"message": "rejected"})

        with pytest.raises(AuthenticationError) as exc_info:
            auth.login("user@example.com", "secret")

        assert exc_info.value.reason == "login_failed"

    @pytest.mark.parametrize("body", [{}, {"token": ""}, {"token": "   "}, "OK"])
    def test_missing_token_fails_login(self, auth, session: QueueSession, body):
        session.queue_response(200, body)

        with pytest.raises(AuthenticationError) as exc_info:
            auth.login("user@example.com", "secret")

        assert exc_info.value.reason == "login_failed"
        assert auth.is_authenticated() is False

    def test_server_error_propagates(self, auth: AuthenticationManager, session: QueueSession):
        session.queue_response(500, {"message": "boom"})

        with pytest.raises(ApiError) as exc_info:
            auth.login("user@example.com", "secret")

        assert exc_info.value.status_code == 500

    def test_network_error_propagates(self, auth: AuthenticationManager, session: QueueSession):
        session.queue.append(requests.exceptions.ConnectionError("Connection refused"))

        with pytest.raises(NetworkError):
            auth.login("user@example.com", "secret")

    def test_login_retries_transient_failures(
        self, http_client: HttpClient, token_store: TokenStore, session: QueueSession, sleeps: List[float]
    ):
        auth = AuthenticationManager(
            http_client, token_store, retry_policy=RetryPolicy(sleep=sleeps.append)
        )
        session.queue_response(503, "unavailable")
        session.queue_response(200, {"token": "abc123"})

        assert auth.login("user@example.com", "secret") is True
        assert sleeps == [1.0]

    def test_custom_login_path(self, http_client: HttpClient, token_store: TokenStore, session: QueueSession):
        auth = AuthenticationManager(http_client, token_store, login_path="/login")
        session.queue_response(200, {"token": "abc123"})

        auth.login("user@example.com", "secret")

        assert session.last.url == f"{BASE_URL}/login"


class TestSession:
    """Tests for header, logout and expiry"""

    def test_authorization_header(self, auth: AuthenticationManager, token_store: TokenStore):
        token_store.set("abc123")
        assert auth.get_authorization_header() == {"Authorization": "Bearer abc123"}

    def test_authorization_header_without_token(self, auth: AuthenticationManager):
        """Should raise instead of returning an empty bearer value"""
        with pytest.raises(AuthenticationError) as exc_info:
            auth.get_authorization_header()

        assert exc_info.value.reason == "missing_token"

    def test_logout(self, auth: AuthenticationManager, session: QueueSession):
        session.queue_response(200, {"token": "abc123"})
        auth.login("user@example.com", "secret")

        assert auth.logout() is True
        assert auth.is_authenticated() is False

    def test_logout_when_logged_out(self, auth: AuthenticationManager):
        assert auth.logout() is True

    def test_expired_token(self, auth: AuthenticationManager, token_store: TokenStore, clock: ManualClock):
        token_store.set("abc123")
        clock.advance(3600)

        assert auth.is_authenticated() is False
        with pytest.raises(AuthenticationError):
            auth.get_authorization_header()

    def test_invalidate(self, auth: AuthenticationManager, token_store: TokenStore):
        token_store.set("abc123")
        auth.invalidate()
        assert auth.is_authenticated() is False
