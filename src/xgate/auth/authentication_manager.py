"""
Authentication against the XGate API

Logs in with email and password, keeps the bearer token in a TokenStore,
and hands out the Authorization header for authenticated requests.
"""

import logging
from typing import Any, Dict, Optional

from xgate.auth.token_store import TokenStore
from xgate.client.http_client import HttpClient, HttpMethod, RequestDescriptor
from xgate.client.retry import RetryPolicy
from xgate.exceptions import (
    ApiError,
    AuthenticationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/token"


class AuthenticationManager:
    """
    Manages the session token of one client

    States: unauthenticated until ``login`` succeeds, authenticated until
    ``logout``, ``invalidate`` or TTL eviction. There is no refresh grant;
    re-authentication is a fresh login.

    Example:
        >>> auth = AuthenticationManager(http_client, TokenStore())
        >>> auth.login("user@example.com", "secret")
        True
        >>> auth.get_authorization_header()
        {'Authorization': 'Bearer ...'}
    """

    def __init__(
        self,
        http_client: HttpClient,
        token_store: TokenStore,
        retry_policy: Optional[RetryPolicy] = None,
        login_path: str = LOGIN_PATH,
    ) -> None:
        self._http_client = http_client
        self._token_store = token_store
        self._retry_policy = retry_policy
        self._login_path = login_path

    def login(self, email: str, password: str) -> bool:
        """
        Authenticate with email and password and store the returned token

        Any previously stored token is replaced on success.

        Raises:
            ValidationError: Email or password is empty
            AuthenticationError: Credentials rejected, or no token returned
            NetworkError / RateLimitError / ApiError / RetryExhaustedError:
                Transport failures that are not about the credentials
        """
        if not email:
            raise ValidationError.required("email")
        if not password:
            raise ValidationError.required("password")

        descriptor = RequestDescriptor(
            method=HttpMethod.POST,
            path=self._login_path,
            json_body={"email": email, "password": password},
        )

        try:
            if self._retry_policy is not None:
                response = self._retry_policy.execute(
                    lambda: self._http_client.send(descriptor)
                )
            else:
                response = self._http_client.send(descriptor)
        except ApiError as e:
            if e.status_code == 401:
                raise AuthenticationError.invalid_credentials(email, cause=e) from e
            if e.is_client_error:
                raise AuthenticationError.login_failed(e.status_code, str(e), cause=e) from e
            raise
        except ValidationError as e:
            raise AuthenticationError.login_failed(e.status_code, str(e), cause=e) from e

        token = self._extract_token(response.data)
        if not token:
            raise AuthenticationError.login_failed(
                response.status, "access token not found in response"
            )

        self._token_store.set(token)
        logger.info("Authenticated with XGate API")
        return True

    def _extract_token(self, data: Any) -> Optional[str]:
        if isinstance(data, dict):
            token = data.get("token")
            if isinstance(token, str) and token.strip():
                return token.strip()
        return None

    def get_token(self) -> Optional[str]:
        """Get the stored token value, or None when absent or expired"""
        token = self._token_store.get()
        if token is None or not token.value:
            return None
        return token.value

    def is_authenticated(self) -> bool:
        return self.get_token() is not None

    def get_authorization_header(self) -> Dict[str, str]:
        """
        Get the Authorization header for API requests

        Raises:
            AuthenticationError: No token is stored
        """
        token = self.get_token()
        if token is None:
            raise AuthenticationError.missing_token()
        return {"Authorization": f"Bearer {token}"}

    def logout(self) -> bool:
        """Clear the stored token; safe to call when already logged out"""
        self._token_store.clear()
        logger.info("Logged out from XGate API")
        return True

    def invalidate(self) -> None:
        """Drop a token the API no longer accepts"""
        if self._token_store.get() is not None:
            logger.warning("Authentication token rejected by API; clearing session")
        self._token_store.clear()
