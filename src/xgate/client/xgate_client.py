"""
XGate API client

Entry point of the SDK: wires configuration, transport, retry policy and
authentication together and exposes the resource services.
"""

import logging
from decimal import Decimal
from functools import cached_property
from typing import Any, Dict, Mapping, Optional, Union

from xgate import __version__
from xgate.auth.authentication_manager import AuthenticationManager
from xgate.auth.token_store import TokenStore
from xgate.client.http_client import HttpClient, HttpMethod, RequestDescriptor
from xgate.client.retry import RetryPolicy
from xgate.config.config_loader import ConfigLoader
from xgate.config.xgate_config import XGateConfig
from xgate.exceptions import ApiError, AuthenticationError
from xgate.models.exchange_rate import ExchangeRate
from xgate.services import (
    CustomerService,
    DepositService,
    ExchangeRateService,
    PixService,
    WithdrawService,
)
from xgate.utils.logger import configure_logging

logger = logging.getLogger(__name__)


class XGateClient:
    """
    Client for the XGate payments API

    All resource calls go through :meth:`request`, the only place that
    attaches the ``Authorization`` header.

    Example:
        >>> with XGateClient({"environment": "development"}) as client:
        ...     client.authenticate("user@example.com", "secret")
        ...     customer = client.customers.create("Ana", "ana@example.com")
        ...     rate = client.get_exchange_rate("USD", "BRL")
    """

    def __init__(
        self,
        config: Union[XGateConfig, Dict[str, Any], None] = None,
        token_store: Optional[TokenStore] = None,
        http_client: Optional[HttpClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
        setup_logging: bool = False,
    ) -> None:
        """
        Args:
            config: Resolved config, a dict of overrides, or None to read
                the ``XGATE_*`` environment variables
            token_store: Token storage (a fresh in-memory store by default)
            http_client: Transport (built from config by default)
            retry_policy: Retry policy (built from config by default)
            setup_logging: Install the SDK log handler from config
        """
        self.config = self._resolve_config(config)
        if setup_logging:
            configure_logging(self.config)

        self._token_store = token_store or TokenStore(ttl_seconds=self.config.token_ttl)
        self._http_client = http_client or HttpClient(self.config)
        self._retry_policy = retry_policy or RetryPolicy.from_config(self.config)
        self._auth = AuthenticationManager(
            self._http_client, self._token_store, retry_policy=self._retry_policy
        )

        logger.info(
            f"XGateClient {__version__} initialized "
            f"environment={self.config.environment.value} "
            f"base_url={self.config.get_resolved_base_url()}"
        )

    def _resolve_config(
        self, config: Union[XGateConfig, Dict[str, Any], None]
    ) -> XGateConfig:
        if isinstance(config, XGateConfig):
            return config
        loader = ConfigLoader()
        if config is None:
            return loader.load(env=True)
        return loader.load(env=False, config=config)

    # Authentication

    def authenticate(self, email: str, password: str) -> bool:
        """Log in and keep the token for subsequent requests"""
        try:
            return self._auth.login(email, password)
        except AuthenticationError as e:
            logger.error(f"Authentication failed: {e}")
            raise

    def is_authenticated(self) -> bool:
        return self._auth.is_authenticated()

    def logout(self) -> bool:
        return self._auth.logout()

    # Requests

    def request(
        self,
        method: Union[HttpMethod, str],
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Send an authenticated request and return the parsed response body

        Raises:
            AuthenticationError: Not logged in, or the API rejected the
                token (the session is cleared in that case)
            RetryExhaustedError: Retryable failures on every attempt
            XGateError: Any other classified failure
        """
        descriptor = RequestDescriptor(
            method=method if isinstance(method, HttpMethod) else HttpMethod(method.upper()),
            path=path,
            params=dict(params) if params else None,
            json_body=json,
        ).with_headers(self._auth.get_authorization_header())

        def send() -> Any:
            try:
                return self._http_client.send(descriptor)
            except ApiError as e:
                if e.is_unauthorized:
                    self._auth.invalidate()
                    raise AuthenticationError.token_expired(cause=e) from e
                raise

        return self._retry_policy.execute(send).data

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request(HttpMethod.GET, path, params=params)

    def post(self, path: str, data: Optional[Any] = None) -> Any:
        return self.request(HttpMethod.POST, path, json=data)

    def put(self, path: str, data: Optional[Any] = None) -> Any:
        return self.request(HttpMethod.PUT, path, json=data)

    def delete(self, path: str) -> Any:
        return self.request(HttpMethod.DELETE, path)

    # Services

    @cached_property
    def customers(self) -> CustomerService:
        return CustomerService(self.request)

    @cached_property
    def pix(self) -> PixService:
        return PixService(self.request)

    @cached_property
    def deposits(self) -> DepositService:
        return DepositService(self.request)

    @cached_property
    def withdrawals(self) -> WithdrawService:
        return WithdrawService(self.request)

    @cached_property
    def exchange_rates(self) -> ExchangeRateService:
        return ExchangeRateService(self.request)

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        return self.exchange_rates.get_exchange_rate(from_currency, to_currency)

    def convert_amount(
        self,
        amount: Union[Decimal, float, int, str],
        from_currency: str,
        to_currency: str = "USDT",
    ) -> Dict[str, Any]:
        return self.exchange_rates.convert_amount(amount, from_currency, to_currency)

    def get_crypto_rate(self, crypto_currency: str, fiat_currency: str) -> ExchangeRate:
        return self.exchange_rates.get_crypto_rate(crypto_currency, fiat_currency)

    # Accessors

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    @property
    def authentication_manager(self) -> AuthenticationManager:
        return self._auth

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def version(self) -> str:
        return __version__

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "XGateClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
