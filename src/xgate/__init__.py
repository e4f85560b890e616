"""
XGate Payments SDK for Python

Main entry point for the SDK
"""

# Defined before the imports below; the transport reads it for User-Agent
__version__ = "0.1.0"

from xgate.exceptions import (
    XGateError,
    XGateErrorCategory,
    ValidationError,
    AuthenticationError,
    RateLimitError,
    NetworkError,
    ApiError,
    ConfigError,
    RetryExhaustedError,
)

# HTTP Client
from xgate.client import (
    XGateClient,
    HttpClient,
    HttpMethod,
    HttpResponse,
    HttpAuditEntry,
    RequestDescriptor,
    RetryPolicy,
)

# Authentication
from xgate.auth import AuthToken, TokenStore, AuthenticationManager

# Configuration
from xgate.config import (
    XGateConfig,
    XGateEnvironment,
    ConfigLoader,
    ConfigValidator,
    XGATE_BASE_URLS,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)

# Models
from xgate.models import (
    Customer,
    PixKey,
    PixKeyType,
    Transaction,
    ExchangeRate,
    Page,
)

# Error messages
from xgate.utils.error_formatter import ErrorFormatter

__all__ = [
    # Client
    "XGateClient",
    # HTTP Client
    "HttpClient",
    "HttpMethod",
    "HttpResponse",
    "HttpAuditEntry",
    "RequestDescriptor",
    "RetryPolicy",
    # Authentication
    "AuthToken",
    "TokenStore",
    "AuthenticationManager",
    # Exceptions
    "XGateError",
    "XGateErrorCategory",
    "ValidationError",
    "AuthenticationError",
    "RateLimitError",
    "NetworkError",
    "ApiError",
    "ConfigError",
    "RetryExhaustedError",
    "ErrorFormatter",
    # Configuration
    "XGateConfig",
    "XGateEnvironment",
    "ConfigLoader",
    "ConfigValidator",
    "XGATE_BASE_URLS",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    # Models
    "Customer",
    "PixKey",
    "PixKeyType",
    "Transaction",
    "ExchangeRate",
    "Page",
]
