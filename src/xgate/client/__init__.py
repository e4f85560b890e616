"""
HTTP client module for XGate SDK
"""

from xgate.client.http_client import (
    HttpClient,
    HttpMethod,
    HttpResponse,
    HttpAuditEntry,
    RequestDescriptor,
)
from xgate.client.retry import RetryPolicy, RetryState
from xgate.client.xgate_client import XGateClient

__all__ = [
    "XGateClient",
    "HttpClient",
    "HttpMethod",
    "HttpResponse",
    "HttpAuditEntry",
    "RequestDescriptor",
    "RetryPolicy",
    "RetryState",
]
