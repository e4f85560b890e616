"""
HTTP transport layer for the XGate API
Sends single requests, classifies failures, and records audit entries.
Retries live in xgate.client.retry; authentication in xgate.auth.
"""

import time
import uuid
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Mapping,
    Optional,
    TypeVar,
    Union,
)

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from xgate import __version__
from xgate.config.xgate_config import XGateConfig
from xgate.exceptions import (
    ApiError,
    NetworkError,
    RateLimitError,
    ValidationError,
    XGateError,
)
from xgate.utils.masking import redact_sensitive_data


# Type variable for generic response
T = TypeVar("T")

logger = logging.getLogger(__name__)

USER_AGENT = f"xgate-python-sdk/{__version__}"


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


QueryParams = Dict[str, Union[str, int, float, bool]]


@dataclass(frozen=True)
class RequestDescriptor:
    """A single outbound request; build a new one instead of mutating"""
    method: HttpMethod
    path: str
    params: Optional[QueryParams] = None
    json_body: Optional[Any] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def with_headers(self, headers: Mapping[str, str]) -> "RequestDescriptor":
        """Return a copy with ``headers`` merged over the existing ones"""
        merged = CaseInsensitiveDict(self.headers)
        merged.update(headers)
        return replace(self, headers=dict(merged))


@dataclass
class HttpResponse(Generic[T]):
    """HTTP response wrapper"""
    data: T
    status: int
    headers: Dict[str, str]
    duration: int  # milliseconds
    request_id: str


@dataclass
class HttpAuditEntry:
    """Audit log entry for HTTP requests"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None


class HttpClient:
    """
    HTTP transport for the XGate API

    Features:
    - Default and configured headers merged case-insensitively
    - Request ID generation for traceability
    - Failure classification into one SDK error per call
    - Redacted audit entries and debug logging
    - Connection keep-alive via session pooling

    The transport never sets ``Authorization``; callers pass it in the
    descriptor headers.

    Example:
        >>> client = HttpClient(XGateConfig())
        >>> response = client.get("/exchange-rates/USD/BRL")
        >>> print(response.data)
    """

    def __init__(
        self,
        config: XGateConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Create a new HTTP client instance

        Args:
            config: Resolved XGate configuration
            session: Optional pre-built session (connection pooling is
                configured only for sessions created here)
        """
        self.config = config
        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None
        self._session = session or self._create_session()
        self._session.headers.update(self._default_headers())

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        headers.update(self.config.custom_headers)
        return headers

    def _create_session(self) -> requests.Session:
        """Create requests session with connection pooling"""
        session = requests.Session()

        # Retries are decided by RetryPolicy, never by the adapter
        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=0,
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        if self.config.proxy_url:
            session.proxies.update({
                "http": self.config.proxy_url,
                "https": self.config.proxy_url,
            })

        return session

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability"""
        timestamp = hex(int(time.time() * 1000))[2:]
        unique_id = uuid.uuid4().hex[:8]
        return f"xgate-{timestamp}-{unique_id}"

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.config.get_resolved_base_url()}/{path.lstrip('/')}"

    def _merge_headers(
        self, descriptor: RequestDescriptor, request_id: str
    ) -> CaseInsensitiveDict:
        """Session defaults overlaid with descriptor headers; one entry per name"""
        headers = CaseInsensitiveDict(self._session.headers)
        headers.update(descriptor.headers)
        headers["X-Request-ID"] = request_id
        return headers

    def _parse_body(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _classify_error_response(self, response: requests.Response) -> XGateError:
        """Map an HTTP error status to exactly one SDK error"""
        if response.status_code == 422:
            return self._validation_error(response)

        if response.status_code == 429:
            return RateLimitError.from_response(response)

        return ApiError.from_response(response)

    def _validation_error(self, response: requests.Response) -> ValidationError:
        try:
            body = response.json()
        except ValueError:
            body = None

        message = "Unprocessable entity"
        field_errors: Dict[str, Any] = {}
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            for key in ("errors", "validation_errors"):
                if isinstance(body.get(key), dict):
                    field_errors = {
                        name: errors if isinstance(errors, list) else [str(errors)]
                        for name, errors in body[key].items()
                    }
                    break

        if not field_errors:
            field_errors = {"_general": [f"Validation failed: {message}"]}

        return ValidationError(
            f"Validation failed: {message}",
            field_errors=field_errors,
            status_code=422,
            details={"body": body},
        )

    def _create_audit_entry(
        self,
        descriptor: RequestDescriptor,
        url: str,
        headers: Mapping[str, str],
        request_id: str,
        start_time: float,
        response: Optional[requests.Response] = None,
        body: Any = None,
        error: Optional[Exception] = None,
    ) -> HttpAuditEntry:
        """Create audit log entry; ``body`` is the already parsed response body"""
        duration = int((time.time() - start_time) * 1000)

        response_data = None
        if response is not None:
            response_data = {
                "statusCode": response.status_code,
                "body": redact_sensitive_data(body),
            }

        return HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=descriptor.method.value,
            url=url,
            headers=redact_sensitive_data(dict(headers)),
            body=redact_sensitive_data(descriptor.json_body),
            response=response_data,
            duration=duration,
            success=error is None,
            error=str(error) if error else None,
        )

    @property
    def _audit_enabled(self) -> bool:
        """Whether an audit entry would be logged or delivered"""
        return self.config.debug or bool(self.config.enable_audit_log and self._audit_log_callback)

    def _log_audit(self, entry: HttpAuditEntry) -> None:
        """Log audit entry"""
        if self.config.debug:
            logger.debug(
                f"{entry.method} {entry.url} -> "
                f"{entry.response['statusCode'] if entry.response else 'no response'} "
                f"in {entry.duration}ms [{entry.request_id}]"
            )
        if self.config.enable_audit_log and self._audit_log_callback:
            self._audit_log_callback(entry)

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Set audit log callback"""
        self._audit_log_callback = callback

    def send(self, descriptor: RequestDescriptor) -> HttpResponse[Any]:
        """
        Send one request and return the parsed response

        Raises:
            NetworkError: The request never produced a response
            ValidationError: HTTP 422
            RateLimitError: HTTP 429
            ApiError: Any other status >= 400
        """
        start_time = time.time()
        request_id = self._generate_request_id()
        url = self._build_url(descriptor.path)
        headers = self._merge_headers(descriptor, request_id)
        timeout_seconds = self.config.timeout / 1000.0

        if self.config.debug:
            logger.debug(
                f"HTTP request {descriptor.method.value} {url} "
                f"headers={redact_sensitive_data(dict(headers))} "
                f"body={redact_sensitive_data(descriptor.json_body)}"
            )

        request = requests.Request(
            method=descriptor.method.value,
            url=url,
            headers=dict(headers),
            params=descriptor.params,
            json=descriptor.json_body,
        )
        prepared = request.prepare()

        try:
            settings = self._session.merge_environment_settings(
                prepared.url, {}, None, None, None
            )
            response = self._session.send(prepared, timeout=timeout_seconds, **settings)
        except requests.exceptions.RequestException as e:
            error = NetworkError.from_exception(e)
            if self._audit_enabled:
                self._log_audit(self._create_audit_entry(
                    descriptor, url, headers, request_id, start_time, error=error
                ))
            logger.error(f"HTTP request error {descriptor.method.value} {url}: {error}")
            raise error from e

        if response.status_code >= 400:
            api_error = self._classify_error_response(response)
            if self._audit_enabled:
                self._log_audit(self._create_audit_entry(
                    descriptor, url, headers, request_id, start_time,
                    response=response, body=self._parse_body(response), error=api_error,
                ))
            raise api_error

        data = self._parse_body(response)
        if self._audit_enabled:
            self._log_audit(self._create_audit_entry(
                descriptor, url, headers, request_id, start_time, response=response, body=data
            ))

        return HttpResponse(
            data=data,
            status=response.status_code,
            headers=dict(response.headers),
            duration=int((time.time() - start_time) * 1000),
            request_id=request_id,
        )

    def request(
        self,
        method: Union[HttpMethod, str],
        path: str,
        data: Optional[Any] = None,
        params: Optional[QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse[Any]:
        """Build a descriptor and send it"""
        return self.send(RequestDescriptor(
            method=method if isinstance(method, HttpMethod) else HttpMethod(method.upper()),
            path=path,
            params=params,
            json_body=data,
            headers=dict(headers or {}),
        ))

    def get(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse[Any]:
        """Perform GET request"""
        return self.request(HttpMethod.GET, path, params=params, headers=headers)

    def post(
        self,
        path: str,
        data: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse[Any]:
        """Perform POST request"""
        return self.request(HttpMethod.POST, path, data=data, headers=headers)

    def put(
        self,
        path: str,
        data: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse[Any]:
        """Perform PUT request"""
        return self.request(HttpMethod.PUT, path, data=data, headers=headers)

    def delete(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse[Any]:
        """Perform DELETE request"""
        return self.request(HttpMethod.DELETE, path, headers=headers)

    def patch(
        self,
        path: str,
        data: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse[Any]:
        """Perform PATCH request"""
        return self.request(HttpMethod.PATCH, path, data=data, headers=headers)

    @property
    def base_url(self) -> str:
        """Get base URL"""
        return self.config.get_resolved_base_url()

    @property
    def session(self) -> requests.Session:
        return self._session

    def close(self) -> None:
        """Close the HTTP session"""
        self._session.close()

    def __enter__(self) -> "HttpClient":
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit"""
        self.close()
