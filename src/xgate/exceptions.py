"""Exception classes for XGate SDK"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

import requests
from pydantic import ValidationError as PydanticValidationError


class XGateErrorCategory(str, Enum):
    """XGate error category codes"""
    VALIDATION = "VAL"
    AUTH = "AUTH"
    RATE_LIMIT = "RATE"
    NETWORK = "NET"
    API = "API"
    CONFIG = "CONFIG"
    RETRY = "RETRY"
    UNKNOWN = "UNKNOWN"


class XGateError(Exception):
    """
    Base exception for XGate errors

    All errors in the SDK extend from this class.
    Provides consistent error handling and categorization.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> XGateErrorCategory:
        """Determine error category from code"""
        if not code:
            return XGateErrorCategory.UNKNOWN

        for category in XGateErrorCategory:
            if category is not XGateErrorCategory.UNKNOWN and code.startswith(category.value):
                return category

        return XGateErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "retryable": self.retryable,
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: XGateErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ValidationError(XGateError):
    """
    Validation error

    Raised for local argument validation and for HTTP 422 responses.
    ``field_errors`` maps a field name to its list of messages; errors that
    are not tied to a field live under ``_general``.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message, code="VALIDATION_ERROR", status_code=status_code, details=details
        )
        self.field_errors: Dict[str, List[str]] = dict(field_errors or {})
        self.field = field
        if self.field is None and self.field_errors:
            first = next(iter(self.field_errors))
            if first != "_general":
                self.field = first

    def get_field_errors(self, field: str) -> List[str]:
        return list(self.field_errors.get(field, []))

    def get_first_field_error(self, field: str) -> Optional[str]:
        errors = self.field_errors.get(field)
        return errors[0] if errors else None

    def has_field_error(self, field: str) -> bool:
        return bool(self.field_errors.get(field))

    def get_all_errors(self) -> List[str]:
        """Flatten field errors into a single list"""
        return [message for messages in self.field_errors.values() for message in messages]

    @classmethod
    def required(cls, field: str) -> "ValidationError":
        """Create an error for a missing required field"""
        return cls(
            f"{field} is required",
            field=field,
            field_errors={field: [f"{field} is required"]},
        )

    @classmethod
    def invalid_format(cls, field: str, expected: str) -> "ValidationError":
        """Create an error for a field with the wrong format"""
        message = f"{field} must be {expected}"
        return cls(message, field=field, field_errors={field: [message]})

    @classmethod
    def from_pydantic(
        cls,
        error: PydanticValidationError,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ValidationError":
        """Map each pydantic error to the first element of its location"""
        field_errors: Dict[str, List[str]] = {}
        for item in error.errors():
            loc = item.get("loc") or ("_general",)
            field_errors.setdefault(str(loc[0]), []).append(item.get("msg", "invalid value"))

        summary = "; ".join(f"{name}: {', '.join(msgs)}" for name, msgs in field_errors.items())
        return cls(f"{message}: {summary}", field_errors=field_errors, details=details)


class AuthenticationError(XGateError):
    """Authentication error"""

    def __init__(
        self,
        message: str = "Authentication failed",
        reason: str = "failed",
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message, code=f"AUTH_{reason.upper()}", status_code=status_code, cause=cause
        )
        self.reason = reason

    @classmethod
    def invalid_credentials(
        cls, email: str, cause: Optional[Exception] = None
    ) -> "AuthenticationError":
        return cls(
            f"Invalid credentials for {email}",
            reason="invalid_credentials",
            status_code=401,
            cause=cause,
        )

    @classmethod
    def token_expired(cls, cause: Optional[Exception] = None) -> "AuthenticationError":
        return cls(
            "Authentication token has expired. Please login again",
            reason="token_expired",
            status_code=401,
            cause=cause,
        )

    @classmethod
    def missing_token(cls) -> "AuthenticationError":
        return cls(
            "No authentication token available. Please login first",
            reason="missing_token",
        )

    @classmethod
    def login_failed(
        cls, status_code: Optional[int], response: str, cause: Optional[Exception] = None
    ) -> "AuthenticationError":
        return cls(
            f"Login failed: {response}",
            reason="login_failed",
            status_code=status_code,
            cause=cause,
        )


# Header names checked in order for each rate limit field
RATE_LIMIT_HEADERS = {
    "retry_after": ("Retry-After", "X-Retry-After"),
    "limit": ("X-RateLimit-Limit", "X-Rate-Limit-Limit", "RateLimit-Limit"),
    "remaining": ("X-RateLimit-Remaining", "X-Rate-Limit-Remaining", "RateLimit-Remaining"),
    "reset": ("X-RateLimit-Reset", "X-Rate-Limit-Reset", "RateLimit-Reset"),
}

# Body keys used when the headers are absent
RATE_LIMIT_BODY_KEYS = {
    "retry_after": "retry_after",
    "limit": "rate_limit",
    "remaining": "remaining",
    "reset": "reset_time",
}


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


class RateLimitError(XGateError):
    """Rate limit (HTTP 429) error"""

    retryable = True

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        limit: Optional[int] = None,
        remaining: Optional[int] = None,
        reset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.retry_after = retry_after
        self.limit = limit
        self.remaining = remaining
        self.reset = reset
        if message == "Rate limit exceeded":
            message = self._informative_message()
        super().__init__(message, code="RATE_LIMITED", status_code=429, details=details)

    def _informative_message(self) -> str:
        message = "Rate limit exceeded"
        if self.retry_after:
            message += f". Retry after {self.retry_after} seconds"
        if self.limit and self.remaining is not None:
            message += f" ({self.limit - self.remaining}/{self.limit} requests used)"
        return message

    @property
    def has_retry_after(self) -> bool:
        return self.retry_after is not None and self.retry_after > 0

    @classmethod
    def from_response(cls, response: requests.Response) -> "RateLimitError":
        """Build from a 429 response, reading headers first and then the body"""
        values: Dict[str, Optional[int]] = {}
        for name, header_names in RATE_LIMIT_HEADERS.items():
            values[name] = None
            for header in header_names:
                if header in response.headers:
                    values[name] = _to_int(response.headers[header])
                    break

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, Mapping):
            for name, key in RATE_LIMIT_BODY_KEYS.items():
                if values[name] is None:
                    values[name] = _to_int(body.get(key))

        return cls(details={"body": body} if body else None, **values)


class NetworkError(XGateError):
    """
    Network error for HTTP transport layer failures
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        network_code: str = "NET10",
        retryable: bool = True,
        suggested_delay: int = 15,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, code=network_code, status_code=status_code, cause=cause)
        self.network_code = network_code
        self.retryable = retryable
        self.suggested_delay = suggested_delay

    @classmethod
    def timeout(
        cls, message: str = "Request timed out", cause: Optional[Exception] = None
    ) -> "NetworkError":
        """Create a timeout error"""
        return cls(
            message,
            status_code=408,
            network_code="NET01",
            retryable=True,
            suggested_delay=5,
            cause=cause,
        )

    @classmethod
    def connection_refused(
        cls, message: str = "Connection refused", cause: Optional[Exception] = None
    ) -> "NetworkError":
        """Create a connection refused error"""
        return cls(message, network_code="NET02", retryable=True, suggested_delay=30, cause=cause)

    @classmethod
    def dns_failure(
        cls, message: str = "Could not resolve host", cause: Optional[Exception] = None
    ) -> "NetworkError":
        """Create a DNS resolution error"""
        return cls(message, network_code="NET03", retryable=True, suggested_delay=10, cause=cause)

    @classmethod
    def ssl_error(
        cls, message: str = "SSL/TLS error", cause: Optional[Exception] = None
    ) -> "NetworkError":
        """Create an SSL error"""
        return cls(message, network_code="NET04", retryable=False, cause=cause)

    @classmethod
    def from_exception(cls, error: requests.exceptions.RequestException) -> "NetworkError":
        """Classify a requests exception into a network error"""
        if isinstance(error, requests.exceptions.Timeout):
            return cls.timeout(f"Request timed out: {error}", cause=error)

        if isinstance(error, requests.exceptions.SSLError):
            return cls.ssl_error(f"SSL/TLS error: {error}", cause=error)

        if isinstance(error, requests.exceptions.ConnectionError):
            text = str(error).lower()
            if any(marker in text for marker in ("name resolution", "resolve", "nodename")):
                return cls.dns_failure(f"Could not resolve host: {error}", cause=error)
            return cls.connection_refused(f"Connection error: {error}", cause=error)

        return cls(f"Request error: {error}", cause=error)


class ApiError(XGateError):
    """Error response from the XGate API that has no more specific kind"""

    def __init__(
        self,
        message: str,
        status_code: int,
        api_error_code: Optional[str] = None,
        body: Any = None,
    ) -> None:
        super().__init__(
            message, code=f"API_{status_code}", status_code=status_code, details={"body": body}
        )
        self.api_error_code = api_error_code
        self.body = body
        self.retryable = status_code >= 500

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @classmethod
    def from_response(cls, response: requests.Response) -> "ApiError":
        """Build from an error response, extracting the API message and code"""
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text[:500] if response.text else None

        message = f"HTTP {response.status_code}"
        api_error_code = None
        if isinstance(body, Mapping):
            message = body.get("message") or body.get("error") or message
            code = body.get("code") or body.get("error_code")
            api_error_code = str(code) if code is not None else None

        return cls(
            f"API error: {message}",
            status_code=response.status_code,
            api_error_code=api_error_code,
            body=body,
        )


class ConfigError(XGateError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class RetryExhaustedError(XGateError):
    """All retry attempts failed; ``last_error`` holds the final failure"""

    def __init__(self, attempts: int, last_error: XGateError) -> None:
        super().__init__(
            f"Max attempts exceeded ({attempts}): {last_error}",
            code="RETRY_EXHAUSTED",
            status_code=last_error.status_code,
            cause=last_error,
        )
        self.attempts = attempts
        self.last_error = last_error
