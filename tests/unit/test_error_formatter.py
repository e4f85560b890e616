"""
Error Formatter Unit Tests
"""

import logging

import pytest
import requests

from xgate.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigError,
    NetworkError,
    RateLimitError,
    RetryExhaustedError,
    ValidationError,
)
from xgate.utils import ErrorFormatter


@pytest.fixture
def formatter() -> ErrorFormatter:
    return ErrorFormatter()


class TestLocale:
    """Tests for locale selection"""

    def test_defaults_to_english(self, formatter: ErrorFormatter):
        assert formatter.locale == "en"

    def test_unknown_locale_falls_back(self):
        assert ErrorFormatter(locale="fr").locale == "en"

    def test_switch_locale(self, formatter: ErrorFormatter):
        formatter.locale = "pt"
        assert formatter.get_user_friendly_message(ApiError("API error: x", 404)) == (
            "O recurso solicitado não foi encontrado."
        )


class TestFormatApiError:
    """Tests for format_api_error"""

    @pytest.mark.parametrize("status,expected", [
        (500, "Server error occurred. Please try again later. (Status: 500)"),
        (503, "Server error occurred. Please try again later. (Status: 503)"),
        (429, "Too many requests. Please wait before trying again. (Status: 429)"),
        (422, "Request validation failed: bad input"),
        (401, "Authentication required. Please check your credentials."),
        (403, "Access denied. You don't have permission for this operation."),
        (404, "The requested resource was not found."),
        (409, "Request error: bad input (Status: 409)"),
        (302, "API error: bad input (Status: 302)"),
    ])
    def test_status_classes(self, formatter: ErrorFormatter, status: int, expected: str):
        assert formatter.format_api_error(status, "bad input") == expected

    def test_sanitizes_api_message(self, formatter: ErrorFormatter):
        message = formatter.format_api_error(400, "customer ana@example.com already exists")
        assert "ana@example.com" not in message
        assert "[EMAIL]" in message


class TestFormatNetworkError:
    """Tests for format_network_error"""

    def test_known_type(self, formatter: ErrorFormatter):
        assert formatter.format_network_error("timeout", "read timed out") == (
            "Request timeout. The server took too long to respond."
        )

    def test_unknown_type_uses_original_message(self, formatter: ErrorFormatter):
        assert formatter.format_network_error("weird", "socket closed") == (
            "Network error: socket closed"
        )


class TestUserFriendlyMessage:
    """Tests for get_user_friendly_message"""

    def test_single_field_validation_error(self, formatter: ErrorFormatter):
        message = formatter.get_user_friendly_message(ValidationError.required("email"))
        assert message == "Validation failed for field 'email': email is required"

    def test_multi_field_validation_error(self, formatter: ErrorFormatter):
        error = ValidationError(
            "Validation failed: 2 fields",
            field_errors={"name": ["required"], "email": ["invalid"]},
        )
        assert formatter.get_user_friendly_message(error) == "Validation failed: 2 fields"

    def test_rate_limit_with_retry_after(self, formatter: ErrorFormatter):
        message = formatter.get_user_friendly_message(RateLimitError(retry_after=30))
        assert message.endswith("Try again in 30 seconds.")

    def test_rate_limit_in_portuguese(self):
        message = ErrorFormatter("pt").get_user_friendly_message(RateLimitError(retry_after=5))
        assert message.startswith("Muitas requisições.")
        assert message.endswith("Tente novamente em 5 segundos.")

    def test_api_error_strips_prefix(self, formatter: ErrorFormatter):
        error = ApiError("API error: duplicate reference", 409, api_error_code="DUP")
        assert formatter.get_user_friendly_message(error) == (
            "Request error: duplicate reference (Status: 409)"
        )

    def test_network_error_by_code(self, formatter: ErrorFormatter):
        error = NetworkError.from_exception(requests.exceptions.ConnectTimeout("slow"))
        assert formatter.get_user_friendly_message(error) == (
            "Request timeout. The server took too long to respond."
        )

    def test_authentication_error(self, formatter: ErrorFormatter):
        message = formatter.get_user_friendly_message(AuthenticationError.token_expired())
        assert message == "Authentication required. Please check your credentials."

    def test_retry_exhausted_describes_last_error(self, formatter: ErrorFormatter):
        error = RetryExhaustedError(3, ApiError("API error: boom", 502))
        assert formatter.get_user_friendly_message(error) == (
            "The request failed after 3 attempts. "
            "Server error occurred. Please try again later. (Status: 502)"
        )

    def test_config_error(self, formatter: ErrorFormatter):
        message = formatter.get_user_friendly_message(ConfigError("missing file"))
        assert message == "Invalid SDK configuration: missing file"

    def test_foreign_exception_is_sanitized(self, formatter: ErrorFormatter):
        error = RuntimeError("header was Bearer eyJhbGciOi.abc.def")
        assert formatter.get_user_friendly_message(error) == "header was Bearer [REDACTED]"

    def test_include_details(self, formatter: ErrorFormatter):
        error = ApiError("API error: missing", 404, body={"password": "x"})

        message = formatter.get_user_friendly_message(error, include_details=True)

        assert message.splitlines() == [
            "The requested resource was not found.",
            "Additional details: code: API_404, status_code: 404",
        ]


class TestAggregateErrors:
    """Tests for aggregate_errors"""

    def test_empty(self, formatter: ErrorFormatter):
        assert formatter.aggregate_errors([]) == "No errors found"

    def test_numbered_list(self, formatter: ErrorFormatter):
        message = formatter.aggregate_errors([
            ValidationError.required("name"),
            ApiError("API error: missing", 404),
        ])

        assert message.splitlines() == [
            "Found 2 error(s):",
            "  1. Validation failed for field 'name': name is required",
            "  2. The requested resource was not found.",
        ]

    def test_truncates(self, formatter: ErrorFormatter):
        errors = [ApiError("API error: missing", 404)] * 4

        lines = formatter.aggregate_errors(errors, max_display=2).splitlines()

        assert lines[0] == "Found 4 error(s):"
        assert len(lines) == 4
        assert lines[-1] == "... and 2 more error(s)"


class TestSanitize:
    """Tests for sanitize_message and sanitize_context"""

    @pytest.mark.parametrize("text,expected", [
        ("contact ana.silva@example.com.br now", "contact [EMAIL] now"),
        ("card 4111 1111 1111 1111", "card [CARD]"),
        ("cpf 123.456.789-09", "cpf [CPF]"),
        ("cnpj 12.345.678/0001-95", "cnpj [CNPJ]"),
        ("Authorization: Bearer abc123==", "Authorization: Bearer [REDACTED]"),
        ("nothing to hide", "nothing to hide"),
    ])
    def test_sanitize_message(self, formatter: ErrorFormatter, text: str, expected: str):
        assert formatter.sanitize_message(text) == expected

    def test_sanitize_context(self, formatter: ErrorFormatter):
        context = {
            "password": "hunter2",
            "note": "sent to a@b.com",
            "nested": [{"api_key": "k"}, "cpf 123.456.789-09"],
            "attempt": 2,
        }

        assert formatter.sanitize_context(context) == {
            "password": "[REDACTED]",
            "note": "sent to [EMAIL]",
            "nested": [{"api_key": "[REDACTED]"}, "cpf [CPF]"],
            "attempt": 2,
        }


class TestLogError:
    """Tests for log_error"""

    def test_logs_at_severity(self, formatter: ErrorFormatter, caplog):
        with caplog.at_level(logging.DEBUG, logger="xgate"):
            formatter.log_error(
                ApiError("API error: missing", 404),
                context={"token": "abc", "customer": "ana@example.com"},
                severity="high",
            )

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage().startswith("The requested resource was not found.")
        assert "abc" not in record.getMessage()
        assert "ana@example.com" not in record.getMessage()

    def test_unknown_severity_logs_error(self, formatter: ErrorFormatter, caplog):
        with caplog.at_level(logging.DEBUG, logger="xgate"):
            formatter.log_error(RuntimeError("boom"), severity="whatever")

        assert caplog.records[-1].levelno == logging.ERROR
