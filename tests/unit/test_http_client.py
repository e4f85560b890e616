"""
HTTP Transport Unit Tests
"""

import json

import pytest
import requests

from xgate import __version__
from xgate.client.http_client import HttpClient, HttpMethod, RequestDescriptor
from xgate.config import XGateConfig
from xgate.exceptions import ApiError, NetworkError, RateLimitError, ValidationError

from tests.support import BASE_URL, QueueSession, header_count


class TestRequestDescriptor:
    """Tests for RequestDescriptor"""

    def test_with_headers_returns_new_descriptor(self):
        """Should leave the original descriptor untouched"""
        original = RequestDescriptor(HttpMethod.GET, "/customer/1")
        updated = original.with_headers({"Authorization": "Bearer abc"})

        assert original.headers == {}
        assert updated.headers == {"Authorization": "Bearer abc"}

    def test_with_headers_replaces_case_insensitively(self):
        """Should keep one entry per header name"""
        original = RequestDescriptor(
            HttpMethod.GET, "/customer/1", headers={"authorization": "Bearer old"}
        )
        updated = original.with_headers({"Authorization": "Bearer new"})

        assert list(updated.headers.values()) == ["Bearer new"]


class TestHttpClientSend:
    """Tests for HttpClient.send"""

    def test_parses_json_body(self, http_client: HttpClient, session: QueueSession):
        """Should return parsed JSON with status and request ID"""
        session.queue_response(200, {"rate": "5.10"})

        response = http_client.get("/exchange-rates/USD/BRL")

        assert response.data == {"rate": "5.10"}
        assert response.status == 200
        assert response.request_id.startswith("xgate-")
        assert session.last.url == f"{BASE_URL}/exchange-rates/USD/BRL"

    def test_empty_body_is_none(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(204)
        assert http_client.delete("/pix/keys/1").data is None

    def test_non_json_body_is_text(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(200, "OK")
        assert http_client.get("/health").data == "OK"

    def test_default_headers(self, http_client: HttpClient, session: QueueSession):
        """Should send JSON headers, User-Agent and a request ID"""
        session.queue_response(200, {})

        http_client.get("/customer/1")

        sent = session.last
        assert sent.headers["Accept"] == "application/json"
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.headers["User-Agent"] == f"xgate-python-sdk/{__version__}"
        assert sent.headers["X-Request-ID"].startswith("xgate-")

    def test_custom_headers(self, session: QueueSession):
        """Should send configured custom headers"""
        config = XGateConfig(base_url=BASE_URL, custom_headers={"X-Tenant": "acme"})
        client = HttpClient(config, session=session)
        session.queue_response(200, {})

        client.get("/customer/1")

        assert session.last.headers["X-Tenant"] == "acme"

    def test_no_authorization_without_token(self, http_client: HttpClient, session: QueueSession):
        """Should never add Authorization on its own"""
        session.queue_response(200, {})

        http_client.get("/customer/1")

        assert header_count(session.last, "Authorization") == 0

    def test_authorization_sent_exactly_once(self, http_client: HttpClient, session: QueueSession):
        """Should send the caller's Authorization header once"""
        session.queue_response(200, {})
        descriptor = RequestDescriptor(
            HttpMethod.GET, "/customer/1", headers={"authorization": "Bearer stale"}
        ).with_headers({"Authorization": "Bearer fresh"})

        http_client.send(descriptor)

        assert header_count(session.last, "Authorization") == 1
        assert session.last.headers["Authorization"] == "Bearer fresh"

    def test_serializes_json_body_and_params(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(201, {"id": "c1"})

        http_client.request(
            HttpMethod.POST, "/customer", data={"name": "Ana"}, params={"notify": "false"}
        )

        assert session.last.method == "POST"
        assert session.last.url == f"{BASE_URL}/customer?notify=false"
        assert json.loads(session.last.body) == {"name": "Ana"}

    def test_accepts_string_method(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(200, {})
        http_client.request("put", "/customer/1", data={"name": "X"})
        assert session.last.method == "PUT"

    def test_absolute_url_passthrough(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(200, {})
        http_client.get("https://other.example.com/ping")
        assert session.last.url == "https://other.example.com/ping"


class TestErrorClassification:
    """Tests for mapping failures to SDK errors"""

    def test_422_is_validation_error(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(422, {
            "message": "Invalid data",
            "errors": {"email": ["is invalid"], "name": "is required"},
        })

        with pytest.raises(ValidationError) as exc_info:
            http_client.post("/customer", data={})

        error = exc_info.value
        assert error.status_code == 422
        assert error.get_field_errors("email") == ["is invalid"]
        assert error.get_field_errors("name") == ["is required"]

    def test_422_without_field_errors(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(422, {"message": "Bad payload"})

        with pytest.raises(ValidationError) as exc_info:
            http_client.post("/customer", data={})

        assert exc_info.value.has_field_error("_general")

    def test_429_is_rate_limit_error(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(
            429, {"message": "slow down"},
            headers={"Retry-After": "7", "X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "0"},
        )

        with pytest.raises(RateLimitError) as exc_info:
            http_client.get("/customer/1")

        error = exc_info.value
        assert error.retry_after == 7
        assert error.limit == 100
        assert error.remaining == 0
        assert error.retryable is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404])
    def test_client_errors_are_api_errors(self, http_client: HttpClient, session: QueueSession, status):
        session.queue_response(status, {"message": "nope", "code": "E1"})

        with pytest.raises(ApiError) as exc_info:
            http_client.get("/customer/1")

        error = exc_info.value
        assert error.status_code == status
        assert error.api_error_code == "E1"
        assert error.retryable is False

    def test_server_error_is_retryable_api_error(self, http_client: HttpClient, session: QueueSession):
        session.queue_response(503, "Service Unavailable")

        with pytest.raises(ApiError) as exc_info:
            http_client.get("/customer/1")

        assert exc_info.value.is_server_error
        assert exc_info.value.retryable is True

    def test_connection_error_is_network_error(self, http_client: HttpClient, session: QueueSession):
        session.queue.append(requests.exceptions.ConnectionError("Connection refused"))

        with pytest.raises(NetworkError) as exc_info:
            http_client.get("/customer/1")

        assert exc_info.value.network_code == "NET02"
        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_timeout_is_network_error(self, http_client: HttpClient, session: QueueSession):
        session.queue.append(requests.exceptions.ReadTimeout("read timed out"))

        with pytest.raises(NetworkError) as exc_info:
            http_client.get("/customer/1")

        assert exc_info.value.network_code == "NET01"


class TestAuditLog:
    """Tests for audit entries"""

    def test_callback_receives_redacted_entry(self, session: QueueSession):
        config = XGateConfig(base_url=BASE_URL, enable_audit_log=True)
        client = HttpClient(config, session=session)
        entries = []
        client.set_audit_log_callback(entries.append)
        session.queue_response(200, {"token": "secret-token"})

        client.send(RequestDescriptor(
            HttpMethod.POST,
            "/auth/token",
            json_body={"email": "a@b.c", "password": "hunter2"},
            headers={"Authorization": "Bearer abc"},
        ))

        assert len(entries) == 1
        entry = entries[0]
        assert entry.success is True
        assert entry.headers["Authorization"] == "[REDACTED]"
        assert entry.body["password"] == "[REDACTED]"
        assert entry.response["body"]["token"] == "[REDACTED]"

    def test_callback_records_failures(self, session: QueueSession):
        config = XGateConfig(base_url=BASE_URL, enable_audit_log=True)
        client = HttpClient(config, session=session)
        entries = []
        client.set_audit_log_callback(entries.append)
        session.queue_response(404, {"message": "missing"})

        with pytest.raises(ApiError):
            client.get("/customer/404")

        assert entries[0].success is False
        assert entries[0].response["statusCode"] == 404

    def test_callback_ignored_when_disabled(self, http_client: HttpClient, session: QueueSession):
        entries = []
        http_client.set_audit_log_callback(entries.append)
        session.queue_response(200, {})

        http_client.get("/customer/1")

        assert entries == []

    def test_no_entry_built_when_unused(self, http_client: HttpClient, session: QueueSession, monkeypatch):
        """Should skip building the entry when neither debug nor the callback needs it"""
        built = []
        monkeypatch.setattr(http_client, "_create_audit_entry", lambda *a, **kw: built.append(a))
        session.queue_response(200, {"id": "c1"})
        session.queue_response(404, {"message": "missing"})

        http_client.get("/customer/1")
        with pytest.raises(ApiError):
            http_client.get("/customer/2")

        assert built == []

    def test_body_parsed_once(self, session: QueueSession, monkeypatch):
        config = XGateConfig(base_url=BASE_URL, enable_audit_log=True)
        client = HttpClient(config, session=session)
        entries = []
        client.set_audit_log_callback(entries.append)
        parse_body = client._parse_body
        parsed = []

        def counting_parse(response):
            parsed.append(response)
            return parse_body(response)

        monkeypatch.setattr(client, "_parse_body", counting_parse)
        session.queue_response(200, {"id": "c1"})

        result = client.get("/customer/1")

        assert len(parsed) == 1
        assert result.data == {"id": "c1"}
        assert entries[0].response["body"] == {"id": "c1"}


def test_context_manager_closes_session(config: XGateConfig, session: QueueSession):
    with HttpClient(config, session=session) as client:
        assert client.base_url == BASE_URL
    assert session.closed is True
