"""Test doubles shared across the unit tests"""

import json
from typing import Any, Dict, List, Optional, Union

import requests


BASE_URL = "https://api.test.xgate"


def make_response(
    status: int = 200,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network"""
    response = requests.Response()
    response.status_code = status
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, str)):
        response._content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    response.headers.update(headers or {})
    return response


class QueueSession(requests.Session):
    """Session whose ``send`` pops queued responses or raises queued errors"""

    def __init__(self, *items: Union[requests.Response, Exception]) -> None:
        super().__init__()
        self.queue: List[Union[requests.Response, Exception]] = list(items)
        self.sent: List[requests.PreparedRequest] = []
        self.closed = False

    def queue_response(self, status: int = 200, body: Any = None, headers=None) -> None:
        self.queue.append(make_response(status, body, headers))

    def send(self, request, **kwargs):
        self.sent.append(request)
        if not self.queue:
            raise AssertionError(f"Unexpected request {request.method} {request.url}")
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        item.request = request
        item.url = request.url
        return item

    def close(self) -> None:
        self.closed = True
        super().close()

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]


class ManualClock:
    """Clock returning a settable epoch time"""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def header_count(request: requests.PreparedRequest, name: str) -> int:
    return sum(1 for key in request.headers if key.lower() == name.lower())
