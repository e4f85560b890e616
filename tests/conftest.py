"""
Shared fixtures: a requests session that answers from a queue, a manual
clock for token TTLs, and a sleep recorder for retry delays.
"""

from typing import List

import pytest

from xgate.client.http_client import HttpClient
from xgate.config import XGateConfig

from tests.support import BASE_URL, ManualClock, QueueSession


@pytest.fixture
def config() -> XGateConfig:
    return XGateConfig(base_url=BASE_URL, timeout=5000)


@pytest.fixture
def session() -> QueueSession:
    return QueueSession()


@pytest.fixture
def http_client(config: XGateConfig, session: QueueSession) -> HttpClient:
    return HttpClient(config, session=session)


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
