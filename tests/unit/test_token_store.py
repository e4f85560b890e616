"""
Token Store Unit Tests
"""

from datetime import datetime, timezone

from xgate.auth import AuthToken, TokenStore

from tests.support import ManualClock


class TestTokenStore:
    """Tests for TokenStore"""

    def test_empty_store(self, clock: ManualClock):
        assert TokenStore(clock=clock).get() is None

    def test_set_and_get(self, clock: ManualClock):
        store = TokenStore(ttl_seconds=60, clock=clock)

        stored = store.set("abc")

        assert store.get() == stored
        assert stored.value == "abc"
        assert stored.acquired_at == clock.now
        assert stored.expires_at == clock.now + 60

    def test_set_replaces_token(self, clock: ManualClock):
        store = TokenStore(clock=clock)
        store.set("first")
        store.set("second")
        assert store.get().value == "second"

    def test_token_evicted_after_ttl(self, clock: ManualClock):
        """Should drop the token once its TTL has elapsed"""
        store = TokenStore(ttl_seconds=60, clock=clock)
        store.set("abc")

        clock.advance(59)
        assert store.get() is not None

        clock.advance(1)
        assert store.get() is None

    def test_no_ttl_never_expires(self, clock: ManualClock):
        store = TokenStore(ttl_seconds=None, clock=clock)
        store.set("abc")
        clock.advance(10 ** 9)
        assert store.get().value == "abc"

    def test_clear(self, clock: ManualClock):
        store = TokenStore(clock=clock)
        store.set("abc")
        assert store.clear() is True
        assert store.get() is None
        assert store.clear() is True

    def test_default_ttl(self):
        assert TokenStore().ttl_seconds == 86400


def test_auth_token_acquired_datetime():
    token = AuthToken(value="abc", acquired_at=0.0)
    assert token.acquired_datetime == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert token.is_expired(10 ** 9) is False
