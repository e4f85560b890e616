"""In-memory bearer token storage with TTL eviction"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

DEFAULT_TOKEN_TTL = 86400


@dataclass(frozen=True)
class AuthToken:
    """Bearer token and the moment it was acquired (epoch seconds)"""
    value: str
    acquired_at: float
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at

    @property
    def acquired_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.acquired_at, tz=timezone.utc)


class TokenStore:
    """
    Holds at most one token per instance

    Pure storage: no validation beyond TTL eviction. Not safe for concurrent
    writers; each client session owns its own store.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = DEFAULT_TOKEN_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._token: Optional[AuthToken] = None

    def get(self) -> Optional[AuthToken]:
        """Return the stored token, evicting it first if it has expired"""
        token = self._token
        if token is None:
            return None
        if token.is_expired(self._clock()):
            self._token = None
            return None
        return token

    def set(self, value: str) -> AuthToken:
        """Store a new token, replacing any existing one"""
        now = self._clock()
        expires_at = now + self._ttl if self._ttl is not None else None
        self._token = AuthToken(value=value, acquired_at=now, expires_at=expires_at)
        return self._token

    def clear(self) -> bool:
        self._token = None
        return True

    @property
    def ttl_seconds(self) -> Optional[float]:
        return self._ttl
