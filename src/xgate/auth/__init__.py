"""Authentication module"""

from xgate.auth.token_store import AuthToken, TokenStore
from xgate.auth.authentication_manager import AuthenticationManager

__all__ = [
    "AuthToken",
    "TokenStore",
    "AuthenticationManager",
]
