"""Helpers that hide sensitive values before they reach logs"""

import re
from typing import Any, Optional

# Keys whose values are redacted wherever they appear (matched as substrings)
SENSITIVE_FIELDS = [
    "authorization",
    "x-api-key",
    "cookie",
    "password",
    "token",
    "api_key",
    "secret",
    "private_key",
]

REDACTED = "[REDACTED]"


def redact_sensitive_data(obj: Any) -> Any:
    """Redact sensitive data from headers or JSON bodies for logging"""
    if obj is None or isinstance(obj, str):
        return obj

    if isinstance(obj, list):
        return [redact_sensitive_data(item) for item in obj]

    if isinstance(obj, dict):
        redacted = {}
        for key, value in obj.items():
            lower_key = str(key).lower()
            if any(field in lower_key for field in SENSITIVE_FIELDS):
                redacted[key] = REDACTED
            elif isinstance(value, (dict, list)):
                redacted[key] = redact_sensitive_data(value)
            else:
                redacted[key] = value
        return redacted

    return obj


def mask_value(value: Optional[Any]) -> Optional[str]:
    """Keep the first and last two characters, e.g. ``12****89``"""
    if value is None:
        return None
    text = str(value)
    if len(text) <= 4:
        return "*" * len(text)
    return text[:2] + "*" * (len(text) - 4) + text[-2:]


def mask_pix_key(key_type: str, key: str) -> str:
    """Mask a PIX key according to its type"""
    key_type = key_type.lower()
    digits = re.sub(r"\D", "", key)

    if key_type == "cpf":
        return f"{digits[:3]}***{digits[-2:]}" if len(digits) == 11 else "***"

    if key_type == "cnpj":
        return f"{digits[:2]}***{digits[-2:]}" if len(digits) == 14 else "***"

    if key_type == "email":
        local, sep, domain = key.partition("@")
        return f"{local[:2]}***@{domain}" if sep and domain else "***@***.***"

    if key_type == "phone":
        return f"+55***{digits[-4:]}" if len(digits) >= 10 else "+55***"

    if key_type == "random":
        return f"{key[:8]}***"

    return "***"
