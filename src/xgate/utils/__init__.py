"""Utilities module initialization"""

from xgate.utils.logger import configure_logging, get_logger
from xgate.utils.masking import mask_pix_key, mask_value, redact_sensitive_data
from xgate.utils.error_formatter import ErrorFormatter

__all__ = [
    "configure_logging",
    "get_logger",
    "mask_pix_key",
    "mask_value",
    "redact_sensitive_data",
    "ErrorFormatter",
]
