"""
Configuration module
"""

from xgate.config.xgate_config import (
    XGateConfig,
    XGateEnvironment,
    XGATE_BASE_URLS,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from xgate.config.config_loader import ConfigLoader
from xgate.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "XGateConfig",
    "XGateEnvironment",
    "XGATE_BASE_URLS",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
