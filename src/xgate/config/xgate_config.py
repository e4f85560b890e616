"""
XGate Configuration Types and Schema
Type-safe configuration objects for the XGate SDK
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


class XGateEnvironment(str, Enum):
    """XGate environment types"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


# Base URLs for XGate environments
XGATE_BASE_URLS = {
    XGateEnvironment.DEVELOPMENT: "https://api.xgate.global",
    XGateEnvironment.PRODUCTION: "https://api.xgate.global",
}


class ConfigDefaults:
    """Default configuration values"""
    ENVIRONMENT = XGateEnvironment.PRODUCTION
    TIMEOUT = 30000
    MAX_ATTEMPTS = 3
    RETRY_DELAY = 1000
    MAX_RETRY_DELAY = 30000
    MAX_RETRY_AFTER = 60
    TOKEN_TTL = 86400
    DEBUG = False
    ENABLE_AUDIT_LOG = False


# Environment variable mapping
ENV_VAR_MAPPING = {
    "XGATE_ENVIRONMENT": "environment",
    "XGATE_BASE_URL": "base_url",
    "XGATE_TIMEOUT": "timeout",
    "XGATE_RETRIES": "max_attempts",
    "XGATE_MAX_ATTEMPTS": "max_attempts",
    "XGATE_RETRY_DELAY": "retry_delay",
    "XGATE_MAX_RETRY_DELAY": "max_retry_delay",
    "XGATE_MAX_RETRY_AFTER": "max_retry_after",
    "XGATE_TOKEN_TTL": "token_ttl",
    "XGATE_DEBUG": "debug",
    "XGATE_LOG_FILE": "log_file",
    "XGATE_CUSTOM_HEADERS": "custom_headers",
    "XGATE_PROXY_URL": "proxy_url",
    "XGATE_ENABLE_AUDIT_LOG": "enable_audit_log",
}

# Alternative spellings accepted for a setting
KEY_ALIASES = {
    "retries": "max_attempts",
}

# Headers that only the authentication layer may set
RESERVED_HEADERS = ("authorization",)


class XGateConfig(BaseModel):
    """
    Main XGate configuration class
    Defines all configuration options for the XGate SDK
    """

    environment: XGateEnvironment = Field(
        default=ConfigDefaults.ENVIRONMENT,
        description="Environment: 'development' or 'production'"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override default base URL"
    )
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )
    max_attempts: int = Field(
        default=ConfigDefaults.MAX_ATTEMPTS,
        validation_alias=AliasChoices("max_attempts", "retries"),
        description="Total attempts per operation, including the first one",
        ge=1,
        le=10
    )
    retry_delay: int = Field(
        default=ConfigDefaults.RETRY_DELAY,
        description="Base delay for exponential backoff in milliseconds",
        ge=1,
        le=60000
    )
    max_retry_delay: int = Field(
        default=ConfigDefaults.MAX_RETRY_DELAY,
        description="Upper bound for a single backoff delay in milliseconds",
        ge=1,
        le=300000
    )
    max_retry_after: int = Field(
        default=ConfigDefaults.MAX_RETRY_AFTER,
        description="Longest Retry-After (seconds) the client will wait for",
        ge=0,
        le=3600
    )
    token_ttl: int = Field(
        default=ConfigDefaults.TOKEN_TTL,
        description="Lifetime of a stored token in seconds",
        ge=1
    )

    debug: bool = Field(
        default=ConfigDefaults.DEBUG,
        description="Log request and response details"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Write SDK logs to this file instead of stderr"
    )
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Emit HTTP audit entries to the registered callback"
    )
    custom_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request"
    )
    proxy_url: Optional[str] = Field(
        default=None,
        description="HTTP(S) proxy for all requests"
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("base_url", "proxy_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate URL fields are HTTP(S) URLs"""
        if v is not None and v != "":
            if not v.startswith(("http://", "https://")):
                raise ValueError("must be a valid HTTP/HTTPS URL")
            return v.rstrip("/")
        return v

    @field_validator("custom_headers")
    @classmethod
    def validate_custom_headers(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Reject headers owned by the authentication layer"""
        for name in v:
            if name.lower() in RESERVED_HEADERS:
                raise ValueError(f"custom_headers may not set '{name}'")
        return v

    @model_validator(mode="after")
    def set_default_base_url(self) -> "XGateConfig":
        """Set default base_url based on environment if not provided"""
        if not self.base_url:
            self.base_url = XGATE_BASE_URLS[self.environment]
        return self

    def get_resolved_base_url(self) -> str:
        """Get the resolved base URL"""
        return self.base_url or XGATE_BASE_URLS[self.environment]

    @property
    def is_production(self) -> bool:
        return self.environment == XGateEnvironment.PRODUCTION
