"""
Configuration Validator
Validates XGate configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from xgate.config.xgate_config import RESERVED_HEADERS, XGateEnvironment


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


# (field, minimum, maximum, unit) for integer settings
INTEGER_RANGES = (
    ("timeout", 1000, 300000, "ms"),
    ("max_attempts", 1, 10, None),
    ("retry_delay", 1, 60000, "ms"),
    ("max_retry_delay", 1, 300000, "ms"),
    ("max_retry_after", 0, 3600, "s"),
    ("token_ttl", 1, None, "s"),
)


class ConfigValidator:
    """
    ConfigValidator class
    Provides comprehensive validation for XGate configuration
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []

        self._validate_urls(config)
        self._validate_ranges(config)
        self._validate_environment(config)
        self._validate_headers(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Raises:
            ValidationError: If configuration is invalid
        """
        from xgate.exceptions import ValidationError

        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            field_errors: Dict[str, List[str]] = {}
            for error in result.errors:
                field_errors.setdefault(error.field, []).append(error.message)
            raise ValidationError(
                f"Configuration validation failed: {error_messages}",
                field_errors=field_errors,
            )

    def _validate_urls(self, config: Dict[str, Any]) -> None:
        """Validate URL formats"""
        for url_field in ("base_url", "proxy_url"):
            value = config.get(url_field)
            if value is None or value == "":
                continue
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field=url_field,
                    message=f"{url_field} must be a valid HTTP/HTTPS URL",
                    value=value
                ))

        log_file = config.get("log_file")
        if log_file is not None and not isinstance(log_file, str):
            self._errors.append(ValidationErrorDetail(
                field="log_file",
                message="log_file must be a string",
                value=log_file
            ))

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        for name, minimum, maximum, unit in INTEGER_RANGES:
            value = config.get(name)
            if value is None:
                continue

            suffix = f" ({unit})" if unit else ""
            if isinstance(value, bool) or not isinstance(value, int):
                self._errors.append(ValidationErrorDetail(
                    field=name,
                    message=f"{name} must be an integer{suffix}",
                    value=value
                ))
            elif value < minimum:
                self._errors.append(ValidationErrorDetail(
                    field=name,
                    message=f"{name} should be at least {minimum}{unit or ''}",
                    value=value
                ))
            elif maximum is not None and value > maximum:
                self._errors.append(ValidationErrorDetail(
                    field=name,
                    message=f"{name} should not exceed {maximum}{unit or ''}",
                    value=value
                ))

    def _validate_environment(self, config: Dict[str, Any]) -> None:
        """Validate environment setting"""
        environment = config.get("environment")
        if environment is not None:
            valid_environments = [e.value for e in XGateEnvironment]
            env_value = environment.value if isinstance(environment, XGateEnvironment) else environment
            if env_value not in valid_environments:
                self._errors.append(ValidationErrorDetail(
                    field="environment",
                    message=f"environment must be one of: {', '.join(valid_environments)}",
                    value=environment
                ))

    def _validate_headers(self, config: Dict[str, Any]) -> None:
        """Validate custom headers"""
        headers = config.get("custom_headers")
        if headers is None:
            return

        if not isinstance(headers, dict):
            self._errors.append(ValidationErrorDetail(
                field="custom_headers",
                message="custom_headers must be a mapping of header names to values",
                value=headers
            ))
            return

        for name in headers:
            if str(name).lower() in RESERVED_HEADERS:
                self._errors.append(ValidationErrorDetail(
                    field="custom_headers",
                    message=f"custom_headers may not set '{name}'",
                    value="[REDACTED]"
                ))
