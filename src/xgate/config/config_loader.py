"""
Configuration Loader
Builds an XGateConfig from JSON files, dotenv files, XGATE_* environment
variables and plain dictionaries.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from dotenv import dotenv_values

from pydantic import ValidationError as PydanticValidationError

from xgate.config.xgate_config import (
    XGateConfig,
    XGateEnvironment,
    ENV_VAR_MAPPING,
    KEY_ALIASES,
)
from xgate.config.config_validator import ConfigValidator
from xgate.exceptions import ConfigError, ValidationError


# Settings parsed from environment strings
BOOLEAN_KEYS = ("debug", "enable_audit_log")
INTEGER_KEYS = (
    "timeout",
    "max_attempts",
    "retry_delay",
    "max_retry_delay",
    "max_retry_after",
    "token_ttl",
)
TRUTHY = ("true", "1", "yes", "on")

TEMPLATE = {
    "environment": "production",
    "base_url": "https://api.xgate.global",
    "timeout": 30000,
    "max_attempts": 3,
    "retry_delay": 1000,
    "max_retry_delay": 30000,
    "max_retry_after": 60,
    "token_ttl": 86400,
    "debug": False,
    "log_file": "./logs/xgate.log",
    "custom_headers": {},
}

PathLike = Union[str, Path]


def _existing(path: PathLike, kind: str) -> Path:
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise ConfigError(
            f"{kind} not found: {resolved}",
            code="CONFIG_FILE_NOT_FOUND"
        )
    return resolved


class ConfigLoader:
    """
    Collects settings from several sources and resolves them into an
    XGateConfig

    Example:
        >>> config = ConfigLoader().load(env_file=".env", config={"debug": True})
    """

    def __init__(self) -> None:
        self._validator = ConfigValidator()

    def from_file(self, path: PathLike) -> Dict[str, Any]:
        """
        Read settings from a JSON document

        Raises:
            ConfigError: Missing file, malformed JSON, or a top-level value
                that is not an object
        """
        file_path = _existing(path, "Configuration file")

        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Configuration file is not valid JSON: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )
        return data

    def from_env_file(self, path: PathLike) -> Dict[str, Any]:
        """Read XGATE_* settings from a dotenv file; os.environ is left alone"""
        return self._from_mapping(dotenv_values(_existing(path, "Environment file")))

    def from_environment(self) -> Dict[str, Any]:
        """Read XGATE_* settings from the process environment"""
        return self._from_mapping(os.environ)

    def from_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        return dict(config)

    def merge(self, *sources: Dict[str, Any]) -> Dict[str, Any]:
        """
        Combine sources left to right; a later non-None value wins

        Alternative key spellings such as ``retries`` are renamed first, so
        they compete with the canonical key on equal terms.

        Returns:
            New dictionary, the inputs are not modified
        """
        merged: Dict[str, Any] = {}
        for source in sources:
            merged.update(self._canonical(self._filter_none(source)))
        return merged

    def resolve(self, config: Dict[str, Any]) -> XGateConfig:
        """
        Check the settings and build the config, filling in defaults

        Raises:
            ValidationError: One entry per offending field
        """
        config = self._canonical(config)
        self._validator.validate_or_raise(config)
        try:
            return XGateConfig(**config)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e, "Configuration validation failed") from e

    def load(
        self,
        file: Optional[PathLike] = None,
        env: bool = True,
        env_file: Optional[PathLike] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> XGateConfig:
        """
        Gather every requested source and resolve the result

        Precedence, lowest first: JSON ``file``, ``env_file``, process
        environment (when ``env`` is true), then ``config``.
        """
        sources: List[Dict[str, Any]] = []

        if file is not None:
            sources.append(self.from_file(file))
        if env_file is not None:
            sources.append(self.from_env_file(env_file))
        if env:
            sources.append(self.from_environment())
        if config is not None:
            sources.append(config)

        return self.resolve(self.merge(*sources))

    def create_template(self, path: PathLike) -> None:
        """Write a JSON file holding every setting with its default value"""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(TEMPLATE, indent=2), encoding="utf-8")

    def _from_mapping(self, values: Mapping[str, Optional[str]]) -> Dict[str, Any]:
        return {
            key: self._parse_env_value(key, values[name])
            for name, key in ENV_VAR_MAPPING.items()
            if values.get(name)
        }

    def _parse_env_value(self, key: str, value: str) -> Any:
        """Convert one environment string to the type the setting expects"""
        if key in BOOLEAN_KEYS:
            return value.strip().lower() in TRUTHY

        if key in INTEGER_KEYS:
            # Left as a string so the validator reports it
            try:
                return int(value)
            except ValueError:
                return value

        if key == "environment":
            try:
                return XGateEnvironment(value.strip().lower())
            except ValueError:
                return value

        if key == "custom_headers":
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise ConfigError(
                    "XGATE_CUSTOM_HEADERS must contain a JSON object",
                    code="CONFIG_PARSE_ERROR"
                ) from e

        return value

    def _canonical(self, config: Dict[str, Any]) -> Dict[str, Any]:
        canonical = {KEY_ALIASES.get(k, k): v for k, v in config.items() if k in KEY_ALIASES}
        canonical.update((k, v) for k, v in config.items() if k not in KEY_ALIASES)
        return canonical

    def _filter_none(self, config: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in config.items() if v is not None}
