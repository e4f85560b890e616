"""
Error Formatter
Turns SDK errors into short, localized messages that are safe to show to
end users or write to logs.
"""

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional

from xgate.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigError,
    NetworkError,
    RateLimitError,
    RetryExhaustedError,
    ValidationError,
    XGateError,
)
from xgate.utils.masking import REDACTED, redact_sensitive_data

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

SEVERITY_LEVELS = {
    "critical": logging.CRITICAL,
    "high": logging.ERROR,
    "medium": logging.WARNING,
    "low": logging.INFO,
    "debug": logging.DEBUG,
}

# Network error code to message key
NETWORK_ERROR_TYPES = {
    "NET01": "timeout",
    "NET02": "connection_refused",
    "NET03": "dns_resolution",
    "NET04": "ssl",
}

# Applied in order; bearer tokens go first so their values are not matched
# by the looser patterns below
SANITIZE_PATTERNS = (
    (re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), f"Bearer {REDACTED}"),
    (re.compile(r"\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b"), "[EMAIL]"),
    (re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"), "[CARD]"),
    (re.compile(r"\b\d{3}\.\d{3}\.\d{3}-\d{2}\b"), "[CPF]"),
    (re.compile(r"\b\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}\b"), "[CNPJ]"),
)

MESSAGES: Dict[str, Dict[str, Dict[str, str]]] = {
    "en": {
        "validation": {
            "required": "The field '{field}' is required",
            "format": "The field '{field}' has invalid format",
            "type": "The field '{field}' must be of the correct type",
            "range": "The field '{field}' value is out of range",
            "email": "The field '{field}' must be a valid email address",
            "numeric": "The field '{field}' must be numeric",
            "default": "Validation failed for field '{field}'",
        },
        "api": {
            "server_error": "Server error occurred. Please try again later. (Status: {status_code})",
            "rate_limit": "Too many requests. Please wait before trying again. (Status: {status_code})",
            "retry_after": "Try again in {seconds} seconds.",
            "validation": "Request validation failed: {api_message}",
            "unauthorized": "Authentication required. Please check your credentials.",
            "forbidden": "Access denied. You don't have permission for this operation.",
            "not_found": "The requested resource was not found.",
            "client_error": "Request error: {api_message} (Status: {status_code})",
            "default": "API error: {api_message} (Status: {status_code})",
        },
        "network": {
            "timeout": "Request timeout. The server took too long to respond.",
            "connection_refused": "Connection refused. The service may be unavailable.",
            "dns_resolution": "DNS resolution failed. Please check the server address.",
            "ssl": "SSL error. Please verify the certificate and security settings.",
            "default": "Network error: {original_message}",
        },
        "general": {
            "config": "Invalid SDK configuration: {message}",
            "retry_exhausted": "The request failed after {attempts} attempts. {last_error}",
            "no_errors": "No errors found",
            "multiple_errors_header": "Found {count} error(s):",
            "more_errors": "... and {count} more error(s)",
            "context_details": "Additional details: {details}",
        },
    },
    "pt": {
        "validation": {
            "required": "O campo '{field}' é obrigatório",
            "format": "O campo '{field}' possui formato inválido",
            "type": "O campo '{field}' deve ser do tipo correto",
            "range": "O valor do campo '{field}' está fora do intervalo permitido",
            "email": "O campo '{field}' deve ser um endereço de email válido",
            "numeric": "O campo '{field}' deve ser numérico",
            "default": "Falha na validação do campo '{field}'",
        },
        "api": {
            "server_error": "Erro no servidor. Tente novamente mais tarde. (Status: {status_code})",
            "rate_limit": "Muitas requisições. Aguarde antes de tentar novamente. (Status: {status_code})",
            "retry_after": "Tente novamente em {seconds} segundos.",
            "validation": "Falha na validação da requisição: {api_message}",
            "unauthorized": "Autenticação necessária. Verifique suas credenciais.",
            "forbidden": "Acesso negado. Você não tem permissão para esta operação.",
            "not_found": "O recurso solicitado não foi encontrado.",
            "client_error": "Erro na requisição: {api_message} (Status: {status_code})",
            "default": "Erro da API: {api_message} (Status: {status_code})",
        },
        "network": {
            "timeout": "Timeout da requisição. O servidor demorou muito para responder.",
            "connection_refused": "Conexão recusada. O serviço pode estar indisponível.",
            "dns_resolution": "Falha na resolução DNS. Verifique o endereço do servidor.",
            "ssl": "Erro SSL. Verifique o certificado e as configurações de segurança.",
            "default": "Erro de rede: {original_message}",
        },
        "general": {
            "config": "Configuração inválida do SDK: {message}",
            "retry_exhausted": "A requisição falhou após {attempts} tentativas. {last_error}",
            "no_errors": "Nenhum erro encontrado",
            "multiple_errors_header": "Encontrado(s) {count} erro(s):",
            "more_errors": "... e mais {count} erro(s)",
            "context_details": "Detalhes adicionais: {details}",
        },
    },
}


class _Params(dict):
    """Format arguments that render a missing placeholder as empty"""

    def __missing__(self, key: str) -> str:
        return ""


class ErrorFormatter:
    """
    Formats SDK errors for display and logging

    Messages are available in English (``en``) and Portuguese (``pt``);
    an unknown locale falls back to English.

    Example:
        >>> formatter = ErrorFormatter(locale="pt")
        >>> formatter.get_user_friendly_message(error)
    """

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        self.locale = locale

    @property
    def locale(self) -> str:
        return self._locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._locale = value if value in MESSAGES else DEFAULT_LOCALE

    def format_validation_error(self, field: str, rule: str) -> str:
        return self._message("validation", rule, field=field, fallback="default")

    def format_api_error(
        self, status_code: int, api_message: str, error_code: Optional[str] = None
    ) -> str:
        """Pick a message by status class; the API's own text is sanitized"""
        if status_code >= 500:
            key = "server_error"
        elif status_code == 429:
            key = "rate_limit"
        elif status_code == 422:
            key = "validation"
        elif status_code == 401:
            key = "unauthorized"
        elif status_code == 403:
            key = "forbidden"
        elif status_code == 404:
            key = "not_found"
        elif status_code >= 400:
            key = "client_error"
        else:
            key = "default"

        return self._message(
            "api",
            key,
            status_code=status_code,
            api_message=self.sanitize_message(api_message),
            error_code=error_code or "",
        )

    def format_network_error(self, error_type: str, original_message: str) -> str:
        return self._message(
            "network",
            error_type,
            original_message=self.sanitize_message(original_message),
            fallback="default",
        )

    def get_user_friendly_message(self, error: BaseException, include_details: bool = False) -> str:
        """
        One sanitized sentence describing ``error``

        With ``include_details`` the error code, HTTP status and any scalar
        ``details`` of an XGateError are appended.
        """
        if isinstance(error, ValidationError):
            message = self._validation_message(error)
        elif isinstance(error, RateLimitError):
            message = self._message("api", "rate_limit", status_code=429)
            if error.has_retry_after:
                message += " " + self._message("api", "retry_after", seconds=error.retry_after)
        elif isinstance(error, ApiError):
            message = self.format_api_error(
                error.status_code, self._api_text(error), error.api_error_code
            )
        elif isinstance(error, NetworkError):
            message = self.format_network_error(
                NETWORK_ERROR_TYPES.get(error.network_code, "default"), str(error)
            )
        elif isinstance(error, AuthenticationError):
            message = self._message("api", "unauthorized")
        elif isinstance(error, RetryExhaustedError):
            message = self._message(
                "general",
                "retry_exhausted",
                attempts=error.attempts,
                last_error=self.get_user_friendly_message(error.last_error),
            )
        elif isinstance(error, ConfigError):
            message = self._message("general", "config", message=self.sanitize_message(str(error)))
        else:
            message = self.sanitize_message(str(error))

        if include_details and isinstance(error, XGateError):
            message += self._details(error)
        return message

    def aggregate_errors(self, errors: Iterable[BaseException], max_display: int = 5) -> str:
        """Numbered list of friendly messages, truncated after ``max_display``"""
        errors = list(errors)
        if not errors:
            return self._message("general", "no_errors")

        lines = [self._message("general", "multiple_errors_header", count=len(errors))]
        for index, error in enumerate(errors[:max_display], start=1):
            lines.append(f"  {index}. {self.get_user_friendly_message(error)}")

        if len(errors) > max_display:
            lines.append(self._message("general", "more_errors", count=len(errors) - max_display))
        return "\n".join(lines)

    def log_error(
        self,
        error: BaseException,
        context: Optional[Mapping[str, Any]] = None,
        severity: str = "medium",
    ) -> None:
        """Log the friendly message with a sanitized context at ``severity``"""
        level = SEVERITY_LEVELS.get(severity, logging.ERROR)
        log_context: Dict[str, Any] = {"error_class": type(error).__name__, "locale": self.locale}
        if isinstance(error, XGateError):
            log_context["error"] = error.to_dict()
        log_context.update(context or {})

        logger.log(
            level,
            f"{self.get_user_friendly_message(error)} "
            f"context={self.sanitize_context(log_context)}"
        )

    def sanitize_message(self, message: str) -> str:
        """Replace bearer tokens, emails, card numbers, CPFs and CNPJs"""
        for pattern, replacement in SANITIZE_PATTERNS:
            message = pattern.sub(replacement, message)
        return message

    def sanitize_context(self, context: Any) -> Any:
        """Redact sensitive keys, then sanitize every remaining string"""
        redacted = redact_sensitive_data(context)
        if isinstance(redacted, dict):
            return {key: self.sanitize_context(value) for key, value in redacted.items()}
        if isinstance(redacted, list):
            return [self.sanitize_context(item) for item in redacted]
        if isinstance(redacted, str) and redacted != REDACTED:
            return self.sanitize_message(redacted)
        return redacted

    def _message(self, category: str, key: str, fallback: Optional[str] = None, **params: Any) -> str:
        templates = MESSAGES[self.locale][category]
        template = templates.get(key) or templates.get(fallback or "", key)
        return template.format_map(_Params(params)).strip()

    def _validation_message(self, error: ValidationError) -> str:
        fields = [name for name in error.field_errors if name != "_general"]
        if len(error.field_errors) == 1 and len(fields) == 1:
            messages = error.field_errors[fields[0]]
            if len(messages) == 1:
                prefix = self.format_validation_error(fields[0], "default")
                return f"{prefix}: {self.sanitize_message(str(messages[0]))}"
        return self.sanitize_message(str(error))

    def _api_text(self, error: ApiError) -> str:
        text = str(error)
        return text[len("API error: "):] if text.startswith("API error: ") else text

    def _details(self, error: XGateError) -> str:
        details: Dict[str, Any] = {"code": error.code, "status_code": error.status_code}
        details.update(error.details or {})
        scalars = {
            key: value
            for key, value in self.sanitize_context(details).items()
            if value is not None and isinstance(value, (str, int, float, bool))
        }
        if not scalars:
            return ""
        text = ", ".join(f"{key}: {value}" for key, value in scalars.items())
        return "\n" + self._message("general", "context_details", details=text)
