"""Shared pieces of the resource services"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from xgate.client.http_client import HttpMethod
from xgate.exceptions import ValidationError
from xgate.utils.masking import redact_sensitive_data

M = TypeVar("M", bound=BaseModel)


class AuthenticatedRequest(Protocol):
    """Callable that sends an authenticated request and returns parsed JSON"""

    def __call__(
        self,
        method: Union[HttpMethod, str],
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        ...


class BaseService:
    """Holds the request callable; services never touch headers or tokens"""

    def __init__(self, request: AuthenticatedRequest) -> None:
        self._request = request


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def pick_filters(filters: Optional[Mapping[str, Any]], allowed: tuple) -> Dict[str, Any]:
    """Keep only the allowed, non-None filter keys"""
    if not filters:
        return {}
    return {key: filters[key] for key in allowed if filters.get(key) is not None}


def as_record(data: Any) -> Dict[str, Any]:
    """The body when it is a JSON object, otherwise an empty one"""
    return data if isinstance(data, dict) else {}


def as_items(data: Any, envelope: str) -> List[Dict[str, Any]]:
    """
    Objects of a listing that is either a bare array or wrapped in
    ``envelope``; anything that is not an object is skipped
    """
    items = data.get(envelope) if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def parse_record(model: Type[M], data: Any) -> M:
    """
    Build ``model`` from an API record

    Raises:
        ValidationError: The record has values the model cannot accept;
            the redacted record is kept under ``details["body"]``
    """
    try:
        return model.model_validate(as_record(data))
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(
            e,
            f"Unexpected {model.__name__} data in API response",
            details={"body": redact_sensitive_data(data)},
        ) from e
