"""Null handling shared by the API record models"""

from typing import Any, Type

from pydantic import BaseModel, ValidationInfo


def default_for_null(model: Type[BaseModel], value: Any, info: ValidationInfo) -> Any:
    """Replace a JSON null with the field's default"""
    if value is None:
        field = model.model_fields[info.field_name]
        return field.get_default(call_default_factory=True)
    return value
