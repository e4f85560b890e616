"""Paginated listing model"""

from typing import Any, Dict, Generic, List, TypeVar

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from xgate.models.defaults import default_for_null

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing"""

    data: List[T] = Field(default_factory=list)
    pagination: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", "pagination", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return default_for_null(cls, v, info)

    @property
    def total(self) -> int:
        return int(self.pagination.get("total", len(self.data)))

    def __len__(self) -> int:
        return len(self.data)
