"""Customer model"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from xgate.models.defaults import default_for_null


class Customer(BaseModel):
    """
    Customer record

    Accepts the API's field names (``_id``, ``createdDate``, ``updatedDate``)
    as well as the SDK's own.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("id", "_id"),
        description="Customer ID",
    )
    name: str = Field("", description="Customer name")
    email: str = Field("", description="Customer email")
    phone: Optional[str] = Field(None, description="Phone number")
    document: Optional[str] = Field(None, description="CPF/CNPJ document")
    document_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("document_type", "documentType"),
        description="Document type",
    )
    status: str = Field("active", description="Customer status")
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt", "createdDate"),
        description="Creation timestamp",
    )
    updated_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("updated_at", "updatedAt", "updatedDate"),
        description="Last update timestamp",
    )
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    @field_validator("name", "email", "status", "metadata", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return default_for_null(cls, v, info)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with SDK field names, leaving out unset values"""
        data = self.model_dump(mode="json", exclude_none=True)
        if not self.metadata:
            data.pop("metadata", None)
        return data
