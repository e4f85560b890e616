"""PIX key model"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from xgate.models.defaults import default_for_null


class PixKeyType(str, Enum):
    """PIX key types"""
    CPF = "cpf"
    CNPJ = "cnpj"
    EMAIL = "email"
    PHONE = "phone"
    RANDOM = "random"


class PixKey(BaseModel):
    """PIX key registered for an account"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("id", "_id"),
        description="PIX key ID",
    )
    type: str = Field("", description="Key type (cpf, cnpj, email, phone, random)")
    key: str = Field("", description="Key value")
    account_holder_name: Optional[str] = Field(None, description="Account holder name")
    account_holder_document: Optional[str] = Field(None, description="Account holder document")
    bank_code: Optional[str] = Field(None, description="Bank code")
    bank_name: Optional[str] = Field(None, description="Bank name")
    branch: Optional[str] = Field(None, description="Branch number")
    account_number: Optional[str] = Field(None, description="Account number")
    account_type: Optional[str] = Field(None, description="Account type")
    status: str = Field("active", description="Key status")
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt", "createdDate"),
    )
    updated_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("updated_at", "updatedAt", "updatedDate"),
    )
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("type", "key", "status", "metadata", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return default_for_null(cls, v, info)

    def is_type(self, key_type: PixKeyType) -> bool:
        return self.type.lower() == key_type.value

    @property
    def is_active(self) -> bool:
        return self.status.lower() == "active"

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True)
        if not self.metadata:
            data.pop("metadata", None)
        return data
