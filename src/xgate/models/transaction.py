"""Deposit and withdrawal transaction model"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from xgate.models.defaults import default_for_null


class Transaction(BaseModel):
    """Deposit or withdrawal transaction"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("id", "_id"),
        description="Transaction ID",
    )
    amount: Decimal = Field(Decimal("0.00"), description="Transaction amount")
    currency: str = Field("BRL", description="Currency code")
    account_id: Optional[str] = Field(None, description="Account ID")
    payment_method: Optional[str] = Field(None, description="Payment method")
    type: str = Field("deposit", description="deposit or withdrawal")
    status: str = Field("pending", description="Transaction status")
    reference_id: Optional[str] = Field(None, description="Caller reference")
    description: Optional[str] = Field(None, description="Description")
    fees: Optional[Decimal] = Field(None, description="Fees charged")
    exchange_rate: Optional[Decimal] = Field(None, description="Applied exchange rate")
    callback_url: Optional[str] = Field(None, description="Webhook URL")
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt", "createdDate"),
    )
    updated_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("updated_at", "updatedAt", "updatedDate"),
    )
    completed_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("completed_at", "completedAt", "completedDate"),
    )
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("amount", "currency", "type", "status", "metadata", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return default_for_null(cls, v, info)

    @property
    def is_deposit(self) -> bool:
        return self.type.lower() == "deposit"

    @property
    def is_withdrawal(self) -> bool:
        return self.type.lower() == "withdrawal"

    @property
    def is_completed(self) -> bool:
        return self.status.lower() == "completed"

    def to_dict(self) -> Dict[str, Any]:
        """Request payload form: amounts as strings, unset values dropped"""
        data = self.model_dump(mode="json", exclude_none=True)
        if not self.metadata:
            data.pop("metadata", None)
        return data
