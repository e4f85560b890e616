"""Exchange rate model"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ExchangeRate(BaseModel):
    """Rate between two currencies; unknown API fields are kept as extras"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    from_currency: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("from_currency", "from", "fromCurrency"),
    )
    to_currency: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("to_currency", "to", "toCurrency"),
    )
    rate: Optional[Decimal] = Field(None, description="Units of to_currency per from_currency")
    timestamp: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("timestamp", "updated_at", "updatedAt"),
    )

