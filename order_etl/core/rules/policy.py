"""
CleaningPolicy model holding the configurable repair policy.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_CUSTOMER_NAME_PLACEHOLDER = "Not found"


class CleaningPolicy(BaseModel):
    """
    Repair policy applied by the cleaning stages.

    Attributes:
        customer_name_placeholder: Sentinel substituted for a missing customer name
        non_numeric_price: "zero" repairs non-numeric prices to 0, "reject" rejects them
        price_decimal_places: Fractional digits prices are rounded to (the
            canonical table holds at most two)
        date_overrides: Manual corrections for known calendar-invalid dates,
            keyed by order_id
    """

    customer_name_placeholder: str = DEFAULT_CUSTOMER_NAME_PLACEHOLDER
    non_numeric_price: Literal["zero", "reject"] = "zero"
    price_decimal_places: int = Field(2, ge=0, le=2)
    date_overrides: dict[int, date] = Field(default_factory=dict)

    @field_validator('customer_name_placeholder')
    @classmethod
    def check_placeholder_not_blank(cls, v: str) -> str:
        """A blank placeholder would re-introduce empty customer names."""
        if not v.strip():
            raise ValueError("customer_name_placeholder must not be blank")
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "customer_name_placeholder": "Not found",
                "non_numeric_price": "zero",
                "price_decimal_places": 2,
                "date_overrides": {6: "2023-01-13"}
            }
        }
