"""
CleanOrderRecord model representing a canonical, validated order.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

# Upper bound of the PostgreSQL INTEGER columns (order_id, quantity)
MAX_INTEGER = 2**31 - 1


class CleanOrderRecord(BaseModel):
    """
    Fully validated, typed order eligible for the canonical store.

    Mirrors the clean_data table: order_id is the primary key, price is
    DECIMAL(10,2), quantity fits INTEGER, every other column is NOT NULL.

    Attributes:
        order_id: Primary key carried over from the raw record
        customer_name: Non-blank customer name (placeholder if it was missing)
        order_date: Valid calendar date
        product: Non-blank product name
        quantity: Non-negative integer within the INTEGER column range
        price: Non-negative decimal with two fractional digits
    """

    order_id: int = Field(..., gt=0, le=MAX_INTEGER)
    customer_name: str = Field(..., min_length=1, max_length=255)
    order_date: date
    product: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=0, le=MAX_INTEGER)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)

    @field_validator("customer_name", "product")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def duplicate_key(self) -> tuple:
        """Tuple of fields (everything but order_id) identifying the same order."""
        return (self.customer_name, self.order_date, self.product, self.quantity, self.price)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "order_id": 1,
                "customer_name": "John Doe",
                "order_date": "2023-12-01",
                "product": "Widget A",
                "quantity": 5,
                "price": "19.99"
            }
        }
