"""
RejectedOrder model representing a raw order that could not be made canonical.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .raw_order import RawOrderRecord


class RejectionReason(str, Enum):
    """Reason codes attached to rejected orders."""

    UNPARSEABLE_QUANTITY = "unparseable_quantity"
    INVALID_DATE = "invalid_date"
    MISSING_DATE = "missing_date"
    MISSING_PRICE = "missing_price"
    NON_NUMERIC_PRICE = "non_numeric_price"
    NEGATIVE_PRICE = "negative_price"
    MISSING_PRODUCT = "missing_product"
    EMPTY_CUSTOMER_NAME = "empty_customer_name"
    DUPLICATE_ORDER_ID = "duplicate_order_id"
    CONSTRAINT_VIOLATION = "constraint_violation"
    UNEXPECTED_ERROR = "unexpected_error"


class RejectedOrder(BaseModel):
    """
    Raw order rejected by the pipeline, with detailed reasons.

    Attributes:
        order_id: Key of the rejected record (assigned key if the source had none)
        raw_record: Original record as extracted
        reasons: Reason codes, at least one
        error_messages: Human-readable messages, one per reason
        rejected_at: When the record was rejected
    """

    order_id: int | None = None
    raw_record: RawOrderRecord
    reasons: list[RejectionReason] = Field(..., min_length=1)
    error_messages: list[str] = Field(..., min_length=1)
    rejected_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator('error_messages')
    @classmethod
    def check_arrays_same_length(cls, v, info):
        """Validate that reasons and error_messages have the same length."""
        reasons = info.data.get('reasons', [])
        if len(v) != len(reasons):
            raise ValueError(
                f"error_messages length ({len(v)}) must match reasons length ({len(reasons)})"
            )
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": 9,
                "raw_record": {
                    "order_id": 9,
                    "customer_name": "Mallory",
                    "order_date": "2023-02-30",
                    "product": "Widget H",
                    "quantity": "two",
                    "price": "12.00"
                },
                "reasons": ["unparseable_quantity", "invalid_date"],
                "error_messages": [
                    "quantity 'two' is not an integer",
                    "order_date '2023-02-30' is not a valid calendar date"
                ]
            }
        }
