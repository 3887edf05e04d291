"""
RawOrderRecord model representing an order exactly as extracted.
"""

from pydantic import BaseModel


class RawOrderRecord(BaseModel):
    """
    An order record in its as-extracted, untyped form (immutable).

    Every field except order_id is free text and may be absent. The
    pipeline never modifies a raw record; it derives new values from it.

    Attributes:
        order_id: Source-assigned key (None if the source had none)
        customer_name: Customer name, may be absent
        order_date: Free-form date text ("23/11/2023", "2023-12-01", ...)
        product: Product name
        quantity: Quantity text, may be absent, negative or malformed
        price: Price text, may be non-numeric
    """

    order_id: int | None = None
    customer_name: str | None = None
    order_date: str | None = None
    product: str | None = None
    quantity: str | None = None
    price: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "order_id": 6,
                "customer_name": "Bob Wilson",
                "order_date": "2023-13-01",
                "product": "Widget E",
                "quantity": "-2",
                "price": "30.00"
            }
        }
