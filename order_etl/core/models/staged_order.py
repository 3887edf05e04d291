"""
StagedOrder model representing an order between cleaning stages (ephemeral).
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from .raw_order import RawOrderRecord
from .rejected_order import RejectionReason


class Defect(BaseModel):
    """A rejection condition found by a stage, surfaced to the constraint gate."""

    reason: RejectionReason
    field_name: str
    message: str

    class Config:
        frozen = True


class StagedOrder(BaseModel):
    """
    An order in flight through the cleaning stages.

    Stages never mutate a StagedOrder; each returns a copy with its
    fields filled in. Cleaned fields stay None until the stage that
    owns them has run (or failed, in which case a Defect is recorded).

    Attributes:
        order_id: Effective key (raw key, or the one assigned by the pipeline)
        raw: The untouched raw record
        customer_name: Name after null resolution
        order_date: Calendar date after normalization
        product: Product name
        quantity: Non-negative quantity after coercion
        price: Decimal price after coercion
        repairs: Names of recoverable repairs applied so far
        defects: Rejection conditions found so far
    """

    order_id: int
    raw: RawOrderRecord
    customer_name: str | None = None
    order_date: date | None = None
    product: str | None = None
    quantity: int | None = None
    price: Decimal | None = None
    repairs: tuple[str, ...] = ()
    defects: tuple[Defect, ...] = ()

    @classmethod
    def from_raw(cls, raw: RawOrderRecord, order_id: int | None = None) -> "StagedOrder":
        """Start staging a raw record, optionally under an assigned key."""
        return cls(
            order_id=order_id if order_id is not None else raw.order_id,
            raw=raw,
            customer_name=raw.customer_name,
            product=raw.product,
        )

    @property
    def is_defective(self) -> bool:
        return len(self.defects) > 0

    def with_repair(self, repair: str, **updates) -> "StagedOrder":
        """Return a copy with field updates and one more repair recorded."""
        return self.model_copy(update={**updates, "repairs": self.repairs + (repair,)})

    def with_defect(self, defect: Defect) -> "StagedOrder":
        """Return a copy with one more defect recorded."""
        return self.model_copy(update={"defects": self.defects + (defect,)})

    def duplicate_key(self) -> tuple | None:
        """
        Cleaned-value key used to detect duplicate orders.

        Returns None while any key field is still unresolved.
        """
        key = (self.customer_name, self.order_date, self.product, self.quantity, self.price)
        if any(part is None for part in key):
            return None
        return key

    class Config:
        frozen = True
