"""
ConstraintEnforcer - final gate before the canonical store.
"""

from pydantic import ValidationError

from order_etl.core.models import (
    CleanOrderRecord,
    Defect,
    RejectedOrder,
    RejectionReason,
    StagedOrder,
)
from order_etl.observability.logger import get_logger

from .base_cleaner import ConstraintViolation

logger = get_logger(__name__)


class ConstraintEnforcer:
    """
    Re-validates every canonical invariant on a fully processed order.

    Orders carrying defects from earlier stages are rejected with those
    reasons. Clean ones are promoted to CleanOrderRecord, whose model
    re-checks quantity, price, date, name and product; invariant
    failures are mapped back to reason codes.
    """

    # Pydantic field name -> reason code for invariant failures
    FIELD_REASONS = {
        "price": RejectionReason.NEGATIVE_PRICE,
        "product": RejectionReason.MISSING_PRODUCT,
        "customer_name": RejectionReason.EMPTY_CUSTOMER_NAME,
        "order_date": RejectionReason.INVALID_DATE,
        "quantity": RejectionReason.UNPARSEABLE_QUANTITY,
    }

    def enforce(self, order: StagedOrder) -> CleanOrderRecord:
        """
        Promote one staged order to a canonical record.

        Args:
            order: Order after all repair stages

        Returns:
            CleanOrderRecord

        Raises:
            ConstraintViolation: If the order carries defects or breaks an invariant
        """
        if order.is_defective:
            raise ConstraintViolation(order.order_id, list(order.defects))

        try:
            return CleanOrderRecord(
                order_id=order.order_id,
                customer_name=order.customer_name,
                order_date=order.order_date,
                product=order.product,
                quantity=order.quantity,
                price=order.price,
            )
        except ValidationError as e:
            raise ConstraintViolation(order.order_id, self._defects_from(e)) from e

    def enforce_batch(
        self,
        orders: list[StagedOrder]
    ) -> tuple[list[CleanOrderRecord], list[RejectedOrder]]:
        """
        Enforce constraints over a batch, collecting rejects with reasons.

        Args:
            orders: Orders after duplicate resolution

        Returns:
            Tuple of (accepted records, rejected orders)
        """
        accepted: list[CleanOrderRecord] = []
        rejected: list[RejectedOrder] = []
        accepted_ids: set[int] = set()

        for order in orders:
            try:
                record = self.enforce(order)
                if record.order_id in accepted_ids:
                    raise ConstraintViolation(order.order_id, [Defect(
                        reason=RejectionReason.DUPLICATE_ORDER_ID,
                        field_name="order_id",
                        message=f"order_id {record.order_id} was already accepted in this batch",
                    )])
            except ConstraintViolation as e:
                rejected.append(RejectedOrder(
                    order_id=order.order_id,
                    raw_record=order.raw,
                    reasons=e.reasons,
                    error_messages=e.messages,
                ))
                logger.warning(
                    f"Rejected order {order.order_id}: {', '.join(r.value for r in e.reasons)}",
                    extra={
                        "order_id": order.order_id,
                        "reasons": [r.value for r in e.reasons],
                        "stage": self.stage_name,
                    }
                )
                continue

            accepted_ids.add(record.order_id)
            accepted.append(record)

        return accepted, rejected

    def _defects_from(self, error: ValidationError) -> list[Defect]:
        """Translate Pydantic errors into defects, one per failing field."""
        defects = []
        for detail in error.errors():
            field_name = str(detail["loc"][0]) if detail.get("loc") else "record"
            reason = self.FIELD_REASONS.get(field_name, RejectionReason.CONSTRAINT_VIOLATION)
            # Column range and digit limits on numbers are generic violations.
            if field_name in ("price", "quantity") and detail.get("type") != "greater_than_equal":
                reason = RejectionReason.CONSTRAINT_VIOLATION
            defects.append(Defect(
                reason=reason,
                field_name=field_name,
                message=f"{field_name}: {detail['msg']}",
            ))
        return defects

    @property
    def stage_name(self) -> str:
        return "constraint_enforcement"
