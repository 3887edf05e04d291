"""
DuplicateResolver - keeps exactly one order per duplicate key across a batch.
"""

from order_etl.core.models import DuplicateDiscard, StagedOrder
from order_etl.observability.logger import get_logger

logger = get_logger(__name__)


class DuplicateResolver:
    """
    Detects orders that describe the same real-world order and keeps one.

    The duplicate key is (customer_name, order_date, product, quantity, price)
    over cleaned values, so formatting differences in the raw text neither
    hide nor invent duplicates. Among orders sharing a key the lowest
    order_id wins, which makes the outcome independent of input order.

    Runs as a single global pass over the whole batch. Orders that already
    carry defects have no complete key and pass through untouched; the
    constraint gate rejects them.
    """

    def resolve(self, orders: list[StagedOrder]) -> tuple[list[StagedOrder], list[DuplicateDiscard]]:
        """
        Drop duplicates from a batch.

        Args:
            orders: Staged orders after field coercion, date normalization
                and null resolution

        Returns:
            Tuple of (kept orders in input order, discard audit entries)
        """
        best: dict[tuple, StagedOrder] = {}
        for order in orders:
            key = order.duplicate_key()
            if key is None or order.is_defective:
                continue
            current = best.get(key)
            if current is None or order.order_id < current.order_id:
                best[key] = order

        kept: list[StagedOrder] = []
        discarded: list[DuplicateDiscard] = []
        for order in orders:
            key = order.duplicate_key()
            if key is None or order.is_defective:
                kept.append(order)
                continue
            winner = best[key]
            if winner is order:
                kept.append(order)
            else:
                discarded.append(DuplicateDiscard(
                    order_id=order.order_id,
                    kept_order_id=winner.order_id,
                    duplicate_key=key,
                    raw_order_id=order.raw.order_id,
                ))
                logger.debug(
                    f"Discarded duplicate order {order.order_id}",
                    extra={
                        "order_id": order.order_id,
                        "kept_order_id": winner.order_id,
                        "stage": self.stage_name,
                    }
                )

        discarded.sort(key=lambda entry: entry.order_id)
        return kept, discarded

    @property
    def stage_name(self) -> str:
        return "duplicate_resolution"
