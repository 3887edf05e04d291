"""
Unit tests for batch-wide duplicate resolution.
"""

from datetime import date
from decimal import Decimal

from hypothesis import given
from hypothesis import strategies as st

from order_etl.core.cleaners import DuplicateResolver
from order_etl.core.models import Defect, RawOrderRecord, RejectionReason, StagedOrder


def cleaned(order_id, customer_name="John Doe", product="Widget A", quantity=5, price="19.99",
            order_date=date(2023, 12, 1)) -> StagedOrder:
    """A staged order with every key field already cleaned."""
    return StagedOrder(
        order_id=order_id,
        raw=RawOrderRecord(order_id=order_id),
        customer_name=customer_name,
        order_date=order_date,
        product=product,
        quantity=quantity,
        price=Decimal(price),
    )


class TestDuplicateResolver:
    """Tests for DuplicateResolver"""

    def test_keeps_lower_order_id(self):
        kept, discarded = DuplicateResolver().resolve([cleaned(1), cleaned(3)])

        assert [o.order_id for o in kept] == [1]
        assert len(discarded) == 1
        assert discarded[0].order_id == 3
        assert discarded[0].kept_order_id == 1

    def test_keeps_lower_order_id_regardless_of_position(self):
        kept, discarded = DuplicateResolver().resolve([cleaned(3), cleaned(1)])

        assert [o.order_id for o in kept] == [1]
        assert [d.order_id for d in discarded] == [3]

    def test_distinct_orders_all_kept(self):
        orders = [cleaned(1), cleaned(2, quantity=6), cleaned(3, product="Widget B")]
        kept, discarded = DuplicateResolver().resolve(orders)

        assert [o.order_id for o in kept] == [1, 2, 3]
        assert discarded == []

    def test_key_uses_cleaned_values(self):
        """Different raw text that cleans to the same values is a duplicate"""
        first = cleaned(1, price="15.50")
        second = cleaned(2, price="15.5")

        kept, discarded = DuplicateResolver().resolve([first, second])

        assert [o.order_id for o in kept] == [1]
        assert [d.order_id for d in discarded] == [2]

    def test_many_duplicates_collapse_to_one(self):
        kept, discarded = DuplicateResolver().resolve([cleaned(i) for i in (9, 4, 7, 5)])

        assert [o.order_id for o in kept] == [4]
        assert [d.order_id for d in discarded] == [5, 7, 9]

    def test_defective_orders_bypass_detection(self):
        broken = cleaned(1).with_defect(Defect(
            reason=RejectionReason.INVALID_DATE, field_name="order_date", message="bad"
        ))
        good = cleaned(2)

        kept, discarded = DuplicateResolver().resolve([broken, good])

        assert [o.order_id for o in kept] == [1, 2]
        assert discarded == []

    def test_incomplete_key_bypasses_detection(self):
        incomplete = cleaned(1).model_copy(update={"quantity": None})

        kept, discarded = DuplicateResolver().resolve([incomplete, cleaned(2)])

        assert len(kept) == 2
        assert discarded == []

    def test_empty_batch(self):
        assert DuplicateResolver().resolve([]) == ([], [])

    @given(st.permutations([1, 2, 3, 4, 5, 6]))
    def test_property_result_independent_of_input_order(self, ids):
        """Property test: the same set of orders always resolves the same way"""
        orders = [cleaned(i, quantity=i % 2) for i in ids]

        kept, discarded = DuplicateResolver().resolve(orders)

        assert sorted(o.order_id for o in kept) == [1, 2]
        assert [d.order_id for d in discarded] == [3, 4, 5, 6]
