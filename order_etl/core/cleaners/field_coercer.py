"""
FieldCoercer - repairs price and quantity text in isolation.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from order_etl.core.models import RejectionReason, StagedOrder

from .base_cleaner import BaseCleaner, CleaningError

# Optional sign followed by base-10 digits; "2.5" and "1e3" are not quantities.
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


class FieldCoercer(BaseCleaner):
    """
    Makes price and quantity numeric and policy-compliant.

    Rules:
    - price: numeric text is kept (quantized to policy.price_decimal_places);
      non-numeric text becomes 0 or is rejected, depending on
      policy.non_numeric_price
    - quantity: absent becomes 0; negative values are treated as sign
      errors and folded to their magnitude; non-integer text is rejected
    """

    @property
    def price_quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.policy.price_decimal_places)

    def coerce_price(self, text: str | None) -> Decimal:
        """
        Coerce raw price text to a fixed-point Decimal.

        Args:
            text: Raw price text

        Returns:
            The price, or Decimal("0.00") for non-numeric text under the
            "zero" policy

        Raises:
            CleaningError: If the price is absent, or non-numeric under
                the "reject" policy
        """
        if text is None:
            raise CleaningError(
                reason=RejectionReason.MISSING_PRICE,
                field_name="price",
                message="price is absent",
            )

        value = self._parse_decimal(text)
        if value is None:
            if self.policy.non_numeric_price == "reject":
                raise CleaningError(
                    reason=RejectionReason.NON_NUMERIC_PRICE,
                    field_name="price",
                    message=f"price '{text}' is not numeric",
                )
            return Decimal("0").quantize(self.price_quantum)

        try:
            return value.quantize(self.price_quantum, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise CleaningError(
                reason=RejectionReason.CONSTRAINT_VIOLATION,
                field_name="price",
                message=f"price '{text}' exceeds decimal precision",
            )

    def coerce_quantity(self, text: str | None) -> int:
        """
        Coerce raw quantity text to a non-negative integer.

        Args:
            text: Raw quantity text

        Returns:
            0 if absent, otherwise the absolute value of the parsed integer

        Raises:
            CleaningError: If the text is not an integer
        """
        if text is None:
            return 0

        stripped = text.strip()
        if not _INTEGER_PATTERN.match(stripped):
            raise CleaningError(
                reason=RejectionReason.UNPARSEABLE_QUANTITY,
                field_name="quantity",
                message=f"quantity '{text}' is not an integer",
            )
        return abs(int(stripped))

    def clean(self, order: StagedOrder) -> StagedOrder:
        """Coerce price and quantity, recording repairs and defects."""
        raw = order.raw

        try:
            price = self.coerce_price(raw.price)
            order = order.model_copy(update={"price": price})
            if self._parse_decimal(raw.price) is None:
                order = order.with_repair("price_non_numeric_zeroed")
        except CleaningError as e:
            order = order.with_defect(e.to_defect())

        try:
            quantity = self.coerce_quantity(raw.quantity)
            if raw.quantity is None:
                order = order.with_repair("quantity_null_defaulted", quantity=quantity)
            elif int(raw.quantity.strip()) < 0:
                order = order.with_repair("quantity_absolute_value", quantity=quantity)
            else:
                order = order.model_copy(update={"quantity": quantity})
        except CleaningError as e:
            order = order.with_defect(e.to_defect())

        return order

    @staticmethod
    def _parse_decimal(text: str) -> Decimal | None:
        """Parse finite decimal text, returning None when it is not numeric."""
        try:
            value = Decimal(text.strip())
        except InvalidOperation:
            return None
        if not value.is_finite():
            return None
        return value

    @property
    def stage_name(self) -> str:
        return "field_coercion"
