"""
NullResolver - substitutes the policy placeholder for a missing customer name.
"""

from order_etl.core.models import StagedOrder

from .base_cleaner import BaseCleaner


class NullResolver(BaseCleaner):
    """
    Replaces an absent or blank customer_name with the policy placeholder.

    Absence is always resolvable here, so this stage never records a defect.
    """

    def resolve_customer_name(self, name: str | None) -> str:
        """Return the name, or the placeholder if it is absent or blank."""
        if name is None or not name.strip():
            return self.policy.customer_name_placeholder
        return name

    def clean(self, order: StagedOrder) -> StagedOrder:
        resolved = self.resolve_customer_name(order.customer_name)
        if resolved != order.customer_name:
            return order.with_repair("customer_name_placeholder", customer_name=resolved)
        return order

    @property
    def stage_name(self) -> str:
        return "null_resolution"
