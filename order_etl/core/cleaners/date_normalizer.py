"""
DateNormalizer - converts free-form order date text into a calendar date.
"""

import re
from datetime import date

from order_etl.core.models import RejectionReason, StagedOrder

from .base_cleaner import BaseCleaner, CleaningError

_DAY_FIRST_PATTERN = re.compile(r"^([0-9]{2})-([0-9]{2})-([0-9]{4})$")
_ISO_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")


class DateNormalizer(BaseCleaner):
    """
    Normalizes order dates to a single canonical calendar date.

    Steps, in order:
    1. Replace every "/" with "-"
    2. Reorder DD-MM-YYYY text to YYYY-MM-DD; YYYY-MM-DD and any other
       shape pass through unchanged
    3. Check the text denotes a real calendar day
    4. If it does not, apply the manual override for this order_id, if any
    5. Promote to datetime.date

    Dates have no safe placeholder, so anything still invalid after
    step 4 is rejected.
    """

    @staticmethod
    def normalize_separators(text: str) -> str:
        """Replace "/" separators with "-"."""
        return text.replace("/", "-")

    @staticmethod
    def to_year_first(text: str) -> str:
        """
        Reorder day-month-year text to year-month-day.

        Args:
            text: Date text with "-" separators

        Returns:
            "YYYY-MM-DD" for DD-MM-YYYY input, otherwise the text unchanged
        """
        match = _DAY_FIRST_PATTERN.match(text)
        if not match:
            return text
        day, month, year = match.groups()
        return f"{year}-{month}-{day}"

    @staticmethod
    def parse_calendar_date(text: str) -> date | None:
        """
        Parse YYYY-MM-DD text into a date.

        Returns:
            The date, or None if the text has another shape or names a
            day that does not exist (month 13, February 30, ...)
        """
        match = _ISO_PATTERN.match(text)
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    def normalize(self, text: str | None, order_id: int | None = None) -> date:
        """
        Convert raw date text to a calendar date.

        Args:
            text: Raw order date text
            order_id: Key used to look up a manual override

        Returns:
            The normalized date

        Raises:
            CleaningError: If the date is absent, or invalid with no override
        """
        if text is None:
            raise CleaningError(
                reason=RejectionReason.MISSING_DATE,
                field_name="order_date",
                message="order_date is absent",
            )

        candidate = self.to_year_first(self.normalize_separators(text.strip()))
        parsed = self.parse_calendar_date(candidate)
        if parsed is not None:
            return parsed

        override = self._lookup_override(order_id)
        if override is not None:
            return override

        raise CleaningError(
            reason=RejectionReason.INVALID_DATE,
            field_name="order_date",
            message=f"order_date '{text}' is not a valid calendar date",
        )

    def clean(self, order: StagedOrder) -> StagedOrder:
        """Normalize the order date, recording a repair when an override was used."""
        text = order.raw.order_date
        try:
            normalized = self.normalize(text, order.order_id)
        except CleaningError as e:
            return order.with_defect(e.to_defect())

        if self._needed_override(text):
            return order.with_repair("date_override_applied", order_date=normalized)
        if text.strip() != normalized.isoformat():
            return order.with_repair("date_format_normalized", order_date=normalized)
        return order.model_copy(update={"order_date": normalized})

    def _lookup_override(self, order_id: int | None) -> date | None:
        if order_id is None:
            return None
        return self.policy.date_overrides.get(order_id)

    def _needed_override(self, text: str) -> bool:
        candidate = self.to_year_first(self.normalize_separators(text.strip()))
        return self.parse_calendar_date(candidate) is None

    @property
    def stage_name(self) -> str:
        return "date_normalization"
