"""
Store interfaces for raw and canonical orders.

The pipeline only depends on these interfaces; in-memory and PostgreSQL
implementations live alongside.
"""

from abc import ABC, abstractmethod

from order_etl.core.models import CleanOrderRecord, RawOrderRecord


class DuplicateKeyError(Exception):
    """Raised when a write would repeat an existing primary key."""

    def __init__(self, order_ids: list[int]):
        self.order_ids = sorted(set(order_ids))
        super().__init__(f"order_id already present: {self.order_ids}")


class RawOrderStore(ABC):
    """Keyed store holding raw orders before cleaning."""

    @abstractmethod
    def scan_all(self) -> list[RawOrderRecord]:
        """Return every raw order, ordered by order_id."""
        pass

    @abstractmethod
    def insert(self, records: list[RawOrderRecord]) -> int:
        """Insert raw orders, returning the number inserted."""
        pass

    @abstractmethod
    def delete_by_key(self, order_id: int) -> bool:
        """Delete one raw order, returning whether it existed."""
        pass


class CanonicalOrderStore(ABC):
    """Keyed store owning canonical orders; order_id is the primary key."""

    @abstractmethod
    def bulk_insert(self, records: list[CleanOrderRecord]) -> int:
        """
        Insert canonical orders atomically.

        Raises:
            DuplicateKeyError: If any order_id repeats within the batch or
                already exists; nothing is written in that case
        """
        pass

    @abstractmethod
    def scan_all(self) -> list[CleanOrderRecord]:
        """Return every canonical order, ordered by order_id."""
        pass

    @property
    def store_name(self) -> str:
        return self.__class__.__name__
