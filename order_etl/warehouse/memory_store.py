"""
In-memory raw and canonical order stores.

Used by the demo command and by tests; semantics match the PostgreSQL stores.
"""

from order_etl.core.models import CleanOrderRecord, RawOrderRecord

from .base_store import CanonicalOrderStore, DuplicateKeyError, RawOrderStore


class InMemoryRawOrderStore(RawOrderStore):
    """
    Raw order store backed by a list.

    Raw keys are not enforced unique here: the pipeline treats a batch
    with repeated keys as malformed, and tests need to build one.
    """

    def __init__(self, records: list[RawOrderRecord] | None = None):
        self._records: list[RawOrderRecord] = list(records or [])

    def scan_all(self) -> list[RawOrderRecord]:
        return sorted(
            self._records,
            key=lambda r: (r.order_id is None, r.order_id or 0),
        )

    def insert(self, records: list[RawOrderRecord]) -> int:
        self._records.extend(records)
        return len(records)

    def delete_by_key(self, order_id: int) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.order_id != order_id]
        return len(self._records) < before

    @property
    def store_name(self) -> str:
        return "memory"


class InMemoryCanonicalOrderStore(CanonicalOrderStore):
    """Canonical order store backed by a dict keyed by order_id."""

    def __init__(self):
        self._records: dict[int, CleanOrderRecord] = {}

    def bulk_insert(self, records: list[CleanOrderRecord]) -> int:
        seen: set[int] = set()
        conflicts = []
        for record in records:
            if record.order_id in self._records or record.order_id in seen:
                conflicts.append(record.order_id)
            seen.add(record.order_id)
        if conflicts:
            raise DuplicateKeyError(conflicts)

        for record in records:
            self._records[record.order_id] = record
        return len(records)

    def scan_all(self) -> list[CleanOrderRecord]:
        return [self._records[key] for key in sorted(self._records)]

    def __len__(self) -> int:
        return len(self._records)

    @property
    def store_name(self) -> str:
        return "memory"
