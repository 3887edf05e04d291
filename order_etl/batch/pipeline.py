"""
Batch cleaning pipeline orchestration.

Coordinates the flow: scan → coerce → normalize dates → resolve nulls
→ deduplicate → enforce constraints → bulk insert
"""

import time
from collections import Counter
from pathlib import Path
from typing import Any, Optional

from order_etl.core.cleaners import (
    ConstraintEnforcer,
    DateNormalizer,
    DuplicateResolver,
    FieldCoercer,
    NullResolver,
    StageError,
)
from order_etl.core.models import (
    PipelineResult,
    RawOrderRecord,
    RejectedOrder,
    RejectionReason,
    StagedOrder,
)
from order_etl.core.rules import CleaningPolicy, PolicyConfigLoader
from order_etl.observability.logger import get_logger, log_operation
from order_etl.observability.metrics import MetricsCollector
from order_etl.warehouse.base_store import CanonicalOrderStore, RawOrderStore

logger = get_logger(__name__)


class MalformedBatchError(ValueError):
    """Raised when a raw batch breaks the extract's primary-key guarantee."""

    def __init__(self, duplicate_ids: list[int]):
        self.duplicate_ids = sorted(set(duplicate_ids))
        super().__init__(f"Raw batch repeats order_id: {self.duplicate_ids}")


class OrderCleaningPipeline:
    """
    Orchestrates the order cleaning pipeline over one closed batch.

    Flow:
    1. Reject the whole batch if raw order_ids repeat
    2. Assign order_ids to raw orders that have none
    3. Per order: field coercion, date normalization, null resolution
    4. Whole batch: duplicate resolution
    5. Per order: constraint enforcement
    6. Hand accepted orders to the canonical store (process() only)

    One order's failure never aborts the batch; it becomes a rejection.
    """

    def __init__(
        self,
        policy: Optional[CleaningPolicy] = None,
        policy_path: Optional[str] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        """
        Initialize cleaning pipeline.

        Args:
            policy: Repair policy (takes precedence over policy_path)
            policy_path: Path to a cleaning policy YAML file
            metrics: Metrics collector (a new one if None)
        """
        if policy is None:
            policy = self._load_policy(policy_path)
        self.policy = policy
        self.metrics = metrics or MetricsCollector()

        self.field_coercer = FieldCoercer(policy)
        self.date_normalizer = DateNormalizer(policy)
        self.null_resolver = NullResolver(policy)
        self.duplicate_resolver = DuplicateResolver()
        self.constraint_enforcer = ConstraintEnforcer()

        self.record_stages = [self.field_coercer, self.date_normalizer, self.null_resolver]

    def run(self, raw_batch: list[RawOrderRecord]) -> PipelineResult:
        """
        Clean one batch of raw orders.

        Args:
            raw_batch: Materialized raw orders

        Returns:
            PipelineResult with accepted, rejected and discarded orders

        Raises:
            MalformedBatchError: If two raw orders share an order_id
        """
        start = time.time()
        try:
            self._check_unique_keys(raw_batch)
        except MalformedBatchError:
            self.metrics.record_batch_failure()
            raise

        staged: list[StagedOrder] = []
        rejected: list[RejectedOrder] = []
        for order_id, raw in self._assign_keys(raw_batch):
            try:
                staged.append(self._stage_record(raw, order_id))
            except StageError as e:
                logger.error(
                    f"Unexpected error cleaning order {order_id} in {e.stage_name}",
                    extra={
                        "order_id": order_id,
                        "stage": e.stage_name,
                        "error_type": type(e.cause).__name__,
                    },
                    exc_info=True
                )
                rejected.append(RejectedOrder(
                    order_id=order_id,
                    raw_record=raw,
                    reasons=[RejectionReason.UNEXPECTED_ERROR],
                    error_messages=[str(e)],
                ))

        repairs = Counter(repair for order in staged for repair in order.repairs)

        kept, discarded = self.duplicate_resolver.resolve(staged)
        accepted, constraint_rejects = self.constraint_enforcer.enforce_batch(kept)
        rejected.extend(constraint_rejects)
        rejected.sort(key=lambda r: (r.order_id is None, r.order_id or 0))

        result = PipelineResult(
            total_records=len(raw_batch),
            accepted=accepted,
            rejected=rejected,
            discarded=discarded,
            repairs=dict(repairs),
        )

        duration = time.time() - start
        self.metrics.record_batch(result, duration_seconds=duration)
        logger.info(
            f"Cleaned {result.total_records} orders: {len(accepted)} accepted, "
            f"{len(rejected)} rejected, {len(discarded)} duplicates",
            extra={"summary": result.summary(), "duration_seconds": round(duration, 3)}
        )
        return result

    def process(
        self,
        raw_store: RawOrderStore,
        canonical_store: CanonicalOrderStore,
        delete_discarded: bool = False,
        dry_run: bool = False
    ) -> dict[str, Any]:
        """
        Clean everything in the raw store into the canonical store.

        Args:
            raw_store: Source of raw orders (read once)
            canonical_store: Destination for accepted orders (written once)
            delete_discarded: Also delete discarded duplicates from the raw store
            dry_run: Clean and report without writing anything

        Returns:
            Dictionary with processing results:
            - total_records, accepted_records, rejected_records, duplicate_records
            - written_records: Records inserted into the canonical store
            - deleted_duplicates: Raw duplicates deleted
            - undeletable_duplicates: Discarded orders with no raw key, left in place
            - duration_seconds
            - result: The full PipelineResult
        """
        with log_operation("Cleaning order batch", logger=logger, dry_run=dry_run) as op:
            raw_batch = raw_store.scan_all()
            result = self.run(raw_batch)

            written = 0
            deleted = 0
            undeletable: list[int] = []
            if not dry_run:
                written = canonical_store.bulk_insert(result.accepted)
                self.metrics.record_canonical_write(canonical_store.store_name, written)
                if delete_discarded:
                    deleted, undeletable = self._delete_discarded(raw_store, result)
            elif result.accepted:
                logger.info("DRY RUN MODE: canonical store not written")

        return {
            **result.summary(),
            "written_records": written,
            "deleted_duplicates": deleted,
            "undeletable_duplicates": undeletable,
            "duration_seconds": round(op.duration, 3),
            "result": result,
        }

    def _stage_record(self, raw: RawOrderRecord, order_id: int) -> StagedOrder:
        """Run the per-record stages on one raw order."""
        order = StagedOrder.from_raw(raw, order_id=order_id)
        for stage in self.record_stages:
            try:
                order = stage.clean(order)
            except Exception as e:
                raise StageError(stage.stage_name, e) from e
        if order.repairs:
            logger.debug(
                f"Repaired order {order_id}",
                extra={"order_id": order_id, "repairs": list(order.repairs)}
            )
        return order

    @staticmethod
    def _delete_discarded(raw_store: RawOrderStore, result: PipelineResult) -> tuple[int, list[int]]:
        """
        Delete discarded duplicates from the raw store by their raw key.

        Returns:
            Tuple of (rows deleted, assigned order_ids of discards that had
            no raw key and were left in place)
        """
        deleted = 0
        undeletable = []
        for entry in result.discarded:
            if entry.raw_order_id is None:
                undeletable.append(entry.order_id)
                continue
            if raw_store.delete_by_key(entry.raw_order_id):
                deleted += 1
        if undeletable:
            logger.warning(
                f"{len(undeletable)} discarded duplicates have no raw order_id; left in raw store",
                extra={"order_ids": undeletable}
            )
        return deleted, undeletable

    @staticmethod
    def _check_unique_keys(raw_batch: list[RawOrderRecord]) -> None:
        counts = Counter(r.order_id for r in raw_batch if r.order_id is not None)
        repeated = [order_id for order_id, count in counts.items() if count > 1]
        if repeated:
            raise MalformedBatchError(repeated)

    @staticmethod
    def _assign_keys(raw_batch: list[RawOrderRecord]) -> list[tuple[int, RawOrderRecord]]:
        """
        Pair each raw order with its effective order_id.

        Orders without a key get the next ids after the batch maximum,
        in input order.
        """
        next_id = max((r.order_id for r in raw_batch if r.order_id is not None), default=0) + 1
        keyed = []
        for raw in raw_batch:
            if raw.order_id is None:
                keyed.append((next_id, raw))
                next_id += 1
            else:
                keyed.append((raw.order_id, raw))
        return keyed

    @staticmethod
    def _load_policy(policy_path: Optional[str]) -> CleaningPolicy:
        if policy_path is None:
            return CleaningPolicy()
        if not Path(policy_path).exists():
            logger.warning(f"Cleaning policy file not found: {policy_path}")
            return CleaningPolicy()
        return PolicyConfigLoader(policy_path).load_policy()
