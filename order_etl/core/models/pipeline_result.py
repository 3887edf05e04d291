"""
PipelineResult model representing the outcome of cleaning one batch (ephemeral).
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .clean_order import CleanOrderRecord
from .rejected_order import RejectedOrder


class DuplicateDiscard(BaseModel):
    """
    Audit entry for a record dropped in favour of a lower order_id.

    raw_order_id is the key the record had in the raw store; it is None
    when the pipeline assigned order_id, and the raw row cannot be
    deleted by key.
    """

    order_id: int
    kept_order_id: int
    duplicate_key: tuple
    raw_order_id: Optional[int] = None

    class Config:
        frozen = True


class PipelineResult(BaseModel):
    """
    Outcome of running one batch through the cleaning pipeline.

    Attributes:
        total_records: Records in the raw batch
        accepted: Canonical records ready for the canonical store
        rejected: Records that could not be made canonical, with reasons
        discarded: Duplicate records dropped by the duplicate resolver
        repairs: Count of recoverable repairs applied, by repair name
    """

    total_records: int = Field(0, ge=0)
    accepted: list[CleanOrderRecord] = Field(default_factory=list)
    rejected: list[RejectedOrder] = Field(default_factory=list)
    discarded: list[DuplicateDiscard] = Field(default_factory=list)
    repairs: dict[str, int] = Field(default_factory=dict)

    def summary(self) -> dict[str, Any]:
        """Count accepted, rejected and discarded records, and rejections by reason."""
        reasons: dict[str, int] = {}
        for rejected in self.rejected:
            for reason in rejected.reasons:
                reasons[reason.value] = reasons.get(reason.value, 0) + 1
        return {
            "total_records": self.total_records,
            "accepted_records": len(self.accepted),
            "rejected_records": len(self.rejected),
            "duplicate_records": len(self.discarded),
            "rejections_by_reason": reasons,
            "repairs": dict(self.repairs),
        }
