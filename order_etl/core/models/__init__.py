"""
Core data models for the order cleaning pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .clean_order import MAX_INTEGER, CleanOrderRecord
from .pipeline_result import DuplicateDiscard, PipelineResult
from .raw_order import RawOrderRecord
from .rejected_order import RejectedOrder, RejectionReason
from .staged_order import Defect, StagedOrder

__all__ = [
    "RawOrderRecord",
    "StagedOrder",
    "Defect",
    "CleanOrderRecord",
    "MAX_INTEGER",
    "RejectedOrder",
    "RejectionReason",
    "DuplicateDiscard",
    "PipelineResult",
]
