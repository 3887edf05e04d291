"""
Batch cleaning pipeline.
"""

from .pipeline import MalformedBatchError, OrderCleaningPipeline
from .sample_data import sample_raw_orders

__all__ = [
    "OrderCleaningPipeline",
    "MalformedBatchError",
    "sample_raw_orders",
]
