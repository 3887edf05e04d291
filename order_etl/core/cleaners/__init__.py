"""
Cleaning stage implementations.

Provides field coercion, date normalization, null resolution,
duplicate resolution and constraint enforcement.
"""

from .base_cleaner import BaseCleaner, CleaningError, ConstraintViolation, StageError
from .constraint_enforcer import ConstraintEnforcer
from .date_normalizer import DateNormalizer
from .duplicate_resolver import DuplicateResolver
from .field_coercer import FieldCoercer
from .null_resolver import NullResolver

__all__ = [
    "BaseCleaner",
    "CleaningError",
    "ConstraintViolation",
    "StageError",
    "FieldCoercer",
    "DateNormalizer",
    "NullResolver",
    "DuplicateResolver",
    "ConstraintEnforcer",
]
