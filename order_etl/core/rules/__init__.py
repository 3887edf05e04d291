"""
Cleaning policy model and configuration management.
"""

from .policy import CleaningPolicy
from .policy_config import PolicyBuilder, PolicyConfigError, PolicyConfigLoader

__all__ = [
    "CleaningPolicy",
    "PolicyConfigLoader",
    "PolicyBuilder",
    "PolicyConfigError",
]
