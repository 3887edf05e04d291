"""
Cleaning policy configuration management.

Loads the repair policy from YAML files and provides a builder
for programmatic configuration.
"""

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .policy import DEFAULT_CUSTOMER_NAME_PLACEHOLDER, CleaningPolicy


class PolicyConfigError(ValueError):
    """Raised when a policy configuration file is malformed."""
    pass


class PolicyConfigLoader:
    """
    Loads the cleaning policy from a YAML configuration file.

    Expected YAML format:
    ```yaml
    policy:
      customer_name_placeholder: "Not found"
      non_numeric_price: zero        # or: reject
      date_overrides:
        6: "2023-01-13"
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the policy config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Policy configuration file not found: {config_path}")

    def load_policy(self) -> CleaningPolicy:
        """
        Load and validate the cleaning policy from the YAML file.

        Returns:
            CleaningPolicy

        Raises:
            PolicyConfigError: If YAML is invalid or the policy fails validation
        """
        try:
            with open(self.config_path) as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PolicyConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not config or "policy" not in config:
            raise PolicyConfigError("Configuration file must contain 'policy' section")

        section = config["policy"] or {}
        if not isinstance(section, dict):
            raise PolicyConfigError("'policy' section must be a mapping")

        overrides = section.get("date_overrides") or {}
        if not isinstance(overrides, dict):
            raise PolicyConfigError("'date_overrides' must map order_id to a date")

        try:
            return CleaningPolicy(**{**section, "date_overrides": overrides})
        except ValidationError as e:
            raise PolicyConfigError(f"Invalid cleaning policy in {self.config_path}: {e}") from e


class PolicyBuilder:
    """
    Programmatically build a cleaning policy (for testing or dynamic policies).
    """

    def __init__(self):
        """Initialize with the default policy values."""
        self.settings: dict[str, Any] = {
            "customer_name_placeholder": DEFAULT_CUSTOMER_NAME_PLACEHOLDER,
            "non_numeric_price": "zero",
            "date_overrides": {},
        }

    def with_placeholder(self, placeholder: str) -> "PolicyBuilder":
        """Set the missing customer name placeholder."""
        self.settings["customer_name_placeholder"] = placeholder
        return self

    def reject_non_numeric_price(self) -> "PolicyBuilder":
        """Reject non-numeric prices instead of zeroing them."""
        self.settings["non_numeric_price"] = "reject"
        return self

    def add_date_override(self, order_id: int, corrected: str | date) -> "PolicyBuilder":
        """Add a manual date correction for one order."""
        self.settings["date_overrides"] = {**self.settings["date_overrides"], order_id: corrected}
        return self

    def build(self) -> CleaningPolicy:
        """Build and return the cleaning policy."""
        return CleaningPolicy(**self.settings)
