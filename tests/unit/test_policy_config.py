"""
Unit tests for cleaning policy configuration.
"""

from datetime import date
from pathlib import Path

import pytest

from order_etl.core.rules import CleaningPolicy, PolicyBuilder, PolicyConfigError, PolicyConfigLoader


class TestCleaningPolicy:
    """Tests for CleaningPolicy"""

    def test_defaults(self):
        policy = CleaningPolicy()

        assert policy.customer_name_placeholder == "Not found"
        assert policy.non_numeric_price == "zero"
        assert policy.price_decimal_places == 2
        assert policy.date_overrides == {}

    def test_blank_placeholder_rejected(self):
        with pytest.raises(ValueError):
            PolicyBuilder().with_placeholder("  ").build()

    def test_override_must_be_real_date(self):
        with pytest.raises(ValueError):
            PolicyBuilder().add_date_override(6, "2023-13-01").build()

    def test_builder(self):
        policy = PolicyBuilder() \
            .with_placeholder("UNKNOWN") \
            .reject_non_numeric_price() \
            .add_date_override(6, "2023-01-13") \
            .add_date_override(9, date(2023, 2, 28)) \
            .build()

        assert policy.customer_name_placeholder == "UNKNOWN"
        assert policy.non_numeric_price == "reject"
        assert policy.date_overrides == {6: date(2023, 1, 13), 9: date(2023, 2, 28)}


class TestPolicyConfigLoader:
    """Tests for PolicyConfigLoader"""

    def test_load_policy(self, policy_file):
        path = policy_file(
            """
policy:
  customer_name_placeholder: "Unknown customer"
  non_numeric_price: reject
  date_overrides:
    6: "2023-01-13"
    11: 2023-03-01
"""
        )

        policy = PolicyConfigLoader(path).load_policy()

        assert policy.customer_name_placeholder == "Unknown customer"
        assert policy.non_numeric_price == "reject"
        assert policy.date_overrides == {6: date(2023, 1, 13), 11: date(2023, 3, 1)}

    def test_missing_values_use_defaults(self, policy_file):
        policy = PolicyConfigLoader(policy_file("policy:\n  non_numeric_price: zero\n")).load_policy()

        assert policy.customer_name_placeholder == "Not found"
        assert policy.date_overrides == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PolicyConfigLoader(tmp_path / "nope.yaml")

    def test_missing_policy_section(self, policy_file):
        with pytest.raises(PolicyConfigError) as exc_info:
            PolicyConfigLoader(policy_file("rules: {}\n")).load_policy()

        assert "policy" in str(exc_info.value)

    def test_invalid_price_policy(self, policy_file):
        with pytest.raises(PolicyConfigError):
            PolicyConfigLoader(policy_file("policy:\n  non_numeric_price: average\n")).load_policy()

    def test_invalid_override_date(self, policy_file):
        with pytest.raises(PolicyConfigError):
            PolicyConfigLoader(
                policy_file("policy:\n  date_overrides:\n    6: \"2023-13-01\"\n")
            ).load_policy()

    def test_overrides_must_be_mapping(self, policy_file):
        with pytest.raises(PolicyConfigError):
            PolicyConfigLoader(
                policy_file("policy:\n  date_overrides:\n    - 6\n")
            ).load_policy()

    def test_invalid_yaml(self, policy_file):
        with pytest.raises(PolicyConfigError):
            PolicyConfigLoader(policy_file("policy: [unclosed\n")).load_policy()

    def test_shipped_policy_file_loads(self):
        path = Path(__file__).parent.parent.parent / "config" / "cleaning_policy.yaml"

        policy = PolicyConfigLoader(path).load_policy()

        assert policy.date_overrides == {6: date(2023, 1, 13)}

    def test_price_decimal_places_bounded_by_canonical_scale(self, policy_file):
        path = policy_file("policy:\n  price_decimal_places: 3\n")

        with pytest.raises(PolicyConfigError):
            PolicyConfigLoader(path).load_policy()
