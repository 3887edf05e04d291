"""
End-to-end tests for cleaning the sample dirty order extract.

Tests the complete flow: raw orders → cleaning stages → canonical store
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from order_etl.batch import OrderCleaningPipeline
from order_etl.cli.batch_cli import main
from order_etl.core.models import RejectionReason
from order_etl.warehouse.memory_store import InMemoryCanonicalOrderStore, InMemoryRawOrderStore


@pytest.fixture
def canonical(pipeline, sample_orders):
    """Canonical store after one run over the sample extract."""
    store = InMemoryCanonicalOrderStore()
    pipeline.process(InMemoryRawOrderStore(sample_orders), store)
    return {record.order_id: record for record in store.scan_all()}


@pytest.mark.e2e
class TestSampleExtract:
    """The eight sample orders, one kind of dirt each"""

    def test_clean_order_accepted_unchanged(self, canonical):
        record = canonical[1]

        assert (record.customer_name, record.order_date, record.product) == (
            "John Doe", date(2023, 12, 1), "Widget A"
        )
        assert record.quantity == 5
        assert record.price == Decimal("19.99")

    def test_day_first_slash_date_normalized(self, canonical):
        assert canonical[2].order_date == date(2023, 11, 23)

    def test_missing_customer_gets_placeholder(self, canonical):
        assert canonical[4].customer_name == "Not found"
        assert canonical[4].order_date == date(2023, 10, 15)

    def test_override_date_and_negative_quantity(self, canonical):
        assert canonical[6].order_date == date(2023, 1, 13)
        assert canonical[6].quantity == 2

    def test_missing_quantity_defaults_to_zero(self, canonical):
        assert canonical[7].quantity == 0

    def test_non_numeric_price_zeroed(self, canonical):
        assert canonical[8].price == Decimal("0.00")

    def test_exact_duplicate_keeps_lowest_id(self, canonical):
        assert 1 in canonical
        assert 3 not in canonical

    def test_canonical_contents(self, canonical):
        assert sorted(canonical) == [1, 2, 4, 5, 6, 7, 8]
        assert canonical[5].order_date == date(2023, 12, 5)
        assert canonical[5].quantity == 0

    def test_every_canonical_record_satisfies_invariants(self, canonical):
        for record in canonical.values():
            assert record.quantity >= 0
            assert record.price >= 0
            assert record.customer_name.strip()
            assert isinstance(record.order_date, date)


@pytest.mark.e2e
def test_without_override_bad_date_is_rejected(sample_orders):
    """Order 6 has month 13; with no override it is rejected, not dropped"""
    result = OrderCleaningPipeline().run(sample_orders)

    assert sorted(r.order_id for r in result.accepted) == [1, 2, 4, 5, 7, 8]
    assert [r.order_id for r in result.rejected] == [6]
    assert result.rejected[0].reasons == [RejectionReason.INVALID_DATE]
    assert result.rejected[0].raw_record.order_date == "2023-13-01"


@pytest.mark.e2e
def test_every_input_is_accounted_for(pipeline, sample_orders):
    result = pipeline.run(sample_orders)

    assert len(result.accepted) + len(result.rejected) + len(result.discarded) == len(sample_orders)
    assert result.summary()["duplicate_records"] == 1


@pytest.mark.e2e
def test_demo_command_prints_json(policy_file, capsys):
    path = policy_file(
        "policy:\n"
        "  customer_name_placeholder: Not found\n"
        "  non_numeric_price: zero\n"
        "  date_overrides:\n"
        "    6: \"2023-01-13\"\n"
    )

    exit_code = main(["demo", "--policy", str(path)])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["summary"]["accepted_records"] == 7
    assert [r["order_id"] for r in output["accepted"]] == [1, 2, 4, 5, 6, 7, 8]
    assert output["accepted"][4]["order_date"] == "2023-01-13"
    assert output["discarded"][0]["order_id"] == 3
    assert output["discarded"][0]["kept_order_id"] == 1
    assert output["rejected"] == []


@pytest.mark.e2e
def test_cli_without_command_prints_help(capsys):
    assert main([]) == 1
    assert "init-db" in capsys.readouterr().out


@pytest.mark.e2e
@pytest.mark.integration
def test_sample_extract_end_to_end_postgres(clean_db, pipeline):
    """
    Seed messy_data, clean it into clean_data, then delete raw duplicates.

    Steps:
    1. Seed the raw table with the sample extract
    2. Process with duplicate deletion
    3. Verify the canonical table and the raw table
    4. Verify a rerun is refused by the canonical primary key
    """
    from order_etl.warehouse.base_store import DuplicateKeyError
    from order_etl.warehouse.postgres_store import (
        PostgresCanonicalOrderStore,
        PostgresRawOrderStore,
    )
    from order_etl.warehouse.schema_mgmt import SchemaManager

    SchemaManager(clean_db).seed_sample_orders()
    raw_store = PostgresRawOrderStore(clean_db)
    canonical_store = PostgresCanonicalOrderStore(clean_db)

    outcome = pipeline.process(raw_store, canonical_store, delete_discarded=True)

    assert outcome["written_records"] == 7
    assert outcome["deleted_duplicates"] == 1
    rows = {r.order_id: r for r in canonical_store.scan_all()}
    assert sorted(rows) == [1, 2, 4, 5, 6, 7, 8]
    assert rows[4].customer_name == "Not found"
    assert rows[6].order_date == date(2023, 1, 13)
    assert rows[8].price == Decimal("0.00")
    assert 3 not in [r.order_id for r in raw_store.scan_all()]

    with pytest.raises(DuplicateKeyError):
        pipeline.process(raw_store, canonical_store)


@pytest.mark.e2e
def test_demo_command_invalid_policy_exit_code(policy_file):
    path = policy_file("policy:\n  non_numeric_price: maybe\n")

    assert main(["demo", "--policy", str(path)]) == 1
