"""
Pytest configuration and fixtures for order-etl tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import os
from typing import Generator

import pytest

from order_etl.batch import OrderCleaningPipeline, sample_raw_orders
from order_etl.core.models import RawOrderRecord, StagedOrder
from order_etl.core.rules import CleaningPolicy, PolicyBuilder


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )


# =======================
# POLICY & PIPELINE FIXTURES
# =======================

@pytest.fixture
def policy() -> CleaningPolicy:
    """Default policy plus the known override for order 6 (month 13)."""
    return PolicyBuilder().add_date_override(6, "2023-01-13").build()


@pytest.fixture
def pipeline(policy) -> OrderCleaningPipeline:
    return OrderCleaningPipeline(policy=policy)


@pytest.fixture
def sample_orders() -> list[RawOrderRecord]:
    return sample_raw_orders()


@pytest.fixture
def make_raw():
    """Factory for raw orders with sensible clean defaults."""
    def _make(order_id=1, **overrides) -> RawOrderRecord:
        fields = {
            "order_id": order_id,
            "customer_name": "John Doe",
            "order_date": "2023-12-01",
            "product": "Widget A",
            "quantity": "5",
            "price": "19.99",
        }
        fields.update(overrides)
        return RawOrderRecord(**fields)
    return _make


@pytest.fixture
def make_staged(make_raw):
    """Factory for staged orders built from raw orders."""
    def _make(order_id=1, **overrides) -> StagedOrder:
        return StagedOrder.from_raw(make_raw(order_id, **overrides))
    return _make


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container():
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_etl",
        password="test_password",
        dbname="test_orders"
    )
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available for PostgreSQL container: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def db_pool(postgres_container) -> Generator:
    """
    Provide an open connection pool with the order tables created

    Args:
        postgres_container: PostgreSQL container fixture

    Yields:
        DatabaseConnectionPool
    """
    from order_etl.warehouse.connection import DatabaseConnectionPool
    from order_etl.warehouse.schema_mgmt import SchemaManager

    with DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_orders",
        user="test_etl",
        password="test_password",
    ) as pool:
        SchemaManager(pool).create_tables()
        yield pool


@pytest.fixture
def clean_db(db_pool):
    """
    Provide a pool over empty order tables

    Args:
        db_pool: Session-scoped connection pool

    Yields:
        DatabaseConnectionPool with truncated tables
    """
    db_pool.execute_command("TRUNCATE TABLE clean_data")
    db_pool.execute_command("TRUNCATE TABLE messy_data")
    yield db_pool


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_env_vars():
    """
    Set test environment variables

    Loads config/test.env if present
    """
    from dotenv import load_dotenv

    env_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "config",
        "test.env"
    )

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)


@pytest.fixture
def policy_file(tmp_path):
    """Write a policy YAML file and return its path."""
    def _write(content: str):
        path = tmp_path / "cleaning_policy.yaml"
        path.write_text(content)
        return path
    return _write
