"""
Table management for the raw and canonical order tables.

Creates messy_data (raw, all text) and clean_data (typed, constrained)
and seeds the raw table with sample orders.
"""

from order_etl.batch.sample_data import sample_raw_orders
from order_etl.observability.logger import get_logger

from .connection import DatabaseConnectionPool
from .postgres_store import PostgresRawOrderStore

logger = get_logger(__name__)

RAW_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS messy_data (
        order_id INTEGER PRIMARY KEY,
        customer_name VARCHAR(255),
        order_date VARCHAR(50),
        product VARCHAR(255),
        quantity VARCHAR(10),
        price VARCHAR(10)
    )
"""

CANONICAL_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS clean_data (
        order_id INTEGER PRIMARY KEY,
        customer_name VARCHAR(255) NOT NULL CHECK (btrim(customer_name) <> ''),
        order_date DATE NOT NULL,
        product VARCHAR(255) NOT NULL CHECK (btrim(product) <> ''),
        quantity INTEGER NOT NULL CHECK (quantity >= 0),
        price NUMERIC(10, 2) NOT NULL CHECK (price >= 0)
    )
"""


class SchemaManager:
    """
    Manages the order tables in the warehouse.

    Handles:
    - Creating the raw and canonical tables
    - Seeding the raw table with sample orders
    - Dropping both tables
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize schema manager.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def create_tables(self) -> None:
        """Create messy_data and clean_data if they do not exist."""
        self.pool.execute_command(RAW_TABLE_DDL)
        self.pool.execute_command(CANONICAL_TABLE_DDL)
        logger.info("Order tables ready", extra={"tables": ["messy_data", "clean_data"]})

    def drop_tables(self) -> None:
        """Drop both order tables."""
        self.pool.execute_command("DROP TABLE IF EXISTS clean_data")
        self.pool.execute_command("DROP TABLE IF EXISTS messy_data")

    def seed_sample_orders(self) -> int:
        """
        Load the sample raw orders into messy_data.

        Returns:
            Number of orders inserted
        """
        count = PostgresRawOrderStore(self.pool).insert(sample_raw_orders())
        logger.info(f"Seeded {count} sample raw orders")
        return count
