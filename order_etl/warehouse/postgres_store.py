"""
PostgreSQL-backed raw and canonical order stores.

Raw orders live in messy_data (every column text), canonical orders in
clean_data (typed, with primary key and CHECK constraints).
"""

from psycopg import errors

from order_etl.core.models import CleanOrderRecord, RawOrderRecord

from .base_store import CanonicalOrderStore, DuplicateKeyError, RawOrderStore
from .connection import DatabaseConnectionPool


class PostgresRawOrderStore(RawOrderStore):
    """
    Raw order store over the messy_data table.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize raw store.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def scan_all(self) -> list[RawOrderRecord]:
        rows = self.pool.execute_query(
            """
            SELECT order_id, customer_name, order_date, product, quantity, price
            FROM messy_data
            ORDER BY order_id
            """
        )
        return [RawOrderRecord(**row) for row in rows]

    def insert(self, records: list[RawOrderRecord]) -> int:
        if not records:
            return 0

        with self.pool.get_connection() as conn:
            with conn.cursor() as cur:
                cur.executemany(
                    """
                    INSERT INTO messy_data (
                        order_id, customer_name, order_date, product, quantity, price
                    )
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    [
                        (r.order_id, r.customer_name, r.order_date, r.product, r.quantity, r.price)
                        for r in records
                    ]
                )
            conn.commit()
        return len(records)

    def delete_by_key(self, order_id: int) -> bool:
        deleted = self.pool.execute_command(
            "DELETE FROM messy_data WHERE order_id = %s",
            (order_id,)
        )
        return deleted > 0

    @property
    def store_name(self) -> str:
        return "postgres"


class PostgresCanonicalOrderStore(CanonicalOrderStore):
    """
    Canonical order store over the clean_data table.

    bulk_insert runs in one transaction: a key conflict writes nothing.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize canonical store.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def bulk_insert(self, records: list[CleanOrderRecord]) -> int:
        if not records:
            return 0

        order_ids = [r.order_id for r in records]
        repeated = [oid for oid in order_ids if order_ids.count(oid) > 1]
        if repeated:
            raise DuplicateKeyError(repeated)

        with self.pool.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT order_id FROM clean_data WHERE order_id = ANY(%s)",
                    (order_ids,)
                )
                existing = [row["order_id"] for row in cur.fetchall()]
                if existing:
                    conn.rollback()
                    raise DuplicateKeyError(existing)

                try:
                    cur.executemany(
                        """
                        INSERT INTO clean_data (
                            order_id, customer_name, order_date, product, quantity, price
                        )
                        VALUES (%s, %s, %s, %s, %s, %s)
                        """,
                        [
                            (r.order_id, r.customer_name, r.order_date, r.product, r.quantity, r.price)
                            for r in records
                        ]
                    )
                except errors.UniqueViolation as e:
                    conn.rollback()
                    raise DuplicateKeyError(order_ids) from e
            conn.commit()
        return len(records)

    def scan_all(self) -> list[CleanOrderRecord]:
        rows = self.pool.execute_query(
            """
            SELECT order_id, customer_name, order_date, product, quantity, price
            FROM clean_data
            ORDER BY order_id
            """
        )
        return [CleanOrderRecord(**row) for row in rows]

    @property
    def store_name(self) -> str:
        return "postgres"
