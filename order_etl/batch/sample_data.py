"""
Sample raw order extract covering every known kind of dirt.
"""

from order_etl.core.models import RawOrderRecord

# (order_id, customer_name, order_date, product, quantity, price)
SAMPLE_ROWS = [
    (1, "John Doe", "2023-12-01", "Widget A", "5", "19.99"),
    (2, "Jane Smith", "23/11/2023", "Widget B", "2", "29.99"),
    (3, "John Doe", "2023-12-01", "Widget A", "5", "19.99"),
    (4, None, "15-10-2023", "Widget C", "3", "15.50"),
    (5, "Alice Brown", "2023/12/05", "Widget D", "0", "25.00"),
    (6, "Bob Wilson", "2023-13-01", "Widget E", "-2", "30.00"),
    (7, "Charlie", "2023-11-30", "Widget F", None, "40.00"),
    (8, "Eve Adams", "2023-11-29", "Widget G", "4", "abc"),
]

_FIELDS = ("order_id", "customer_name", "order_date", "product", "quantity", "price")


def sample_raw_orders() -> list[RawOrderRecord]:
    """Return the sample extract as raw order records."""
    return [RawOrderRecord(**dict(zip(_FIELDS, row))) for row in SAMPLE_ROWS]
