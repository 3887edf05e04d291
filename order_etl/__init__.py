"""
order-etl: cleans raw, inconsistently formatted order records into a
validated canonical dataset.
"""

__version__ = "0.1.0"
