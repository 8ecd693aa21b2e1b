"""
Driver connections and idle pool for external DataSources.

psycopg, pymysql and trino are picked by DataSource.product_type.
"""

from .connect import connect, cursor_to_dicts, execute
from .manager import ConnectionPool

__all__ = [
    "connect",
    "execute",
    "cursor_to_dicts",
    "ConnectionPool",
]
