"""
Driver helpers for external DataSources.

Uses psycopg (PostgreSQL), pymysql (MySQL), or trino (Trino) based on product_type.
"""

from typing import Any

import psycopg
import pymysql
from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect

from dbexec.core.config import settings
from dbexec.models import DataSource, ProductTypeEnum

# (set statement, reset statement) per product; "{ms}" / "{sec}" filled at runtime
_STATEMENT_TIMEOUT_SQL: dict[ProductTypeEnum, tuple[str, str]] = {
    ProductTypeEnum.POSTGRES: ("SET statement_timeout = {ms}", "SET statement_timeout = 0"),
    ProductTypeEnum.MYSQL: (
        "SET SESSION max_execution_time = {ms}",
        "SET SESSION max_execution_time = 0",
    ),
    ProductTypeEnum.TRINO: (
        "SET SESSION query_max_execution_time = '{sec}s'",
        "SET SESSION query_max_execution_time = '0s'",
    ),
}


def connect(datasource: DataSource) -> Any:
    """Open a new driver connection for *datasource*. Driver errors propagate."""
    pt = ProductTypeEnum(datasource.product_type)
    timeout = settings.EXTERNAL_DB_CONNECT_TIMEOUT
    password = datasource.password or ""

    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=datasource.host,
            port=int(datasource.port),
            dbname=datasource.database,
            user=datasource.username,
            password=password,
            connect_timeout=timeout,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=datasource.host,
            port=int(datasource.port),
            database=datasource.database,
            user=datasource.username,
            password=password,
            connect_timeout=timeout,
        )
    if pt == ProductTypeEnum.TRINO:
        return trino_connect(
            host=datasource.host,
            port=int(datasource.port),
            user=datasource.username,
            auth=BasicAuthentication(datasource.username, password),
            catalog=datasource.database,
            schema="default",
            source="pydbexec",
            http_scheme="https" if datasource.use_ssl else "http",
            request_timeout=timeout,
        )
    raise ValueError(f"Unsupported product_type: {pt}")


def _run_session_statement(conn: Any, sql: str) -> None:
    cur = conn.cursor()
    try:
        cur.execute(sql)
    finally:
        try:
            cur.close()
        except Exception:
            pass


def execute(
    conn: Any,
    sql: str,
    params: dict | list | tuple | None = None,
    *,
    product_type: ProductTypeEnum | None = None,
) -> Any:
    """
    Execute SQL and return the cursor. Caller uses cursor_to_dicts(cursor).

    When EXTERNAL_DB_STATEMENT_TIMEOUT is set and product_type is known, the
    session timeout is set before the statement and reset after it.
    """
    timeout_sec = settings.EXTERNAL_DB_STATEMENT_TIMEOUT
    timeout_sql = (
        _STATEMENT_TIMEOUT_SQL.get(ProductTypeEnum(product_type))
        if product_type is not None and timeout_sec is not None and timeout_sec > 0
        else None
    )

    if timeout_sql is not None:
        _run_session_statement(
            conn,
            timeout_sql[0].format(ms=int(timeout_sec * 1000), sec=timeout_sec),
        )

    cur = conn.cursor()
    try:
        if params is not None:
            cur.execute(sql, params)
        else:
            cur.execute(sql)
    except Exception:
        try:
            cur.close()
        except Exception:
            pass
        raise
    finally:
        if timeout_sql is not None:
            try:
                _run_session_statement(conn, timeout_sql[1])
            except Exception:
                pass

    return cur


def cursor_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor result to list of dicts. Statements without a result set give []."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]

