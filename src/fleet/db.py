"""
Database connection and query utilities.

Repositories receive a ConnectionProvider and run their SQL through the
query helpers below, getting rows back as dictionaries.

For testing, use set_connection_override() to inject a connection
that every provider will hand out instead of creating new ones. This
enables transaction rollback between tests.
"""

from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row

from fleet.config import config

# =============================================================================
# Connection Override (for testing)
# =============================================================================

_connection_override: psycopg.Connection | None = None


def set_connection_override(conn: psycopg.Connection) -> None:
    """
    Set a connection to use instead of creating new ones.

    Used by test fixtures to ensure all database operations run
    within a single transaction that can be rolled back.

    Args:
        conn: The connection to use for all subsequent operations
    """
    global _connection_override
    _connection_override = conn


def clear_connection_override() -> None:
    """Clear the connection override, restoring normal behavior."""
    global _connection_override
    _connection_override = None


# =============================================================================
# Connection Management
# =============================================================================


class ConnectionProvider:
    """
    Hands out database connections for a single database URL.

    Each call to get_connection() opens its own connection; nothing is
    pooled or shared between calls.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url

    @contextmanager
    def get_connection(self):
        """
        Context manager for database connections.

        In normal operation:
            - Opens a new connection
            - Commits on successful exit
            - Rolls back on exception
            - Closes connection when done

        With override set (testing):
            - Returns the override connection
            - Does NOT commit, rollback, or close
            - Caller (test fixture) manages the transaction

        Usage:
            with provider.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT ...")
        """
        if _connection_override is not None:
            yield _connection_override
            return

        conn = psycopg.connect(self.database_url)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def transaction(self):
        """
        Context manager for a connection inside a single transaction block.

        Everything executed on the yielded connection is committed together
        or rolled back together. With the test override set, the block
        becomes a savepoint inside the fixture's transaction.
        """
        with self.get_connection() as conn:
            with conn.transaction():
                yield conn


_provider: ConnectionProvider | None = None


def get_provider() -> ConnectionProvider:
    """Return the process-wide provider for the configured database."""
    global _provider
    if _provider is None:
        _provider = ConnectionProvider(config.database_url)
    return _provider


# =============================================================================
# Query Helpers
# =============================================================================


def execute(conn: psycopg.Connection, query: str, params: tuple = None) -> int:
    """
    Execute a query without returning results.

    Use for INSERT, UPDATE, DELETE when you don't need the affected rows.

    Args:
        conn: Open connection to run the query on
        query: SQL query with %s placeholders
        params: Tuple of parameter values

    Returns:
        Number of rows affected
    """
    with conn.cursor() as cur:
        cur.execute(query, params)
        return cur.rowcount


def execute_many(conn: psycopg.Connection, query: str, params_list: list[tuple]) -> int:
    """
    Execute a query once per parameter tuple.

    Returns:
        Number of parameter sets processed
    """
    if not params_list:
        return 0
    with conn.cursor() as cur:
        cur.executemany(query, params_list)
    return len(params_list)


def fetch_one(conn: psycopg.Connection, query: str, params: tuple = None) -> dict[str, Any] | None:
    """
    Execute a query and return a single row as dict.

    Args:
        conn: Open connection to run the query on
        query: SQL query with %s placeholders
        params: Tuple of parameter values

    Returns:
        Dict of column names to values, or None if no row found
    """
    with conn.cursor(row_factory=dict_row) as cur:
        cur.execute(query, params)
        return cur.fetchone()


def fetch_all(conn: psycopg.Connection, query: str, params: tuple = None) -> list[dict[str, Any]]:
    """
    Execute a query and return all rows as list of dicts.

    Returns:
        List of dicts, empty list if no rows found
    """
    with conn.cursor(row_factory=dict_row) as cur:
        cur.execute(query, params)
        return cur.fetchall()
