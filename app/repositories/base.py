"""
Base Repository - HR Assessment Scoring Engine
app/repositories/base.py

Base repository class with Snowflake connection management and common utilities.
"""

import json
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, List, Optional, Sequence

import snowflake.connector
from snowflake.connector import DictCursor
from snowflake.connector.errors import DatabaseError, InterfaceError, ProgrammingError

from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    ForeignKeyViolationException,
    RepositoryException,
)
from app.services.snowflake import get_snowflake_connection


class BaseRepository:
    """Base repository with Snowflake connection management."""

    @contextmanager
    def get_connection(self) -> Generator[snowflake.connector.SnowflakeConnection, None, None]:
        """Context manager for Snowflake connections."""
        conn = None
        try:
            conn = get_snowflake_connection()
            yield conn
        except (InterfaceError, DatabaseError) as e:
            raise DatabaseConnectionException(f"Failed to connect to Snowflake: {e}")
        finally:
            if conn:
                conn.close()

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True) -> Generator[Any, None, None]:
        """Context manager for Snowflake cursors with automatic connection cleanup."""
        with self.get_connection() as conn:
            cursor = conn.cursor(DictCursor) if dict_cursor else conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Optional[Any]:
        """
        Execute a SQL query with error handling.

        Args:
            sql: SQL query string
            params: Query parameters
            fetch_one: Return single row
            fetch_all: Return all rows
            commit: Commit transaction after execution

        Returns:
            Query results or None
        """
        with self.get_cursor() as cursor:
            try:
                cursor.execute(sql, params or ())

                if commit:
                    cursor.connection.commit()

                if fetch_one:
                    return cursor.fetchone()
                elif fetch_all:
                    return cursor.fetchall()

                return cursor.rowcount

            except ProgrammingError as e:
                self._raise_for_programming_error(e)
            except DatabaseError as e:
                raise RepositoryException(f"Database error: {e}")

    def execute_many(self, sql: str, rows: List[Sequence[Any]]) -> int:
        """Execute one statement per row in a single transaction."""
        if not rows:
            return 0
        with self.get_cursor() as cursor:
            try:
                cursor.executemany(sql, rows)
                cursor.connection.commit()
                return len(rows)
            except ProgrammingError as e:
                self._raise_for_programming_error(e)
            except DatabaseError as e:
                raise RepositoryException(f"Database error: {e}")

    @staticmethod
    def _raise_for_programming_error(e: ProgrammingError) -> None:
        error_msg = str(e).upper()
        if "UNIQUE" in error_msg or "DUPLICATE" in error_msg:
            raise DuplicateEntityException(str(e))
        elif "FOREIGN KEY" in error_msg:
            raise ForeignKeyViolationException(str(e))
        raise RepositoryException(f"Query error: {e}")

    def normalize_timestamp(self, dt: Optional[datetime]) -> Optional[datetime]:
        """Ensure timestamp is UTC-aware."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    def parse_variant(self, value: Any) -> Any:
        """VARIANT columns come back as JSON text; decode them."""
        if value is None or not isinstance(value, str):
            return value
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    def to_variant(self, value: Any) -> Optional[str]:
        """Encode a Python value for PARSE_JSON(%s)."""
        if value is None:
            return None
        return json.dumps(value, default=str)
