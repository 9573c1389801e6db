"""
Base repository class with common database utilities.

This module provides a base class for SQLite repositories with
connection management, WAL mode, and common utilities.
"""

import aiosqlite
import os
from typing import Optional, List
from contextlib import asynccontextmanager


class BaseRepository:
    """
    Base class for SQLite repositories.

    Every call opens its own short-lived connection, so instances can be
    shared freely between the scheduler jobs.
    """

    def __init__(self, db_path: str):
        """
        Initialize the repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._ensure_directory()

    def _ensure_directory(self):
        """Ensure the directory for the database file exists."""
        directory = os.path.dirname(self.db_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)

    @asynccontextmanager
    async def get_connection(self):
        """
        Get an async database connection with optimal settings.

        Usage:
            async with self.get_connection() as conn:
                await conn.execute(...)

        Yields:
            aiosqlite.Connection: Database connection
        """
        conn = await aiosqlite.connect(self.db_path)
        try:
            # WAL lets a second bot process read while we write
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")
            # Wait on a locked database instead of failing immediately
            await conn.execute("PRAGMA busy_timeout=5000")
            yield conn
        finally:
            await conn.close()

    async def execute(self, query: str, params: tuple = ()) -> int:
        """
        Execute a query and return the last row ID.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            Last row ID
        """
        async with self.get_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def execute_rowcount(self, query: str, params: tuple = ()) -> int:
        """
        Execute a write query and return the number of rows it changed.

        ``INSERT OR IGNORE`` reports 0 here when the row already existed.
        """
        async with self.get_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.rowcount

    async def fetch_one(self, query: str, params: tuple = ()) -> Optional[tuple]:
        """
        Fetch a single row.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            Single row tuple or None
        """
        async with self.get_connection() as conn:
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchone()

    async def fetch_all(self, query: str, params: tuple = ()) -> List[tuple]:
        """
        Fetch all rows.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            List of row tuples
        """
        async with self.get_connection() as conn:
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchall()

    async def create_index_if_not_exists(
        self,
        index_name: str,
        table_name: str,
        columns: List[str],
        unique: bool = False
    ):
        """
        Create an index if it doesn't exist.

        Args:
            index_name: Name for the index
            table_name: Table to index
            columns: List of column names
            unique: Whether the index should be unique
        """
        unique_clause = "UNIQUE " if unique else ""
        columns_str = ", ".join(columns)
        await self.execute(
            f"CREATE {unique_clause}INDEX IF NOT EXISTS {index_name} "
            f"ON {table_name} ({columns_str})"
        )
