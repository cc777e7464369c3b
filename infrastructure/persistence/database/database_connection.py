"""
Database Connection - Infrastructure Layer
Manages thread-local SQLite connections with transaction support
"""
import sqlite3
import threading
from typing import Optional, ContextManager
from pathlib import Path
import logging
from contextlib import contextmanager

from .schema import DatabaseSchema


class DatabaseConnection:
    """
    SQLite database connection manager with transaction support.
    Each thread gets its own connection; FastAPI runs sync handlers on a
    thread pool, so requests never share a cursor.
    """

    def __init__(self, db_path: Path, logger: Optional[logging.Logger] = None):
        """
        Initialize database connection manager

        Args:
            db_path: Path to SQLite database file
            logger: Optional logger instance
        """
        self.db_path = db_path
        self.logger = logger or logging.getLogger(__name__)
        self._local = threading.local()

        db_path.parent.mkdir(parents=True, exist_ok=True)

        self._initialize_database()

    def _initialize_database(self) -> None:
        """Create or upgrade the schema"""
        try:
            with self.get_connection() as conn:
                current_version = DatabaseSchema.get_schema_version(conn)

                if current_version < DatabaseSchema.SCHEMA_VERSION:
                    self.logger.info(
                        f"Upgrading database schema from v{current_version} "
                        f"to v{DatabaseSchema.SCHEMA_VERSION}"
                    )
                    DatabaseSchema.setup_database(conn)
                    self.logger.info("Database schema upgrade completed")
                else:
                    self.logger.debug("Database schema is up to date")

        except sqlite3.Error as e:
            self.logger.error(f"Failed to initialize database: {e}")
            raise

    def get_connection(self) -> sqlite3.Connection:
        """
        Get thread-local database connection

        Returns:
            SQLite connection for current thread
        """
        if getattr(self._local, 'connection', None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=30.0
            )
            self._local.connection.row_factory = sqlite3.Row
            self._local.connection.execute("PRAGMA foreign_keys = ON")

        return self._local.connection

    @contextmanager
    def transaction(self) -> ContextManager[sqlite3.Connection]:
        """
        Context manager for database transactions
        Commits on success, rolls back on error

        Returns:
            Database connection within transaction context
        """
        conn = self.get_connection()
        try:
            conn.execute("BEGIN")
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            self.logger.error(f"Transaction rolled back due to error: {e}")
            raise

    def execute_query(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """
        Execute a query and return cursor

        Args:
            query: SQL query string
            params: Query parameters
        """
        conn = self.get_connection()
        return conn.execute(query, params)

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Fetch single row from query, or None"""
        cursor = self.execute_query(query, params)
        return cursor.fetchone()

    def fetch_all(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Fetch all rows from query"""
        cursor = self.execute_query(query, params)
        return cursor.fetchall()

    def ping(self) -> bool:
        """Round-trip a trivial query; used by the database health probe."""
        row = self.fetch_one("SELECT 1 AS ok")
        return row is not None and row["ok"] == 1

    def close(self) -> None:
        """Close this thread's connection"""
        if getattr(self._local, 'connection', None) is not None:
            self._local.connection.close()
            self._local.connection = None

    def get_database_stats(self) -> dict:
        """Row counts and file size for the health endpoint"""
        stats = {}

        for table in ('users', 'roadmaps'):
            count = self.fetch_one(f"SELECT COUNT(*) as count FROM {table}")
            stats[f"{table}_count"] = count['count'] if count else 0

        active = self.fetch_one("SELECT COUNT(*) as count FROM roadmaps WHERE is_active = 1")
        stats['active_roadmaps_count'] = active['count'] if active else 0

        size_result = self.fetch_one(
            "SELECT page_count * page_size as size FROM pragma_page_count(), pragma_page_size()"
        )
        stats['database_size_bytes'] = size_result['size'] if size_result else 0
        stats['schema_version'] = DatabaseSchema.get_schema_version(self.get_connection())

        return stats
