"""
Database Schema - Infrastructure Layer
SQLite schema for SkillPath: accounts plus one JSON document per roadmap
"""
import sqlite3


class DatabaseSchema:
    """
    Database schema management for the roadmap store.

    A roadmap is stored whole in ``document``; the scalar columns next to it
    duplicate the fields that listing and ownership checks filter on.
    """

    # Schema version for migrations
    SCHEMA_VERSION = 1

    @staticmethod
    def create_tables(connection: sqlite3.Connection) -> None:
        """
        Create all database tables with constraints

        Args:
            connection: SQLite database connection
        """
        cursor = connection.cursor()

        cursor.execute("PRAGMA foreign_keys = ON")

        # Accounts
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                is_active BOOLEAN NOT NULL DEFAULT TRUE,
                created_at TIMESTAMP NOT NULL,
                last_login_at TIMESTAMP
            )
        """)

        # Roadmap documents
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS roadmaps (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                skill TEXT NOT NULL,
                difficulty TEXT NOT NULL,
                progress INTEGER NOT NULL DEFAULT 0,
                is_active BOOLEAN NOT NULL DEFAULT TRUE,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                document TEXT NOT NULL,
                CHECK (progress >= 0 AND progress <= 100)
            )
        """)

        # Metadata table for schema versioning
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS schema_metadata (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            INSERT OR REPLACE INTO schema_metadata (key, value)
            VALUES ('schema_version', ?)
        """, (str(DatabaseSchema.SCHEMA_VERSION),))

        connection.commit()

    @staticmethod
    def create_indexes(connection: sqlite3.Connection) -> None:
        """
        Create lookup indexes

        Args:
            connection: SQLite database connection
        """
        cursor = connection.cursor()

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_users_email ON users(email)")

        # Listing is "active roadmaps of one user, newest first"
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_roadmaps_user_active "
            "ON roadmaps(user_id, is_active, created_at)"
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_roadmaps_skill ON roadmaps(skill)")

        connection.commit()

    @staticmethod
    def get_schema_version(connection: sqlite3.Connection) -> int:
        """Get current schema version"""
        cursor = connection.cursor()
        try:
            cursor.execute("SELECT value FROM schema_metadata WHERE key = 'schema_version'")
            result = cursor.fetchone()
            return int(result[0]) if result else 0
        except sqlite3.OperationalError:
            return 0

    @staticmethod
    def setup_database(connection: sqlite3.Connection) -> None:
        """
        Complete database setup with tables and indexes

        Args:
            connection: SQLite database connection
        """
        DatabaseSchema.create_tables(connection)
        DatabaseSchema.create_indexes(connection)

        cursor = connection.cursor()
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.execute("PRAGMA temp_store = MEMORY")

        connection.commit()
