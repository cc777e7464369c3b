"""
SqliteUserRepository - Infrastructure Layer

Implements the IUserStore Protocol from the auth service.
"""
from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional

from domain.entities.user import User, normalize_email
from domain.exceptions.domain_exceptions import DuplicateEntityError
from infrastructure.logging import get_logger
from infrastructure.persistence.database.database_connection import DatabaseConnection

logger = get_logger(__name__)


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


class SqliteUserRepository:
    """SQLite-backed store for User accounts. Emails are unique."""

    def __init__(self, db: DatabaseConnection) -> None:
        self._db = db

    def add(self, user: User) -> User:
        """
        Insert a new account.

        Raises:
            DuplicateEntityError: if the email is already registered
        """
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO users
                        (id, name, email, password_hash, is_active, created_at, last_login_at)
                    VALUES (?,?,?,?,?,?,?)
                    """,
                    (
                        user.user_id,
                        user.name,
                        user.email,
                        user.password_hash,
                        1 if user.is_active else 0,
                        user.created_at.isoformat(),
                        user.last_login_at.isoformat() if user.last_login_at else None,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateEntityError("User", user.email) from exc

        logger.log_user_registered(user.user_id, user.email)
        return user

    def update_last_login(self, user: User) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                "UPDATE users SET last_login_at = ? WHERE id = ?",
                (user.last_login_at.isoformat() if user.last_login_at else None, user.user_id),
            )

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._db.fetch_one(
            "SELECT * FROM users WHERE email = ?",
            (normalize_email(email),),
        )
        return self._row_to_user(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        row = self._db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_user(row) if row else None

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            user_id=row["id"],
            is_active=bool(row["is_active"]),
            created_at=_parse_dt(row["created_at"]) or datetime.now(),
            last_login_at=_parse_dt(row["last_login_at"]),
        )
