"""Shared pytest fixtures"""
import pytest

from infrastructure.persistence.database.database_connection import DatabaseConnection
from infrastructure.persistence.repositories.sqlite_roadmap_repository import SqliteRoadmapRepository
from infrastructure.persistence.repositories.sqlite_user_repository import SqliteUserRepository
from infrastructure.security import BcryptPasswordHasher, TokenSigner


@pytest.fixture
def db(tmp_path):
    connection = DatabaseConnection(tmp_path / "skillpath-test.db")
    yield connection
    connection.close()


@pytest.fixture
def roadmap_store(db):
    return SqliteRoadmapRepository(db=db)


@pytest.fixture
def user_store(db):
    return SqliteUserRepository(db=db)


@pytest.fixture
def password_hasher():
    # Minimum bcrypt cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_signer():
    return TokenSigner("test-secret", ttl_days=1)
