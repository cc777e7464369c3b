"""
Unit Tests - SQLite stores and schema
"""
import json
from datetime import datetime

import pytest

from domain.entities.user import User
from domain.exceptions.domain_exceptions import DuplicateEntityError
from infrastructure.persistence.database.database_connection import DatabaseConnection
from infrastructure.persistence.database.schema import DatabaseSchema
from tests.fakes import make_roadmap


class TestDatabaseConnection:
    def test_schema_is_created_once(self, tmp_path):
        path = tmp_path / "nested" / "app.db"
        first = DatabaseConnection(path)
        assert DatabaseSchema.get_schema_version(first.get_connection()) == DatabaseSchema.SCHEMA_VERSION
        # Reopening an up-to-date file is a no-op
        second = DatabaseConnection(path)
        assert second.ping()
        first.close()
        second.close()

    def test_stats(self, db, roadmap_store):
        roadmap_store.save(make_roadmap())
        stats = db.get_database_stats()
        assert stats["roadmaps_count"] == 1
        assert stats["active_roadmaps_count"] == 1
        assert stats["users_count"] == 0

    def test_transaction_rolls_back(self, db):
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                conn.execute(
                    "INSERT INTO users (id, name, email, password_hash, created_at) "
                    "VALUES ('u', 'Ada', 'a@b.co', 'h', '2026-01-01')"
                )
                raise RuntimeError("boom")
        assert db.fetch_one("SELECT COUNT(*) AS n FROM users")["n"] == 0


class TestSqliteRoadmapRepository:
    def test_save_and_load(self, roadmap_store):
        roadmap = make_roadmap(n_steps=6, completed=2, resources_per_step=1)
        roadmap_store.save(roadmap)
        loaded = roadmap_store.get_by_id(roadmap.roadmap_id, "user-1")
        assert loaded.to_dict() == roadmap.to_dict()

    def test_save_recomputes_stale_counters(self, roadmap_store, db):
        roadmap = make_roadmap(n_steps=4)
        # Bypass the aggregate methods on purpose
        roadmap.steps[0].completed = True
        roadmap_store.save(roadmap)

        row = db.fetch_one("SELECT progress, document FROM roadmaps WHERE id = ?", (roadmap.roadmap_id,))
        assert row["progress"] == 25
        assert json.loads(row["document"])["completedSteps"] == 1

    def test_save_marks_clean(self, roadmap_store):
        roadmap = make_roadmap()
        roadmap.set_step_completion("step_1", True)
        assert roadmap.is_dirty
        roadmap_store.save(roadmap)
        assert not roadmap.is_dirty

    def test_ownership_filter(self, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap(user_id="alice"))
        assert roadmap_store.get_by_id(roadmap.roadmap_id, "bob") is None
        assert roadmap_store.get_by_id_raw(roadmap.roadmap_id).user_id == "alice"

    def test_inactive_hidden_from_reads(self, roadmap_store):
        roadmap = make_roadmap()
        roadmap.soft_delete()
        roadmap_store.save(roadmap)
        assert roadmap_store.get_by_id(roadmap.roadmap_id, "user-1") is None
        assert roadmap_store.list_active_by_user("user-1") == []
        assert roadmap_store.get_by_id_raw(roadmap.roadmap_id) is not None

    def test_update_keeps_listing_position(self, roadmap_store, db):
        same_moment = datetime(2026, 3, 1, 9, 0)
        older = roadmap_store.save(make_roadmap(title="First", created_at=same_moment))
        newer = roadmap_store.save(make_roadmap(title="Second", created_at=same_moment))
        rowid = db.fetch_one("SELECT rowid FROM roadmaps WHERE id = ?", (older.roadmap_id,))["rowid"]

        older.set_step_completion("step_1", True)
        roadmap_store.save(older)

        listed = roadmap_store.list_active_by_user("user-1")
        assert [r.roadmap_id for r in listed] == [newer.roadmap_id, older.roadmap_id]
        assert db.fetch_one("SELECT rowid FROM roadmaps WHERE id = ?", (older.roadmap_id,))["rowid"] == rowid
        assert listed[1].completed_steps == 1

    def test_missing_id(self, roadmap_store):
        assert roadmap_store.get_by_id("nope", "user-1") is None
        assert roadmap_store.get_by_id_raw("nope") is None


class TestSqliteUserRepository:
    def test_add_and_lookup(self, user_store):
        user = user_store.add(User(name="Ada", email="ada@example.com", password_hash="h"))
        assert user_store.get_by_email("ADA@example.com") == user
        assert user_store.get_by_id(user.user_id).name == "Ada"

    def test_duplicate_email(self, user_store):
        user_store.add(User(name="Ada", email="ada@example.com", password_hash="h"))
        with pytest.raises(DuplicateEntityError):
            user_store.add(User(name="Ada 2", email="ada@example.com", password_hash="h"))

    def test_update_last_login(self, user_store):
        user = user_store.add(User(name="Ada", email="ada@example.com", password_hash="h"))
        user.record_login()
        user_store.update_last_login(user)
        assert user_store.get_by_id(user.user_id).last_login_at == user.last_login_at
