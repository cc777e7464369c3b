"""
SqliteRoadmapRepository - Infrastructure Layer

Implements the IRoadmapStore Protocol from the roadmap service.
Each Roadmap aggregate is written whole as a JSON document; the scalar
columns beside it only serve filtering and ordering.
"""
from __future__ import annotations

import json
import sqlite3
from typing import List, Optional

from domain.entities.roadmap import Roadmap
from infrastructure.logging import get_logger
from infrastructure.persistence.database.database_connection import DatabaseConnection

logger = get_logger(__name__)


class SqliteRoadmapRepository:
    """
    SQLite-backed store for Roadmap aggregates.

    Implements the IRoadmapStore Protocol expected by:
        application/services/roadmap_service.py

    Ownership and soft-delete filtering happen here: get_by_id() and
    list_active_by_user() never return another user's roadmap or an
    inactive one. get_by_id_raw() bypasses both filters.
    """

    def __init__(self, db: DatabaseConnection) -> None:
        self._db = db

    # ── Protocol methods ──────────────────────────────────────────────────────

    def save(self, roadmap: Roadmap) -> Roadmap:
        """
        Insert the roadmap document, or update it in place (rowid is kept).

        Derived counters are recomputed immediately before the write, so a
        stored document always satisfies progress == round(completed/total).
        """
        roadmap.recompute_aggregates()
        document = roadmap.to_dict()

        with self._db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO roadmaps
                    (id, user_id, title, skill, difficulty, progress,
                     is_active, created_at, updated_at, document)
                VALUES (?,?,?,?,?,?,?,?,?,?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    skill = excluded.skill,
                    difficulty = excluded.difficulty,
                    progress = excluded.progress,
                    is_active = excluded.is_active,
                    updated_at = excluded.updated_at,
                    document = excluded.document
                """,
                (
                    roadmap.roadmap_id,
                    roadmap.user_id,
                    roadmap.title,
                    roadmap.skill,
                    roadmap.difficulty.value,
                    roadmap.progress,
                    1 if roadmap.is_active else 0,
                    roadmap.created_at.isoformat(),
                    roadmap.updated_at.isoformat(),
                    json.dumps(document),
                ),
            )

        roadmap.mark_clean()
        logger.log_roadmap_saved(
            roadmap.roadmap_id,
            roadmap.user_id,
            total_steps=roadmap.total_steps,
            progress=roadmap.progress,
            is_active=roadmap.is_active,
        )
        return roadmap

    def get_by_id(self, roadmap_id: str, user_id: str) -> Optional[Roadmap]:
        """Active roadmap owned by user_id, or None."""
        row = self._db.fetch_one(
            "SELECT document FROM roadmaps WHERE id = ? AND user_id = ? AND is_active = 1",
            (roadmap_id, user_id),
        )
        return self._row_to_roadmap(row) if row else None

    def get_by_id_raw(self, roadmap_id: str) -> Optional[Roadmap]:
        """Roadmap by id regardless of owner or active flag (admin/tests)."""
        row = self._db.fetch_one(
            "SELECT document FROM roadmaps WHERE id = ?",
            (roadmap_id,),
        )
        return self._row_to_roadmap(row) if row else None

    def list_active_by_user(self, user_id: str) -> List[Roadmap]:
        """Active roadmaps of one user, newest first."""
        rows = self._db.fetch_all(
            """
            SELECT document FROM roadmaps
            WHERE user_id = ? AND is_active = 1
            ORDER BY created_at DESC, rowid DESC
            """,
            (user_id,),
        )
        return [self._row_to_roadmap(r) for r in rows]

    # ── Private helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _row_to_roadmap(row: sqlite3.Row) -> Roadmap:
        return Roadmap.from_dict(json.loads(row["document"]))
