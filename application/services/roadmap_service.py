"""
Roadmap Service - Application Layer

Entry point for every roadmap operation a signed-in user can perform.
Orchestrates intent validation, generation, aggregate mutation and
persistence. All operations are scoped to a user id: a roadmap that is
missing, owned by someone else, or soft-deleted is reported the same way.

No HTTP types cross this boundary and nothing here imports from the
infrastructure or api packages.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from domain.entities.roadmap import Resource, Roadmap
from domain.exceptions.domain_exceptions import (
    CircularDependencyError, RoadmapNotFoundError, ValidationFailedError
)

from application.dto.roadmap_draft import RoadmapDraft
from application.dto.roadmap_request import RoadmapIntent
from application.dto.roadmap_stats import RoadmapStats
from application.services.roadmap_graph import RoadmapGraphBuilder

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator interfaces (Dependency Inversion)
# Concrete implementations live in infrastructure/ and application/services/
# ---------------------------------------------------------------------------

@runtime_checkable
class IRoadmapStore(Protocol):
    """Interface for persisting Roadmap aggregates."""

    def save(self, roadmap: Roadmap) -> Roadmap: ...
    def get_by_id(self, roadmap_id: str, user_id: str) -> Optional[Roadmap]: ...
    def list_active_by_user(self, user_id: str) -> List[Roadmap]: ...


@runtime_checkable
class IRoadmapGenerator(Protocol):
    """Interface for producing drafts and extra resources."""

    def generate(self, intent: RoadmapIntent) -> RoadmapDraft: ...
    def generate_supplemental_resources(self, skill: str, step_title: str) -> List[Resource]: ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class RoadmapService:
    """
    Usage:
        service = RoadmapService(
            roadmap_store=SqliteRoadmapRepository(db),
            generator=RoadmapGenerator(llm_client),
        )
        roadmap = service.create(user_id, RoadmapIntent("Go", "beginner", "build a REST API", 5))
    """

    def __init__(
        self,
        roadmap_store: IRoadmapStore,
        generator: IRoadmapGenerator,
        graph_builder: Optional[RoadmapGraphBuilder] = None,
    ) -> None:
        self._store = roadmap_store
        self._generator = generator
        self._graph_builder = graph_builder or RoadmapGraphBuilder()

    # ── Commands ──────────────────────────────────────────────────────────────

    def create(self, user_id: str, intent: RoadmapIntent) -> Roadmap:
        """
        Generate and persist a new roadmap for user_id.

        Raises:
            ValidationFailedError: listing every invalid intent field
        """
        errors = intent.validate()
        if errors:
            raise ValidationFailedError(errors)
        intent = intent.normalized()

        draft = self._generator.generate(intent)
        roadmap = draft.to_roadmap(user_id)

        try:
            for warning in roadmap.validate_prerequisite_graph():
                logger.debug("Roadmap prerequisite warning: %s", warning)
        except CircularDependencyError as exc:
            # Prerequisites are advisory; a cyclic draft is still stored
            logger.warning("Generated roadmap has circular prerequisites: %s", exc)

        self._store.save(roadmap)
        logger.info(
            "Roadmap created",
            extra={"structured_context": {
                "roadmap_id": roadmap.roadmap_id,
                "user_id": user_id,
                "skill": roadmap.skill,
                "steps": roadmap.total_steps,
                "fallback": draft.is_fallback,
            }},
        )
        return roadmap

    def set_step_completion(self, user_id: str, roadmap_id: str, step_id: str,
                            completed: bool) -> Roadmap:
        """
        Set one step's completed flag and persist. Idempotent.

        Raises:
            RoadmapNotFoundError, StepNotFoundError
        """
        roadmap = self.get_by_id(user_id, roadmap_id)
        roadmap.set_step_completion(step_id, completed)
        self._store.save(roadmap)
        logger.info(
            "Step %s marked %s", step_id, "completed" if completed else "incomplete",
            extra={"structured_context": {
                "roadmap_id": roadmap_id,
                "progress": roadmap.progress,
            }},
        )
        return roadmap

    def augment_step_resources(self, user_id: str, roadmap_id: str,
                               step_id: str) -> List[Resource]:
        """
        Ask the generator for extra resources and append them to the step.

        Returns only the newly added resources. The roadmap is written only
        when at least one resource was added.

        Raises:
            RoadmapNotFoundError, StepNotFoundError
        """
        roadmap = self.get_by_id(user_id, roadmap_id)
        step = roadmap.require_step(step_id)

        resources = self._generator.generate_supplemental_resources(roadmap.skill, step.title)
        if not resources:
            return []

        added = roadmap.append_resources(step_id, resources)
        self._store.save(roadmap)
        logger.info(
            "Added %d resources to step %s", len(added), step_id,
            extra={"structured_context": {"roadmap_id": roadmap_id}},
        )
        return added

    def soft_delete(self, user_id: str, roadmap_id: str) -> None:
        """
        Hide a roadmap from every read path. The row is kept.

        Raises:
            RoadmapNotFoundError: also on a second delete of the same roadmap
        """
        roadmap = self.get_by_id(user_id, roadmap_id)
        roadmap.soft_delete()
        self._store.save(roadmap)
        logger.info(
            "Roadmap deleted",
            extra={"structured_context": {"roadmap_id": roadmap_id, "user_id": user_id}},
        )

    # ── Queries ───────────────────────────────────────────────────────────────

    def list_for_user(self, user_id: str) -> List[Roadmap]:
        """Active roadmaps, newest first."""
        return self._store.list_active_by_user(user_id)

    def get_by_id(self, user_id: str, roadmap_id: str) -> Roadmap:
        roadmap = self._store.get_by_id(roadmap_id, user_id)
        if roadmap is None:
            raise RoadmapNotFoundError()
        return roadmap

    def stats_for_user(self, user_id: str) -> RoadmapStats:
        return RoadmapStats.from_roadmaps(self.list_for_user(user_id))

    def get_graph(self, user_id: str, roadmap_id: str) -> Dict[str, Any]:
        return self._graph_builder.build(self.get_by_id(user_id, roadmap_id))
