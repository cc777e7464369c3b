"""
Unit Tests - RoadmapService
Real SQLite store on tmp_path, scripted language model.
"""
import pytest

from application.dto.roadmap_request import RoadmapIntent
from application.services.roadmap_generator import RoadmapGenerator
from application.services.roadmap_service import RoadmapService
from domain.entities.roadmap import Difficulty, calculate_progress
from domain.exceptions.domain_exceptions import (
    RoadmapNotFoundError, StepNotFoundError, ValidationFailedError
)
from tests.fakes import ScriptedLLM, make_roadmap, model_roadmap_text, resources_text


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def service(roadmap_store, llm):
    return RoadmapService(roadmap_store=roadmap_store, generator=RoadmapGenerator(llm))


def go_intent(**overrides) -> RoadmapIntent:
    fields = dict(
        skill="Go",
        current_level="beginner",
        target_outcome="build a REST API",
        hours_per_week=5,
    )
    fields.update(overrides)
    return RoadmapIntent(**fields)


class TestCreate:
    def test_unreachable_model_serves_fallback(self, service, roadmap_store, llm):
        llm.replies.append(ConnectionError("model unreachable"))
        roadmap = service.create("user-1", go_intent())

        assert "Go" in roadmap.title
        assert roadmap.total_steps == 8
        assert roadmap.difficulty == Difficulty.BEGINNER
        assert roadmap.estimated_hours == 60
        assert roadmap.progress == 0
        assert roadmap.is_active
        assert roadmap_store.get_by_id(roadmap.roadmap_id, "user-1") == roadmap

    def test_model_roadmap_is_persisted(self, service, roadmap_store, llm):
        llm.replies.append(model_roadmap_text(10))
        roadmap = service.create("user-1", go_intent())
        stored = roadmap_store.get_by_id(roadmap.roadmap_id, "user-1")
        assert stored.total_steps == 10
        assert stored.user_id == "user-1"
        assert not roadmap.is_dirty

    def test_intent_is_trimmed(self, service, llm):
        llm.replies.append(RuntimeError("down"))
        roadmap = service.create("user-1", go_intent(skill="  Go  "))
        assert roadmap.skill == "Go"

    def test_all_invalid_fields_reported(self, service, llm):
        with pytest.raises(ValidationFailedError) as exc_info:
            service.create("user-1", go_intent(skill=" ", hours_per_week=0))
        assert set(exc_info.value.errors) == {"skill", "hoursPerWeek"}
        assert llm.calls == []

    def test_blank_model_title_still_creates_roadmap(self, service, roadmap_store, llm):
        llm.replies.append(model_roadmap_text(8, title="   "))
        roadmap = service.create("user-1", go_intent())
        assert roadmap.title == "Complete Go Learning Roadmap"
        assert roadmap_store.get_by_id(roadmap.roadmap_id, "user-1") == roadmap

    @pytest.mark.parametrize("field, value", [
        ("skill", "S" * 90),
        ("skill", "G"),
        ("current_level", "x" * 101),
        ("target_outcome", "short"),
    ])
    def test_text_field_lengths_are_bounded(self, service, llm, field, value):
        with pytest.raises(ValidationFailedError) as exc_info:
            service.create("user-1", go_intent(**{field: value}))
        assert "between" in next(iter(exc_info.value.errors.values()))
        assert llm.calls == []

    @pytest.mark.parametrize("hours", [169, True, "5"])
    def test_hours_per_week_must_be_int_in_range(self, service, hours):
        with pytest.raises(ValidationFailedError, match="hoursPerWeek"):
            service.create("user-1", go_intent(hours_per_week=hours))

    def test_cyclic_model_prerequisites_are_still_stored(self, service, llm):
        text = model_roadmap_text(8)
        text = text.replace('"prerequisites": []', '"prerequisites": ["step_8"]')
        llm.replies.append(text)
        roadmap = service.create("user-1", go_intent())
        assert roadmap.total_steps == 8


class TestStepCompletion:
    def test_three_of_ten_is_thirty_percent(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap(n_steps=10))
        for step_id in ("step_1", "step_4", "step_9"):
            service.set_step_completion("user-1", roadmap.roadmap_id, step_id, True)

        stored = roadmap_store.get_by_id(roadmap.roadmap_id, "user-1")
        assert stored.progress == 30
        assert stored.completed_steps == 3

    def test_completion_is_idempotent(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap(n_steps=4))
        first = service.set_step_completion("user-1", roadmap.roadmap_id, "step_1", True)
        second = service.set_step_completion("user-1", roadmap.roadmap_id, "step_1", True)
        assert first.progress == second.progress == 25
        assert second.completed_steps == 1

    def test_progress_matches_every_subset(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap(n_steps=7))
        for done, step in enumerate(roadmap.steps, start=1):
            updated = service.set_step_completion("user-1", roadmap.roadmap_id, step.id, True)
            assert updated.progress == calculate_progress(done, 7)

    def test_unknown_step(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap())
        with pytest.raises(StepNotFoundError):
            service.set_step_completion("user-1", roadmap.roadmap_id, "nope", True)


class TestAugment:
    def test_appends_and_returns_new_resources(self, service, roadmap_store, llm):
        roadmap = roadmap_store.save(make_roadmap(n_steps=3, resources_per_step=2))
        llm.replies.append(resources_text(3))

        added = service.augment_step_resources("user-1", roadmap.roadmap_id, "step_2")

        assert len(added) == 3
        stored = roadmap_store.get_by_id(roadmap.roadmap_id, "user-1")
        assert len(stored.find_step("step_2").resources) == 5
        assert "Step 2" in llm.calls[0]["user"]

    def test_generation_failure_leaves_roadmap_untouched(self, service, roadmap_store, llm):
        roadmap = roadmap_store.save(make_roadmap(n_steps=3, resources_per_step=2))
        before = roadmap_store.get_by_id(roadmap.roadmap_id, "user-1").to_dict()
        llm.replies.append(TimeoutError("slow"))

        assert service.augment_step_resources("user-1", roadmap.roadmap_id, "step_1") == []
        assert roadmap_store.get_by_id(roadmap.roadmap_id, "user-1").to_dict() == before

    def test_unknown_step_does_not_call_model(self, service, roadmap_store, llm):
        roadmap = roadmap_store.save(make_roadmap())
        with pytest.raises(StepNotFoundError):
            service.augment_step_resources("user-1", roadmap.roadmap_id, "step_404")
        assert llm.calls == []


class TestIsolationAndDeletion:
    def test_other_users_roadmap_is_not_found(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap(user_id="alice"))

        with pytest.raises(RoadmapNotFoundError, match="Roadmap not found"):
            service.get_by_id("bob", roadmap.roadmap_id)
        with pytest.raises(RoadmapNotFoundError):
            service.set_step_completion("bob", roadmap.roadmap_id, "step_1", True)
        with pytest.raises(RoadmapNotFoundError):
            service.soft_delete("bob", roadmap.roadmap_id)
        assert service.list_for_user("bob") == []

    def test_soft_delete_hides_but_keeps_row(self, service, roadmap_store, db):
        roadmap = roadmap_store.save(make_roadmap())
        service.soft_delete("user-1", roadmap.roadmap_id)

        with pytest.raises(RoadmapNotFoundError):
            service.get_by_id("user-1", roadmap.roadmap_id)
        assert service.list_for_user("user-1") == []

        raw = roadmap_store.get_by_id_raw(roadmap.roadmap_id)
        assert raw is not None and raw.is_active is False
        row = db.fetch_one("SELECT is_active FROM roadmaps WHERE id = ?", (roadmap.roadmap_id,))
        assert row["is_active"] == 0

    def test_second_delete_is_not_found(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap())
        service.soft_delete("user-1", roadmap.roadmap_id)
        with pytest.raises(RoadmapNotFoundError):
            service.soft_delete("user-1", roadmap.roadmap_id)


class TestQueries:
    def test_list_is_newest_first(self, service, roadmap_store):
        first = roadmap_store.save(make_roadmap(title="First"))
        second = roadmap_store.save(make_roadmap(title="Second"))
        titles = [r.title for r in service.list_for_user("user-1")]
        assert titles == ["Second", "First"]
        assert first != second

    def test_stats(self, service, roadmap_store):
        roadmap_store.save(make_roadmap(n_steps=10, completed=3, estimated_hours=20))
        roadmap_store.save(make_roadmap(n_steps=4, completed=1, estimated_hours=15))
        deleted = make_roadmap(n_steps=5, completed=5)
        deleted.soft_delete()
        roadmap_store.save(deleted)

        stats = service.stats_for_user("user-1")
        assert stats.total_roadmaps == 2
        assert stats.total_steps == 14
        assert stats.completed_steps == 4
        assert stats.total_hours == 35
        # (30 + 25) / 2 = 27.5
        assert stats.average_progress == 28

    def test_stats_empty(self, service):
        assert service.stats_for_user("nobody").to_dict() == {
            "totalRoadmaps": 0,
            "totalSteps": 0,
            "completedSteps": 0,
            "totalHours": 0,
            "averageProgress": 0,
        }

    def test_graph(self, service, roadmap_store):
        roadmap = roadmap_store.save(make_roadmap(n_steps=4, completed=1))
        graph = service.get_graph("user-1", roadmap.roadmap_id)
        assert len(graph["nodes"]) == 4
        assert graph["sequence"] == ["step_1", "step_2", "step_3", "step_4"]
