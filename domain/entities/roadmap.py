"""
Roadmap Entity - Clean Architecture Domain Layer
Aggregate root owning the ordered learning steps, their resources and the
derived progress counters
"""
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any
from datetime import datetime
from uuid import uuid4
from enum import Enum

from ..exceptions.domain_exceptions import (
    ValidationFailedError, BusinessRuleViolation, CircularDependencyError, StepNotFoundError
)

DEFAULT_CHANNEL = "Unknown Channel"
TITLE_MAX_LENGTH = 100


class Difficulty(Enum):
    """Roadmap difficulty levels"""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @classmethod
    def coerce(cls, value: Any) -> "Difficulty":
        """Map loose input ("advanced", Difficulty.ADVANCED, None) onto a level.

        Unknown values become BEGINNER.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for level in cls:
                if level.value.lower() == value.strip().lower():
                    return level
        return cls.BEGINNER


def calculate_progress(completed_steps: int, total_steps: int) -> int:
    """Percentage of completed steps, rounded half up, 0 for an empty roadmap."""
    if total_steps <= 0:
        return 0
    # floor(100 * c / t + 0.5) in integer arithmetic
    return (200 * completed_steps + total_steps) // (2 * total_steps)


@dataclass
class Resource:
    """Learning material (usually a video) attached to a step"""
    id: str
    title: str = ""
    thumbnail: str = ""
    url: str = ""
    duration: str = ""
    views: str = ""
    channel: str = DEFAULT_CHANNEL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "url": self.url,
            "duration": self.duration,
            "views": self.views,
            "channel": self.channel,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            thumbnail=str(data.get("thumbnail") or ""),
            url=str(data.get("url") or ""),
            duration=str(data.get("duration") or ""),
            views=str(data.get("views") or ""),
            channel=str(data.get("channel") or DEFAULT_CHANNEL),
        )


@dataclass
class Step:
    """
    One ordered unit of a roadmap.
    Identified by an id that is only unique inside its roadmap.
    """
    id: str
    title: str
    description: str = ""
    duration: str = ""
    prerequisites: List[str] = field(default_factory=list)
    completed: bool = False
    resources: List[Resource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "prerequisites": list(self.prerequisites),
            "completed": self.completed,
            "resources": [r.to_dict() for r in self.resources],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            duration=str(data.get("duration") or ""),
            prerequisites=[str(p) for p in data.get("prerequisites") or []],
            completed=bool(data.get("completed", False)),
            resources=[Resource.from_dict(r) for r in data.get("resources") or []],
        )


@dataclass
class Roadmap:
    """
    Aggregate root for a user's learning roadmap.

    total_steps, completed_steps and progress are derived from ``steps`` by
    recompute_aggregates(); no caller sets them directly. Every mutating
    method recomputes them and marks the aggregate dirty, and the repository
    recomputes once more right before writing.
    """
    user_id: str
    title: str
    skill: str
    description: str

    difficulty: Difficulty = Difficulty.BEGINNER
    estimated_hours: int = 1
    steps: List[Step] = field(default_factory=list)

    roadmap_id: str = field(default_factory=lambda: uuid4().hex)
    is_active: bool = True
    ai_generated: bool = True

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    # Derived
    total_steps: int = field(default=0, init=False)
    completed_steps: int = field(default=0, init=False)
    progress: int = field(default=0, init=False)

    _dirty: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.difficulty = Difficulty.coerce(self.difficulty)
        self._validate_roadmap()
        self.recompute_aggregates()

    def _validate_roadmap(self):
        """Business rule: required descriptive fields and their bounds"""
        errors: Dict[str, str] = {}

        if not self.user_id or not str(self.user_id).strip():
            errors["user"] = "Roadmap must belong to a user"

        if not self.title or not self.title.strip():
            errors["title"] = "Title is required"
        elif len(self.title.strip()) > TITLE_MAX_LENGTH:
            errors["title"] = f"Title cannot be more than {TITLE_MAX_LENGTH} characters"

        if not self.skill or not self.skill.strip():
            errors["skill"] = "Skill is required"

        if not self.description or not self.description.strip():
            errors["description"] = "Description is required"

        if not isinstance(self.estimated_hours, int) or self.estimated_hours < 1:
            errors["estimatedHours"] = "Estimated hours must be at least 1"

        if errors:
            raise ValidationFailedError(errors)

        self.title = self.title.strip()
        self.skill = self.skill.strip()
        self.description = self.description.strip()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def recompute_aggregates(self) -> None:
        """Derive total_steps, completed_steps and progress from steps."""
        self.total_steps = len(self.steps)
        self.completed_steps = sum(1 for step in self.steps if step.completed)
        self.progress = calculate_progress(self.completed_steps, self.total_steps)

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_clean(self) -> None:
        """Called by the repository once the aggregate has been written."""
        self._dirty = False

    def _touch(self) -> None:
        self.recompute_aggregates()
        self.updated_at = datetime.now()
        self._dirty = True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def find_step(self, step_id: str) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def require_step(self, step_id: str) -> Step:
        step = self.find_step(step_id)
        if step is None:
            raise StepNotFoundError(step_id)
        return step

    def set_step_completion(self, step_id: str, completed: bool) -> "Roadmap":
        """
        Business rule: toggle a step's completion flag.

        Prerequisites are advisory, so any step may be marked complete
        regardless of the state of the steps it depends on.
        """
        step = self.require_step(step_id)
        step.completed = bool(completed)
        self._touch()
        return self

    def append_resources(self, step_id: str, resources: List[Resource]) -> List[Resource]:
        """
        Business rule: grow a step's resource list.
        Resources are appended as given; ids are trusted and never de-duplicated.
        """
        step = self.require_step(step_id)
        added = list(resources)
        step.resources.extend(added)
        self._touch()
        return added

    def soft_delete(self) -> None:
        """Business rule: logical deletion is terminal"""
        if not self.is_active:
            raise BusinessRuleViolation("Roadmap is already deleted", rule="soft_delete_once")
        self.is_active = False
        self._touch()

    # ------------------------------------------------------------------
    # Prerequisite graph
    # ------------------------------------------------------------------

    def effective_prerequisites(self, step: Step) -> List[str]:
        """
        Prerequisites used for ordering and availability.

        Declared prerequisites that name an existing step (other than the step
        itself) win. A step with none falls back to the step right before it
        in insertion order.
        """
        known = {s.id for s in self.steps}
        declared = [p for p in step.prerequisites if p in known and p != step.id]
        if declared:
            return declared
        if not step.prerequisites:
            index = next(i for i, s in enumerate(self.steps) if s is step)
            if index > 0:
                return [self.steps[index - 1].id]
        return []

    def validate_prerequisite_graph(self) -> List[str]:
        """
        Check declared prerequisites.

        Returns:
            Warnings for references that the graph ignores (unknown step ids,
            self references).

        Raises:
            CircularDependencyError: if the effective prerequisites form a cycle.
        """
        warnings: List[str] = []
        known = {s.id for s in self.steps}

        for step in self.steps:
            for prereq in step.prerequisites:
                if prereq == step.id:
                    warnings.append(f"Step '{step.id}' lists itself as a prerequisite")
                elif prereq not in known:
                    warnings.append(f"Step '{step.id}' references unknown prerequisite '{prereq}'")

        cycle = self._find_cycle()
        if cycle:
            raise CircularDependencyError(cycle)
        return warnings

    def learning_sequence(self) -> List[Step]:
        """
        Topological order of steps over effective prerequisites.
        Kahn's algorithm; ties keep insertion order.
        """
        position = {step.id: i for i, step in enumerate(self.steps)}
        in_degree = {step.id: 0 for step in self.steps}
        dependents: Dict[str, List[str]] = {step.id: [] for step in self.steps}

        for step in self.steps:
            for prereq in self.effective_prerequisites(step):
                dependents[prereq].append(step.id)
                in_degree[step.id] += 1

        queue = [sid for sid, degree in in_degree.items() if degree == 0]
        ordered: List[str] = []

        while queue:
            queue.sort(key=position.get)
            current = queue.pop(0)
            ordered.append(current)
            for dependent in dependents[current]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(ordered) != len(in_degree):
            raise CircularDependencyError(self._find_cycle() or [sid for sid in in_degree if sid not in ordered])

        by_id = {step.id: step for step in self.steps}
        return [by_id[sid] for sid in ordered]

    def available_steps(self) -> List[Step]:
        """Incomplete steps whose effective prerequisites are all completed."""
        completed_ids = {s.id for s in self.steps if s.completed}
        return [
            step for step in self.steps
            if not step.completed
            and all(p in completed_ids for p in self.effective_prerequisites(step))
        ]

    def _find_cycle(self) -> Optional[List[str]]:
        """Depth-first search for a cycle; returns it closed (first id repeated)."""
        edges = {step.id: self.effective_prerequisites(step) for step in self.steps}
        state: Dict[str, int] = {}  # 1 = on stack, 2 = done
        stack: List[str] = []

        def visit(node: str) -> Optional[List[str]]:
            state[node] = 1
            stack.append(node)
            for prereq in edges.get(node, []):
                if state.get(prereq) == 1:
                    start = stack.index(prereq)
                    return stack[start:] + [prereq]
                if prereq not in state:
                    found = visit(prereq)
                    if found:
                        return found
            stack.pop()
            state[node] = 2
            return None

        for step in self.steps:
            if step.id not in state:
                found = visit(step.id)
                if found:
                    return found
        return None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Document shape used for storage and API responses."""
        return {
            "id": self.roadmap_id,
            "user": self.user_id,
            "title": self.title,
            "skill": self.skill,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "estimatedHours": self.estimated_hours,
            "steps": [s.to_dict() for s in self.steps],
            "progress": self.progress,
            "completedSteps": self.completed_steps,
            "totalSteps": self.total_steps,
            "isActive": self.is_active,
            "aiGenerated": self.ai_generated,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Roadmap":
        """Rebuild an aggregate; stored counters are ignored and re-derived."""
        roadmap = cls(
            user_id=str(data["user"]),
            title=data["title"],
            skill=data["skill"],
            description=data["description"],
            difficulty=data.get("difficulty"),
            estimated_hours=int(data["estimatedHours"]),
            steps=[Step.from_dict(s) for s in data.get("steps") or []],
            roadmap_id=str(data["id"]),
            is_active=bool(data.get("isActive", True)),
            ai_generated=bool(data.get("aiGenerated", True)),
        )
        if data.get("createdAt"):
            roadmap.created_at = datetime.fromisoformat(data["createdAt"])
        if data.get("updatedAt"):
            roadmap.updated_at = datetime.fromisoformat(data["updatedAt"])
        return roadmap

    def __eq__(self, other) -> bool:
        if not isinstance(other, Roadmap):
            return False
        return self.roadmap_id == other.roadmap_id

    def __hash__(self) -> int:
        return hash(self.roadmap_id)

    def __str__(self) -> str:
        return f"Roadmap({self.title}, {self.completed_steps}/{self.total_steps} steps)"
