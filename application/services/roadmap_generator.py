"""
Roadmap Generator - Application Layer

Turns a learner's intent into a RoadmapDraft by prompting a language model
for a JSON roadmap. The model is an injected dependency typed by the
LLMClient Protocol below; the API layer wires the concrete client.

Generation never fails from the caller's point of view: an exception,
a timeout, unparseable output or a roadmap with too few steps all
result in the static fallback curriculum.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from domain.entities.roadmap import DEFAULT_CHANNEL, TITLE_MAX_LENGTH, Difficulty, Resource, Step
from domain.exceptions.domain_exceptions import UpstreamGenerationFailed

from application.dto.roadmap_draft import RoadmapDraft
from application.dto.roadmap_request import RoadmapIntent
from application.services.fallback_roadmap import fallback_draft

logger = logging.getLogger(__name__)

MIN_STEPS = 8
HOURS_PER_WEEK_TO_TOTAL = 6

_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)
_ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)

SYSTEM_PROMPT = (
    "You are an expert learning path creator and educational content curator. "
    "You answer with valid JSON only."
)

ROADMAP_PROMPT = """Create a comprehensive, systematic roadmap for learning {skill} based on the following information:

User Information:
- Current Level: {current_level}
- Target Outcome: {target_outcome}
- Available Hours per Week: {hours_per_week}

Requirements:
1. Create a structured learning roadmap with AT LEAST 8-12 detailed steps
2. Each step should be specific, actionable, and build upon previous steps
3. Include a realistic estimated duration for each step given the weekly hours
4. List prerequisites for each step as ids of earlier steps
5. Provide 2-3 real, high-quality YouTube resources for each step
6. Include both theoretical and practical components

Respond with a JSON object in exactly this format:
{{
  "title": "Roadmap title",
  "skill": "{skill}",
  "description": "Description of the roadmap and learning journey",
  "difficulty": "Beginner|Intermediate|Advanced",
  "estimatedHours": total_estimated_hours,
  "steps": [
    {{
      "id": "step_1",
      "title": "Step title",
      "description": "What to learn and why it matters",
      "duration": "2-3 weeks",
      "prerequisites": [],
      "resources": [
        {{
          "id": "resource_1",
          "title": "YouTube video title",
          "thumbnail": "https://img.youtube.com/vi/VIDEO_ID/maxresdefault.jpg",
          "url": "https://www.youtube.com/watch?v=VIDEO_ID",
          "duration": "1:30:00",
          "views": "500K views",
          "channel": "Channel name"
        }}
      ]
    }}
  ]
}}
"""

RESOURCES_PROMPT = """Generate 3-5 high-quality YouTube learning resources for learning "{step_title}" in the context of "{skill}".

Prefer practical, hands-on, up-to-date material from well-reviewed channels.

Return a JSON array:
[
  {{
    "id": "resource_1",
    "title": "YouTube video title",
    "thumbnail": "https://img.youtube.com/vi/VIDEO_ID/maxresdefault.jpg",
    "url": "https://www.youtube.com/watch?v=VIDEO_ID",
    "duration": "1:30:00",
    "views": "250K views",
    "channel": "Channel name"
  }}
]
"""


@runtime_checkable
class LLMClient(Protocol):
    def generate_text(self, *, system: str, user: str, temperature: float = 0.2,
                      timeout: Optional[float] = None) -> str:
        ...


class RoadmapGenerator:
    """
    Generation adapter between RoadmapService and a language model.

    Args:
        llm_client:      anything satisfying LLMClient
        timeout_seconds: upper bound for one model call
    """

    def __init__(self, llm_client: LLMClient, timeout_seconds: float = 30.0) -> None:
        self._llm = llm_client
        self._timeout = timeout_seconds

    # ── Public API ────────────────────────────────────────────────────────────

    def generate(self, intent: RoadmapIntent) -> RoadmapDraft:
        """Model-authored draft, or the fallback curriculum. Never raises."""
        prompt = ROADMAP_PROMPT.format(
            skill=intent.skill,
            current_level=intent.current_level,
            target_outcome=intent.target_outcome,
            hours_per_week=intent.hours_per_week,
        )
        try:
            text = self._llm.generate_text(
                system=SYSTEM_PROMPT, user=prompt, timeout=self._timeout
            )
            draft = self._parse_roadmap(text, intent)
        except Exception as exc:
            logger.warning(
                "Roadmap generation failed, serving fallback: %s", exc,
                extra={"structured_context": {
                    "skill": intent.skill,
                    "reason": type(exc).__name__,
                }},
            )
            return fallback_draft(intent.skill, intent.current_level)

        logger.info(
            "Roadmap generated with %d steps", len(draft.steps),
            extra={"structured_context": {"skill": intent.skill, "steps": len(draft.steps)}},
        )
        return draft

    def generate_supplemental_resources(self, skill: str, step_title: str) -> List[Resource]:
        """3-5 extra resources for one step, or [] when anything goes wrong."""
        prompt = RESOURCES_PROMPT.format(skill=skill, step_title=step_title)
        try:
            text = self._llm.generate_text(
                system=SYSTEM_PROMPT, user=prompt, timeout=self._timeout
            )
            match = _ARRAY_PATTERN.search(text or "")
            if not match:
                raise UpstreamGenerationFailed("No JSON array in model output")
            raw = json.loads(match.group(0))
            if not isinstance(raw, list):
                raise UpstreamGenerationFailed("Resources payload is not a list")
            return [
                self._to_resource(item, default_id=f"resource_{n + 1}")
                for n, item in enumerate(raw)
            ]
        except Exception as exc:
            logger.warning(
                "Resource generation failed: %s", exc,
                extra={"structured_context": {
                    "skill": skill,
                    "step_title": step_title,
                    "reason": type(exc).__name__,
                }},
            )
            return []

    # ── Parsing & normalisation ───────────────────────────────────────────────

    def _parse_roadmap(self, text: str, intent: RoadmapIntent) -> RoadmapDraft:
        match = _OBJECT_PATTERN.search(text or "")
        if not match:
            raise UpstreamGenerationFailed("Invalid response format from model")

        data = json.loads(match.group(0))
        if not isinstance(data, dict):
            raise UpstreamGenerationFailed("Roadmap payload is not an object")

        raw_steps = data.get("steps")
        title = str(data.get("title") or "").strip()
        if not title or not isinstance(raw_steps, list):
            raise UpstreamGenerationFailed("Invalid roadmap structure from model")
        if len(raw_steps) < MIN_STEPS:
            raise UpstreamGenerationFailed(
                f"Roadmap must have at least {MIN_STEPS} steps, got {len(raw_steps)}"
            )

        steps = [self._to_step(raw, index) for index, raw in enumerate(raw_steps)]
        skill = str(data.get("skill") or intent.skill).strip() or intent.skill

        return RoadmapDraft(
            title=title[:TITLE_MAX_LENGTH].rstrip(),
            skill=skill,
            description=(
                str(data.get("description") or "").strip()
                or f"A learning path for {skill} designed for {intent.current_level} level learners"
            ),
            difficulty=Difficulty.coerce(data.get("difficulty")),
            estimated_hours=self._coerce_hours(
                data.get("estimatedHours"), intent.hours_per_week * HOURS_PER_WEEK_TO_TOTAL
            ),
            steps=steps,
        )

    def _to_step(self, raw: Any, index: int) -> Step:
        if not isinstance(raw, dict):
            raise UpstreamGenerationFailed(f"Step {index + 1} is not an object")

        raw_resources = raw.get("resources") or []
        if not isinstance(raw_resources, list):
            raise UpstreamGenerationFailed(f"Step {index + 1} resources are not a list")

        prerequisites = raw.get("prerequisites") or []
        if isinstance(prerequisites, str):
            prerequisites = [prerequisites]

        return Step(
            id=str(raw.get("id") or f"step_{index + 1}"),
            title=str(raw.get("title") or f"Step {index + 1}"),
            description=str(raw.get("description") or ""),
            duration=str(raw.get("duration") or ""),
            prerequisites=[str(p) for p in prerequisites],
            completed=False,
            resources=[
                self._to_resource(item, default_id=f"resource_{index}_{res_index}")
                for res_index, item in enumerate(raw_resources)
            ],
        )

    @staticmethod
    def _to_resource(raw: Any, default_id: str) -> Resource:
        if not isinstance(raw, dict):
            raise UpstreamGenerationFailed("Resource is not an object")
        data: Dict[str, Any] = dict(raw)
        data["id"] = data.get("id") or default_id
        data["channel"] = data.get("channel") or DEFAULT_CHANNEL
        return Resource.from_dict(data)

    @staticmethod
    def _coerce_hours(value: Any, default: int) -> int:
        if isinstance(value, bool):
            return default
        try:
            hours = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default
        return hours if hours >= 1 else default
