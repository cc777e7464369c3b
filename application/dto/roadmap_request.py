"""
Roadmap Request DTO - Application Layer

Carries the learner's intent from the API layer into RoadmapService.
Plain dataclasses: no Pydantic, no HTTP concepts, no infrastructure imports.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

HOURS_PER_WEEK_MIN = 1
HOURS_PER_WEEK_MAX = 168

# (min, max) lengths after trimming, keyed by camelCase field name
TEXT_LIMITS: Dict[str, Tuple[int, int]] = {
    "skill": (2, 50),
    "currentLevel": (2, 100),
    "targetOutcome": (10, 500),
}

_LABELS = {
    "skill": "Skill",
    "currentLevel": "Current level",
    "targetOutcome": "Target outcome",
}


@dataclass
class RoadmapIntent:
    """
    Input DTO for RoadmapService.create().

    validate() reports every problem at once instead of raising on the
    first one, so the service can surface a complete field list.
    """

    skill: str
    current_level: str
    target_outcome: str
    hours_per_week: int

    def validate(self) -> Dict[str, str]:
        errors: Dict[str, str] = {}

        texts = {
            "skill": self.skill,
            "currentLevel": self.current_level,
            "targetOutcome": self.target_outcome,
        }
        for name, value in texts.items():
            label = _LABELS[name]
            if not isinstance(value, str) or not value.strip():
                errors[name] = f"{label} is required"
                continue
            low, high = TEXT_LIMITS[name]
            if not low <= len(value.strip()) <= high:
                errors[name] = f"{label} must be between {low} and {high} characters"

        hours = self.hours_per_week
        if isinstance(hours, bool) or not isinstance(hours, int):
            errors["hoursPerWeek"] = "Hours per week must be an integer"
        elif not HOURS_PER_WEEK_MIN <= hours <= HOURS_PER_WEEK_MAX:
            errors["hoursPerWeek"] = (
                f"Hours per week must be between {HOURS_PER_WEEK_MIN} and {HOURS_PER_WEEK_MAX}"
            )

        return errors

    def normalized(self) -> "RoadmapIntent":
        return RoadmapIntent(
            skill=self.skill.strip(),
            current_level=self.current_level.strip(),
            target_outcome=self.target_outcome.strip(),
            hours_per_week=self.hours_per_week,
        )
