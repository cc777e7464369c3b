"""
Roadmap Draft DTO - Application Layer

Unpersisted roadmap returned by RoadmapGenerator. RoadmapService turns it
into a Roadmap aggregate owned by the requesting user.
"""
from dataclasses import dataclass, field
from typing import List

from domain.entities.roadmap import Difficulty, Roadmap, Step


@dataclass
class RoadmapDraft:
    """Output DTO of the generation adapter."""

    title: str
    skill: str
    description: str
    difficulty: Difficulty
    estimated_hours: int
    steps: List[Step] = field(default_factory=list)

    # True when the static curriculum was served instead of model output
    is_fallback: bool = False

    def to_roadmap(self, user_id: str) -> Roadmap:
        return Roadmap(
            user_id=user_id,
            title=self.title,
            skill=self.skill,
            description=self.description,
            difficulty=self.difficulty,
            estimated_hours=self.estimated_hours,
            steps=list(self.steps),
            is_active=True,
            ai_generated=True,
        )
