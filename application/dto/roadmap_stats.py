"""
Roadmap Stats DTO - Application Layer

Dashboard aggregates over a user's active roadmaps.
"""
from dataclasses import dataclass
from typing import Dict, List

from domain.entities.roadmap import Roadmap


@dataclass
class RoadmapStats:
    total_roadmaps: int = 0
    total_steps: int = 0
    completed_steps: int = 0
    total_hours: int = 0
    average_progress: int = 0

    @classmethod
    def from_roadmaps(cls, roadmaps: List[Roadmap]) -> "RoadmapStats":
        count = len(roadmaps)
        progress_sum = sum(r.progress for r in roadmaps)
        return cls(
            total_roadmaps=count,
            total_steps=sum(r.total_steps for r in roadmaps),
            completed_steps=sum(r.completed_steps for r in roadmaps),
            total_hours=sum(r.estimated_hours for r in roadmaps),
            # Half-up rounding of the mean, 0 when there is nothing to average
            average_progress=(2 * progress_sum + count) // (2 * count) if count else 0,
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalRoadmaps": self.total_roadmaps,
            "totalSteps": self.total_steps,
            "completedSteps": self.completed_steps,
            "totalHours": self.total_hours,
            "averageProgress": self.average_progress,
        }
