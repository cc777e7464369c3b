"""
Roadmap Schemas - API Layer
Pydantic models for roadmap endpoints. JSON field names are camelCase.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


# ── Requests ──────────────────────────────────────────────────────────────────

class CreateRoadmapRequest(BaseModel):
    """Learner intent for a new roadmap."""
    model_config = ConfigDict(populate_by_name=True)

    skill: str = Field(..., min_length=2, max_length=50, description="Skill to learn")
    current_level: str = Field(
        ..., alias="currentLevel", min_length=2, max_length=100,
        description="Where the learner starts",
    )
    target_outcome: str = Field(
        ..., alias="targetOutcome", min_length=10, max_length=500,
        description="What the learner wants to achieve",
    )
    hours_per_week: int = Field(
        ..., alias="hoursPerWeek", ge=1, le=168, description="Weekly time budget"
    )

    @field_validator("skill", "current_level", "target_outcome", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class UpdateStepRequest(BaseModel):
    """Completion flag for one step; must be a JSON boolean."""
    completed: StrictBool = Field(..., description="New completion state")
