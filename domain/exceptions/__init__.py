"""Domain Exceptions - Clean Architecture Domain Layer"""
from .domain_exceptions import (
    DomainError,
    ValidationFailedError,
    BusinessRuleViolation,
    CircularDependencyError,
    EntityNotFoundError,
    RoadmapNotFoundError,
    StepNotFoundError,
    DuplicateEntityError,
    UnauthenticatedError,
    UpstreamGenerationFailed,
)

__all__ = [
    "DomainError",
    "ValidationFailedError",
    "BusinessRuleViolation",
    "CircularDependencyError",
    "EntityNotFoundError",
    "RoadmapNotFoundError",
    "StepNotFoundError",
    "DuplicateEntityError",
    "UnauthenticatedError",
    "UpstreamGenerationFailed",
]
