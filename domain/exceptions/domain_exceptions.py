"""
Domain Exceptions - Clean Architecture Domain Layer

Defines all exceptions that can be raised by domain entities and application
services. These exceptions encode business rule violations and data invariant
failures. The domain layer raises ONLY these exceptions, never HTTPException.
"""
from typing import Dict, List, Optional


class DomainError(Exception):
    """Base class for all domain exceptions.

    The API layer catches every DomainError subclass in one place and maps
    it to an HTTP status code and the standard response envelope.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationFailedError(DomainError):
    """Raised when input fails validation.

    Carries every offending field at once so the caller can fix them in a
    single round trip.

    Example:
        raise ValidationFailedError({"hoursPerWeek": "must be between 1 and 168"})

    Maps to HTTP 400 Bad Request.
    """

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(self.errors)
        super().__init__(f"Validation failed for: {fields}")


class BusinessRuleViolation(DomainError):
    """Raised when a business rule or aggregate invariant is violated.

    Maps to HTTP 409 Conflict.
    """

    def __init__(self, message: str, rule: Optional[str] = None) -> None:
        self.rule = rule
        super().__init__(message)


class CircularDependencyError(DomainError):
    """Raised when step prerequisites form a cycle.

    Args:
        cycle: Ordered list of step ids forming the cycle.

    Example:
        raise CircularDependencyError(["step_1", "step_2", "step_1"])

    Maps to HTTP 409 Conflict.
    """

    def __init__(self, cycle: List[str]) -> None:
        self.cycle = cycle
        cycle_repr = " → ".join(cycle)
        super().__init__(f"Circular dependency detected: {cycle_repr}")


class EntityNotFoundError(DomainError):
    """Raised when a referenced entity does not exist.

    Maps to HTTP 404 Not Found.
    """

    def __init__(self, entity_type: str, message: Optional[str] = None) -> None:
        self.entity_type = entity_type
        super().__init__(message or f"{entity_type} not found")


class RoadmapNotFoundError(EntityNotFoundError):
    """Roadmap is missing, owned by someone else, or soft-deleted.

    The three cases share one message so callers cannot probe for the
    existence of other users' roadmaps.
    """

    def __init__(self) -> None:
        super().__init__("Roadmap", "Roadmap not found")


class StepNotFoundError(EntityNotFoundError):
    """Step id does not exist inside an otherwise accessible roadmap."""

    def __init__(self, step_id: str) -> None:
        self.step_id = step_id
        super().__init__("Step", "Step not found")


class DuplicateEntityError(DomainError):
    """Raised when an entity already exists and duplicates are not allowed.

    Example:
        raise DuplicateEntityError("User", "alice@example.com")

    Maps to HTTP 400 Bad Request.
    """

    def __init__(self, entity_type: str, identifier: str) -> None:
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} with this identifier already exists")


class UnauthenticatedError(DomainError):
    """Missing, malformed, expired or forged credential. Maps to HTTP 401."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message)


class UpstreamGenerationFailed(DomainError):
    """The language model call failed or returned an unusable payload.

    Internal to the generation adapter: it is always converted into a
    fallback result and never reaches the API layer.
    """
