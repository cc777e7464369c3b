"""Domain Entities - Clean Architecture Domain Layer"""
from .roadmap import Difficulty, Resource, Roadmap, Step, calculate_progress
from .user import User

__all__ = ["Difficulty", "Resource", "Roadmap", "Step", "User", "calculate_progress"]
