"""Application services"""
from .auth_service import AuthService, AuthSession
from .roadmap_generator import RoadmapGenerator
from .roadmap_graph import RoadmapGraphBuilder
from .roadmap_service import RoadmapService

__all__ = [
    "AuthService",
    "AuthSession",
    "RoadmapGenerator",
    "RoadmapGraphBuilder",
    "RoadmapService",
]
