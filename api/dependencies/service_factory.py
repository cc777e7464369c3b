"""
Service Factory - API Layer

Creates fully-wired application services from injected dependencies.
Routers import from here, never from application/ constructors directly,
keeping the coupling one-way: api → service_factory → application.
"""
from fastapi import Depends

from application.services.auth_service import AuthService
from application.services.roadmap_generator import RoadmapGenerator
from application.services.roadmap_graph import RoadmapGraphBuilder
from application.services.roadmap_service import RoadmapService

from .dependency_injection import (
    get_password_hasher,
    get_roadmap_generator,
    get_roadmap_store,
    get_token_signer,
    get_user_store,
)

_graph_builder = RoadmapGraphBuilder()


def get_roadmap_service(
    roadmap_store=Depends(get_roadmap_store),
    generator: RoadmapGenerator = Depends(get_roadmap_generator),
) -> RoadmapService:
    """
    Inject into router handlers via:
        service: RoadmapService = Depends(get_roadmap_service)
    """
    return RoadmapService(
        roadmap_store=roadmap_store,
        generator=generator,
        graph_builder=_graph_builder,
    )


def get_auth_service(
    user_store=Depends(get_user_store),
    password_hasher=Depends(get_password_hasher),
    token_signer=Depends(get_token_signer),
) -> AuthService:
    return AuthService(
        user_store=user_store,
        password_hasher=password_hasher,
        token_issuer=token_signer,
    )
