"""
Roadmap Router - /api/roadmaps

POST   /roadmaps                              → generate and store a roadmap
GET    /roadmaps                              → caller's active roadmaps, newest first
GET    /roadmaps/stats                        → dashboard aggregates
GET    /roadmaps/{roadmap_id}                 → one roadmap
GET    /roadmaps/{roadmap_id}/graph           → node/edge view for the diagram
PUT    /roadmaps/{roadmap_id}/steps/{step_id} → set a step's completed flag
POST   /roadmaps/{roadmap_id}/steps/{step_id}/resources → generate extra resources
DELETE /roadmaps/{roadmap_id}                 → soft delete

Every route requires a bearer token. Domain errors propagate to
api/middleware/error_handler.py.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from api.dependencies.auth import get_current_user_id
from api.dependencies.service_factory import get_roadmap_service
from api.schemas.common_schemas import ApiResponse, ok
from api.schemas.roadmap_schemas import CreateRoadmapRequest, UpdateStepRequest
from application.dto.roadmap_request import RoadmapIntent
from application.services.roadmap_service import RoadmapService

router = APIRouter(prefix="/roadmaps")


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a new roadmap",
)
def create_roadmap(
    body: CreateRoadmapRequest,
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    intent = RoadmapIntent(
        skill=body.skill,
        current_level=body.current_level,
        target_outcome=body.target_outcome,
        hours_per_week=body.hours_per_week,
    )
    roadmap = service.create(user_id, intent)
    return ok("Roadmap created successfully", roadmap=roadmap.to_dict())


@router.get("", response_model=ApiResponse, summary="List the caller's roadmaps")
def list_roadmaps(
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    roadmaps = service.list_for_user(user_id)
    return ok("Roadmaps retrieved successfully", roadmaps=[r.to_dict() for r in roadmaps])


# Declared before /{roadmap_id} so "stats" is not taken for an id
@router.get("/stats", response_model=ApiResponse, summary="Roadmap statistics")
def roadmap_stats(
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    return ok("Stats retrieved successfully", stats=service.stats_for_user(user_id).to_dict())


@router.get("/{roadmap_id}", response_model=ApiResponse, summary="Get one roadmap")
def get_roadmap(
    roadmap_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    roadmap = service.get_by_id(user_id, roadmap_id)
    return ok("Roadmap retrieved successfully", roadmap=roadmap.to_dict())


@router.get("/{roadmap_id}/graph", response_model=ApiResponse, summary="Roadmap diagram data")
def get_roadmap_graph(
    roadmap_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    return ok("Roadmap graph retrieved successfully", graph=service.get_graph(user_id, roadmap_id))


@router.put(
    "/{roadmap_id}/steps/{step_id}",
    response_model=ApiResponse,
    summary="Mark a step complete or incomplete",
)
def update_step(
    roadmap_id: str,
    step_id: str,
    body: UpdateStepRequest,
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    roadmap = service.set_step_completion(user_id, roadmap_id, step_id, body.completed)
    return ok("Step updated successfully", roadmap=roadmap.to_dict())


@router.post(
    "/{roadmap_id}/steps/{step_id}/resources",
    response_model=ApiResponse,
    summary="Generate additional resources for a step",
)
def add_step_resources(
    roadmap_id: str,
    step_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    added = service.augment_step_resources(user_id, roadmap_id, step_id)
    return ok("Resources generated successfully", resources=[r.to_dict() for r in added])


@router.delete("/{roadmap_id}", response_model=ApiResponse, summary="Delete a roadmap")
def delete_roadmap(
    roadmap_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
):
    service.soft_delete(user_id, roadmap_id)
    return ok("Roadmap deleted successfully")
