"""
Auth Router - /api/auth

POST /auth/signup → create account, returns token
POST /auth/signin → exchange credentials for a token
GET  /auth/me     → profile of the caller
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from api.dependencies.auth import get_current_user_id
from api.dependencies.service_factory import get_auth_service
from api.schemas.auth_schemas import SigninRequest, SignupRequest
from api.schemas.common_schemas import ApiResponse, ok
from application.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


@router.post(
    "/signup",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
def signup(body: SignupRequest, service: AuthService = Depends(get_auth_service)):
    session = service.signup(body.name, body.email, body.password)
    return ok("User registered successfully", token=session.token, user=session.user.profile)


@router.post("/signin", response_model=ApiResponse, summary="Sign in")
def signin(body: SigninRequest, service: AuthService = Depends(get_auth_service)):
    session = service.signin(body.email, body.password)
    return ok("Signed in successfully", token=session.token, user=session.user.profile)


@router.get("/me", response_model=ApiResponse, summary="Current user profile")
def me(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
):
    return ok("User retrieved successfully", user=service.get_profile(user_id).profile)
