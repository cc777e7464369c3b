"""
Auth Dependency - API Layer

get_current_user_id resolves ``Authorization: Bearer <token>`` to a user id
or raises UnauthenticatedError (rendered as a 401 envelope).
"""
from typing import Optional

from fastapi import Depends, Header, Request

from application.services.auth_service import AuthService
from domain.exceptions.domain_exceptions import UnauthenticatedError

from .service_factory import get_auth_service


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthenticatedError("Not authorized, no token")
    return token.strip()


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    user_id = auth_service.resolve_user_id(_bearer_token(authorization))
    # Picked up by LoggingMiddleware
    request.state.user_id = user_id
    return user_id
