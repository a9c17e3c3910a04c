"""
Authentication Dependencies

FastAPI dependencies resolving the request identity. Role checks live in
the application workflow so every caller gets the same gate.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.services.auth_service import AuthService
from app.services.container import ServiceContainer
from app.utils.exceptions import Unauthorized
from app.utils.logger import get_logger

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    """Get the service container built at startup"""
    return request.app.state.container


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> AuthService:
    """Get auth service instance"""
    return container.auth_service


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """
    Get current authenticated user from a Bearer token or the auth cookie.

    Raises:
        Unauthorized: If token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else None
    if not token:
        token = request.cookies.get(auth_service.config.auth.cookie_name)

    user = auth_service.resolve_identity(token)
    if not user:
        raise Unauthorized("User not authenticated", "Auth")

    logger.debug(f"[Auth] Authenticated user {user['id']} with role {user['role']}")
    return user
