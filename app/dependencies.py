"""
PayDesk - FastAPI Dependencies

Shared dependencies for authentication, database sessions, and RBAC.

This module provides dependency injection for:
1. Database sessions
2. Current principal authentication (bearer token)
3. Company role-based access control
"""

from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.models.user import User, UserRole, STAFF_MANAGER_ROLES
from app.services.auth_service import AuthService
from app.utils.error_handling import (
    AuthenticationException,
    AuthorizationException,
)


# HTTP Bearer token security
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Get the current authenticated principal from the bearer token.

    Raises:
        AuthenticationException: no token supplied
        TokenInvalidException: token invalid, expired or orphaned
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationException("Not authenticated")

    user = await AuthService(db).verify_token(credentials.credentials)
    if not user.company_id:
        raise AuthorizationException("User is not attached to a company")
    return user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for company role-based access control.

    Usage:
        @router.delete("/{employee_id}")
        async def delete_endpoint(user: User = Depends(require_role([UserRole.ADMIN]))):
            ...
    """
    async def role_checker(
        current_user: User = Depends(get_current_user),
    ) -> User:
        if current_user.role not in allowed_roles:
            raise AuthorizationException(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}",
                required_permission=",".join(r.value for r in allowed_roles),
            )
        return current_user

    return role_checker


# Shortcuts
require_staff_manager = require_role(list(STAFF_MANAGER_ROLES))
require_admin = require_role([UserRole.ADMIN])
