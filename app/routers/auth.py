"""
PayDesk - Authentication Router

API endpoints for company onboarding, login and the current principal.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_async_session
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import (
    CompanyRegisterRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
)
from app.services.auth_service import AuthService


router = APIRouter()


def _token_response(service: AuthService, user: User) -> TokenResponse:
    return TokenResponse(
        access_token=service.create_token(user),
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Onboard a company",
    description="Create a company with default payroll settings and its first admin user.",
)
async def register(
    request: CompanyRegisterRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Register a company and its admin, returning an access token."""
    service = AuthService(db)
    user, _company = await service.register_company(
        company_name=request.company_name,
        name=request.name,
        email=request.email,
        password=request.password,
        currency=request.currency,
    )
    return _token_response(service, user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Authenticate with email and password."""
    service = AuthService(db)
    user = await service.authenticate(request.email, request.password)
    return _token_response(service, user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user",
)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated principal."""
    return current_user
