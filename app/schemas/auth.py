"""
PayDesk - Authentication Schemas

Pydantic schemas for onboarding, login and the current principal.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field

from app.models.company import Currency
from app.models.user import UserRole


# ===========================================
# REQUEST SCHEMAS
# ===========================================

class CompanyRegisterRequest(BaseModel):
    """Onboard a company together with its first admin."""
    company_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("company_name", "companyName"),
    )
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    currency: Optional[Currency] = None


class LoginRequest(BaseModel):
    """Email/password login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class UserResponse(BaseModel):
    """Principal response."""
    id: str
    email: str
    name: str
    role: UserRole
    company_id: Optional[str] = None
    employee_id: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Access token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
