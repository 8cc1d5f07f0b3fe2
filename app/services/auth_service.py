"""
PayDesk - Authentication Service

Identity provider operations:
- authenticate(email, password) -> principal
- verify_token(token) -> principal
- create_principal / delete_principal (used by employee account creation)
- company onboarding (company + admin principal)

Principals are committed on their own, separately from the employee records
that reference them, so callers that pair the two must compensate on failure.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company, Currency
from app.models.user import User, UserRole
from app.services.change_feed import ChangeAction, Collection, publish_change
from app.services.company_service import CompanyService
from app.utils.error_handling import (
    AuthorizationException,
    DuplicateEntryException,
    ErrorCode,
    InvalidCredentialsException,
    TokenInvalidException,
    ValidationException,
)
from app.utils.security import (
    create_access_token,
    get_password_hash,
    verify_access_token,
    verify_password,
)

logger = logging.getLogger(__name__)


MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    # ===========================================
    # AUTHENTICATION
    # ===========================================

    async def authenticate(self, email: str, password: str) -> User:
        """
        Authenticate a principal with email and password.

        Raises:
            InvalidCredentialsException: unknown email or wrong password
            AuthorizationException: principal is deactivated
        """
        user = await self.get_user_by_email(email)

        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {email}")
            raise InvalidCredentialsException()

        if not user.is_active:
            raise AuthorizationException("User account is deactivated", code=ErrorCode.ACCOUNT_DISABLED)

        return user

    async def verify_token(self, token: str) -> User:
        """
        Resolve a bearer token to its principal.

        Raises:
            TokenInvalidException: bad, expired or orphaned token
        """
        payload = verify_access_token(token)
        if not payload or not payload.get("sub"):
            raise TokenInvalidException()

        user = await self.get_user_by_id(payload["sub"])
        if not user:
            raise TokenInvalidException("User not found")
        if not user.is_active:
            raise AuthorizationException("User account is deactivated", code=ErrorCode.ACCOUNT_DISABLED)
        return user

    def create_token(self, user: User) -> str:
        """Issue an access token for a principal."""
        return create_access_token({
            "sub": user.id,
            "company_id": user.company_id,
            "role": UserRole(user.role).value,
        })

    # ===========================================
    # PRINCIPALS
    # ===========================================

    async def create_principal(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
        company_id: str,
        employee_id: Optional[str] = None,
    ) -> User:
        """
        Create and commit an identity principal.

        Raises:
            ValidationException: password too short
            DuplicateEntryException: email already registered
        """
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
        if await self.get_user_by_email(email):
            raise DuplicateEntryException("User", "email", email)

        user = User(
            email=email.strip().lower(),
            hashed_password=get_password_hash(password),
            name=name,
            role=role,
            company_id=company_id,
            employee_id=employee_id,
            is_active=True,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Created principal {user.id} ({user.email}) in company {company_id}")
        await publish_change(Collection.USERS, ChangeAction.CREATED, company_id, user.id)
        return user

    async def delete_principal(self, user_id: str) -> bool:
        """
        Delete an identity principal and commit.

        Returns:
            True if a principal was deleted
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            return False

        company_id = user.company_id
        await self.db.delete(user)
        await self.db.commit()

        logger.info(f"Deleted principal {user_id}")
        await publish_change(Collection.USERS, ChangeAction.DELETED, company_id, user_id)
        return True

    # ===========================================
    # ONBOARDING
    # ===========================================

    async def register_company(
        self,
        company_name: str,
        name: str,
        email: str,
        password: str,
        currency: Optional[Currency] = None,
    ) -> Tuple[User, Company]:
        """
        Onboard a new company and its first admin principal in one commit.

        Returns:
            Tuple of (User, Company)
        """
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
        if await self.get_user_by_email(email):
            raise DuplicateEntryException("User", "email", email)

        company = await CompanyService(self.db).create_company(
            company_name, currency=currency, commit=False
        )

        user = User(
            email=email.strip().lower(),
            hashed_password=get_password_hash(password),
            name=name,
            role=UserRole.ADMIN,
            company_id=company.id,
            is_active=True,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(company)
        await self.db.refresh(user)

        logger.info(f"Registered company {company.id} with admin {user.email}")
        await publish_change(Collection.COMPANIES, ChangeAction.CREATED, company.id, company.id)
        return user, company
