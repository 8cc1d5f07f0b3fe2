"""
PayDesk - User Model

Identity principals. A user belongs to exactly one company and carries the
role used for authorization:

- admin: full access to their company, including deletes and settings
- manager: manages employees, transactions and payslips
- employee: read access to their own employee record, transactions and payslips
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class UserRole(str, Enum):
    """Company-level user roles."""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


# Roles allowed to manage employees, transactions and payslips
STAFF_MANAGER_ROLES = (UserRole.ADMIN, UserRole.MANAGER)


class User(BaseModel):
    """Identity principal used for authentication and authorization."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole),
        default=UserRole.EMPLOYEE,
        nullable=False,
    )
    company_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Business employee id when the principal is linked to an employee record
    employee_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def can_manage_staff(self) -> bool:
        """Check if the user may manage employees and transactions."""
        return self.role in STAFF_MANAGER_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
