"""
PayDesk - Employee Service

Employee reads, edits and deletes scoped to a company. Employee-role
principals only ever see their own record.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payroll import Employee, EmploymentType, PayrollTransaction
from app.models.user import User, UserRole
from app.services.auth_service import AuthService
from app.services.change_feed import ChangeAction, Collection, publish_change
from app.utils.error_handling import (
    AuthorizationException,
    DuplicateEntryException,
    EmployeeNotFoundException,
)

logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = (
    "name",
    "email",
    "job_title",
    "employment_type",
    "salary",
    "bank_name",
    "account_number",
    "role",
)


def employee_to_dict(employee: Employee) -> Dict[str, Any]:
    """Change-feed payload for an employee."""
    return {
        "id": employee.id,
        "employee_id": employee.employee_id,
        "name": employee.name,
        "email": employee.email,
        "job_title": employee.job_title,
        "employment_type": EmploymentType(employee.employment_type).value,
        "salary": str(employee.salary),
        "role": UserRole(employee.role).value,
    }


class EmployeeService:
    """Service for employee operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_employee_id(self, company_id: str, employee_id: str) -> Employee:
        """Get an employee by business id or raise EmployeeNotFoundException."""
        result = await self.db.execute(
            select(Employee).where(
                Employee.company_id == company_id,
                Employee.employee_id == employee_id,
            )
        )
        employee = result.scalar_one_or_none()
        if not employee:
            raise EmployeeNotFoundException(employee_id)
        return employee

    async def employee_id_exists(self, company_id: str, employee_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(Employee.id)).where(
                Employee.company_id == company_id,
                Employee.employee_id == employee_id,
            )
        )
        return result.scalar() > 0

    async def email_exists(self, company_id: str, email: str) -> bool:
        result = await self.db.execute(
            select(func.count(Employee.id)).where(
                Employee.company_id == company_id,
                func.lower(Employee.email) == email.strip().lower(),
            )
        )
        return result.scalar() > 0

    # ===========================================
    # PRINCIPAL-SCOPED READS
    # ===========================================

    async def list_employees(self, principal: User) -> List[Employee]:
        """Company employees ordered by name; only their own for employee role."""
        query = select(Employee).where(Employee.company_id == principal.company_id)
        if not principal.can_manage_staff:
            query = query.where(Employee.employee_id == principal.employee_id)

        result = await self.db.execute(query.order_by(Employee.name, Employee.employee_id))
        return list(result.scalars().all())

    async def get_employee(self, principal: User, employee_id: str) -> Employee:
        """Get an employee visible to the principal."""
        if not principal.can_manage_staff and principal.employee_id != employee_id:
            raise AuthorizationException("You can only view your own employee record")
        return await self.get_by_employee_id(principal.company_id, employee_id)

    # ===========================================
    # WRITES
    # ===========================================

    async def update_employee(
        self,
        company_id: str,
        employee_id: str,
        updated_by_id: str = None,
        principal: Optional[User] = None,
        **kwargs,
    ) -> Employee:
        """
        Update employee fields.

        Only an admin principal may grant the admin role or change the role
        of an admin. Email changes are checked against every login, not just
        this company's employees.

        Name changes need no fan-out: transactions resolve the name through
        the employee at read time.
        """
        employee = await self.get_by_employee_id(company_id, employee_id)

        new_role = kwargs.get("role")
        if new_role is not None and UserRole(new_role) != UserRole(employee.role):
            touches_admin = UserRole.ADMIN in (UserRole(new_role), UserRole(employee.role))
            if touches_admin and (principal is None or not principal.is_admin):
                logger.warning(
                    f"Role change to {UserRole(new_role).value} for employee {employee_id} "
                    f"denied to user {updated_by_id}"
                )
                raise AuthorizationException(
                    "Only admins can grant or revoke the admin role.",
                    required_permission="admin",
                )

        new_email = kwargs.get("email")
        if new_email:
            new_email = kwargs["email"] = new_email.strip().lower()
        if new_email and new_email != employee.email.lower():
            if await self.email_exists(company_id, new_email):
                raise DuplicateEntryException("Employee", "email", new_email)
            existing = await AuthService(self.db).get_user_by_email(new_email)
            if existing and existing.id != employee.user_id:
                raise DuplicateEntryException("User", "email", new_email)

        for field in UPDATABLE_FIELDS:
            value = kwargs.get(field)
            if value is not None:
                setattr(employee, field, value)
        employee.updated_by_id = updated_by_id

        # Keep the linked principal's role, name and login email in step
        if employee.user_id:
            user = await self.db.get(User, employee.user_id)
            if user:
                if kwargs.get("role") is not None:
                    user.role = kwargs["role"]
                if kwargs.get("name") is not None:
                    user.name = kwargs["name"]
                if new_email:
                    user.email = new_email

        await self.db.commit()
        await self.db.refresh(employee)

        await publish_change(
            Collection.EMPLOYEES,
            ChangeAction.UPDATED,
            company_id,
            employee.id,
            data=employee_to_dict(employee),
            employee_id=employee.employee_id,
        )
        return employee

    async def delete_employee(self, company_id: str, employee_id: str) -> None:
        """
        Hard-delete an employee with their transactions and linked principal.
        """
        employee = await self.get_by_employee_id(company_id, employee_id)
        record_id = employee.id
        user_id = employee.user_id

        await self.db.execute(
            delete(PayrollTransaction).where(PayrollTransaction.employee_ref_id == record_id)
        )
        await self.db.delete(employee)
        if user_id:
            user = await self.db.get(User, user_id)
            if user:
                await self.db.delete(user)

        await self.db.commit()
        logger.info(f"Deleted employee {employee_id} of company {company_id}")

        await publish_change(
            Collection.EMPLOYEES,
            ChangeAction.DELETED,
            company_id,
            record_id,
            employee_id=employee_id,
        )
