"""
PayDesk - Employee Account Service

Creates an employee together with the identity principal they log in with.

Steps, executed as one logical unit:
1. Caller must be an admin or manager of the target company; only an
   admin may create another admin
2. employee_id and email must be unused
3. Create the identity principal (committed on its own)
4. Create the employee record
5. If step 4 fails, delete the principal created in step 3

There is no transaction spanning the identity store and the employee
records, so step 5 is an explicit compensating action.
"""

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payroll import Employee
from app.models.user import User, UserRole
from app.schemas.employee import EmployeeCreate
from app.services.auth_service import AuthService
from app.services.change_feed import ChangeAction, Collection, publish_change
from app.services.employee_service import EmployeeService, employee_to_dict
from app.utils.error_handling import (
    AuthorizationException,
    DependencyFailureException,
    DuplicateEntryException,
)

logger = logging.getLogger(__name__)


class EmployeeAccountService:
    """Service for paired principal + employee creation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.auth_service = AuthService(db)
        self.employee_service = EmployeeService(db)

    def authorize(self, principal: User, company_id: str, role: UserRole = UserRole.EMPLOYEE) -> None:
        """Caller must manage staff in the same company. Only admins create admins."""
        if principal.company_id != company_id or not principal.can_manage_staff:
            logger.warning(
                f"Permission denied for user {principal.id} creating employee "
                f"in company {company_id}"
            )
            raise AuthorizationException("Permission denied.")
        if role == UserRole.ADMIN and not principal.is_admin:
            logger.warning(f"User {principal.id} attempted to create an admin account")
            raise AuthorizationException(
                "Only admins can grant the admin role.", required_permission="admin"
            )

    async def check_duplicates(self, company_id: str, data: EmployeeCreate) -> None:
        """Raise DuplicateEntryException before anything is written."""
        if await self.employee_service.employee_id_exists(company_id, data.employee_id):
            raise DuplicateEntryException("Employee", "employee_id", data.employee_id)
        if await self.employee_service.email_exists(company_id, data.email):
            raise DuplicateEntryException("Employee", "email", data.email)
        if await self.auth_service.get_user_by_email(data.email):
            raise DuplicateEntryException("User", "email", data.email)

    async def create_employee_account(
        self,
        principal: User,
        data: EmployeeCreate,
    ) -> Tuple[User, Employee]:
        """
        Create principal and employee record.

        Returns:
            Tuple of (User, Employee)

        Raises:
            AuthorizationException: caller is not staff manager of the company
            DuplicateEntryException: employee_id or email already in use
            DependencyFailureException: the employee write failed; the
                principal has been removed again
        """
        company_id = data.company_id or principal.company_id
        self.authorize(principal, company_id, data.role)
        await self.check_duplicates(company_id, data)

        user = await self.auth_service.create_principal(
            email=data.email,
            password=data.password,
            name=data.name,
            role=data.role,
            company_id=company_id,
            employee_id=data.employee_id,
        )

        # rollback expires loaded instances
        user_id = user.id
        created_by_id = principal.id

        try:
            employee = await self._insert_employee(company_id, user_id, data, created_by_id)
        except Exception as e:
            await self.db.rollback()
            compensated = await self._compensate(user_id)
            logger.error(
                f"Employee record write failed for {data.employee_id} in company "
                f"{company_id}; principal {user_id} "
                f"{'removed' if compensated else 'could NOT be removed'}",
                exc_info=e,
            )
            raise DependencyFailureException(
                "creating the employee",
                original_error=e,
                compensated=compensated,
            ) from e

        logger.info(f"Created employee {employee.employee_id} with principal {user_id}")
        await publish_change(
            Collection.EMPLOYEES,
            ChangeAction.CREATED,
            company_id,
            employee.id,
            data=employee_to_dict(employee),
            employee_id=employee.employee_id,
        )
        return user, employee

    async def _insert_employee(
        self,
        company_id: str,
        user_id: str,
        data: EmployeeCreate,
        created_by_id: str,
    ) -> Employee:
        employee = Employee(
            company_id=company_id,
            user_id=user_id,
            employee_id=data.employee_id,
            name=data.name,
            email=data.email.lower(),
            job_title=data.job_title,
            employment_type=data.employment_type,
            salary=data.salary,
            bank_name=data.bank_name,
            account_number=data.account_number,
            role=data.role,
            created_by_id=created_by_id,
        )
        self.db.add(employee)
        await self.db.commit()
        await self.db.refresh(employee)
        return employee

    async def _compensate(self, user_id: str) -> bool:
        """Delete the orphaned principal. Returns False if that fails too."""
        try:
            return await self.auth_service.delete_principal(user_id)
        except Exception as cleanup_error:
            await self.db.rollback()
            logger.error(f"Cleanup failed for principal {user_id}: {cleanup_error}")
            return False
