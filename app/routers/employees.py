"""
PayDesk - Employees Router

API endpoints for employee accounts.

POST creates the identity principal and the employee record as one unit;
see EmployeeAccountService for the compensation rules.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_user, require_admin, require_staff_manager
from app.models.user import User
from app.schemas.employee import (
    EmployeeAccountResponse,
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
)
from app.services.employee_account_service import EmployeeAccountService
from app.services.employee_service import EmployeeService


router = APIRouter()


@router.post(
    "",
    response_model=EmployeeAccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an employee account",
    description="Create the login principal and the employee record. Admin or manager of the company only.",
)
async def create_employee(
    data: EmployeeCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    user, employee = await EmployeeAccountService(db).create_employee_account(current_user, data)
    return EmployeeAccountResponse(user_id=user.id, employee_id=employee.employee_id)


@router.get("", response_model=EmployeeListResponse, summary="List employees")
async def list_employees(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    employees = await EmployeeService(db).list_employees(current_user)
    return EmployeeListResponse(
        employees=[EmployeeResponse.model_validate(e) for e in employees],
        total=len(employees),
    )


@router.get("/{employee_id}", response_model=EmployeeResponse, summary="Get an employee")
async def get_employee(
    employee_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return await EmployeeService(db).get_employee(current_user, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeResponse, summary="Update an employee")
async def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    current_user: User = Depends(require_staff_manager),
    db: AsyncSession = Depends(get_async_session),
):
    return await EmployeeService(db).update_employee(
        current_user.company_id,
        employee_id,
        updated_by_id=current_user.id,
        principal=current_user,
        **data.model_dump(exclude_unset=True),
    )


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an employee",
    description="Hard delete. Also removes the employee's transactions and login. Admin only.",
)
async def delete_employee(
    employee_id: str,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    await EmployeeService(db).delete_employee(current_user.company_id, employee_id)
