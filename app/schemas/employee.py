"""
PayDesk - Employee Schemas

Pydantic schemas for employee account creation, edits and responses.

The account creation body accepts both snake_case and the camelCase names
used by older clients (fullName, employeeId, jobTitle, bankAccountNumber...).
"""

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from app.models.payroll import EmploymentType
from app.models.user import UserRole


# Legacy employment type labels
EMPLOYMENT_TYPE_ALIASES = {
    "salaried": EmploymentType.SALARIED,
    "monthly salary": EmploymentType.SALARIED,
    "monthly": EmploymentType.SALARIED,
    "daily_rate": EmploymentType.DAILY_RATE,
    "daily-rate": EmploymentType.DAILY_RATE,
    "daily rate": EmploymentType.DAILY_RATE,
    "daily wages": EmploymentType.DAILY_RATE,
}


def normalize_employment_type(value: Any) -> Any:
    if isinstance(value, str):
        return EMPLOYMENT_TYPE_ALIASES.get(value.strip().lower(), value)
    return value


# ===========================================
# EMPLOYEE ACCOUNT CREATION
# ===========================================

class EmployeeCreate(BaseModel):
    """Employee account creation request (principal + employee record)."""
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        validation_alias=AliasChoices("name", "full_name", "fullName"),
    )
    employee_id: str = Field(
        ...,
        min_length=1,
        max_length=50,
        validation_alias=AliasChoices("employee_id", "employeeId", "id"),
    )
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    job_title: str = Field(
        ...,
        min_length=1,
        max_length=150,
        validation_alias=AliasChoices("job_title", "jobTitle"),
    )
    role: UserRole = UserRole.EMPLOYEE
    employment_type: EmploymentType = Field(
        EmploymentType.SALARIED,
        validation_alias=AliasChoices("employment_type", "employmentType"),
    )
    salary: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    bank_name: str = Field(
        ...,
        min_length=1,
        max_length=150,
        validation_alias=AliasChoices("bank_name", "bankName"),
    )
    account_number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        validation_alias=AliasChoices("account_number", "accountNumber", "bankAccountNumber"),
    )
    company_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("company_id", "companyId"),
    )

    @field_validator("employment_type", mode="before")
    @classmethod
    def _employment_type(cls, v):
        return normalize_employment_type(v)

    @field_validator("name", "employee_id", "job_title", "bank_name", "account_number")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class EmployeeAccountResponse(BaseModel):
    """Employee account creation result."""
    success: bool = True
    user_id: str
    employee_id: str


# ===========================================
# EMPLOYEE EDIT / READ
# ===========================================

class EmployeeUpdate(BaseModel):
    """Partial employee update. The business employee_id is immutable."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    job_title: Optional[str] = Field(
        None,
        min_length=1,
        max_length=150,
        validation_alias=AliasChoices("job_title", "jobTitle"),
    )
    employment_type: Optional[EmploymentType] = Field(
        None,
        validation_alias=AliasChoices("employment_type", "employmentType"),
    )
    salary: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    bank_name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=150,
        validation_alias=AliasChoices("bank_name", "bankName"),
    )
    account_number: Optional[str] = Field(
        None,
        min_length=1,
        max_length=50,
        validation_alias=AliasChoices("account_number", "accountNumber", "bankAccountNumber"),
    )
    role: Optional[UserRole] = None

    @field_validator("employment_type", mode="before")
    @classmethod
    def _employment_type(cls, v):
        return normalize_employment_type(v)


class EmployeeResponse(BaseModel):
    """Employee response."""
    id: str
    company_id: str
    employee_id: str
    user_id: Optional[str] = None
    name: str
    email: str
    job_title: str
    employment_type: EmploymentType
    salary: Decimal
    bank_name: str
    account_number: str
    role: UserRole

    class Config:
        from_attributes = True


class EmployeeListResponse(BaseModel):
    """Employee list response."""
    employees: List[EmployeeResponse]
    total: int
