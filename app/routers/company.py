"""
PayDesk - Company Router

API endpoints for company payroll settings and recurring contributions.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_user, require_admin
from app.models.company import Company
from app.models.user import User
from app.schemas.company import (
    CompanyResponse,
    CompanyUpdate,
    ContributionCreate,
    ContributionSchema,
    ContributionUpdate,
)
from app.services.company_service import CompanyService
from app.utils.currency import currency_symbol


router = APIRouter()


def _company_response(company: Company) -> CompanyResponse:
    return CompanyResponse(
        id=company.id,
        name=company.name,
        currency=company.currency,
        currency_symbol=currency_symbol(company.currency),
        tax_rate=company.tax_rate,
        flat_tax_amount=company.flat_tax_amount,
        recurring_contributions=company.recurring_contributions,
        payslip_company_name=company.payslip_company_name,
        payslip_company_tagline=company.payslip_company_tagline,
        payslip_company_contact=company.payslip_company_contact,
    )


@router.get("", response_model=CompanyResponse, summary="Get company settings")
async def get_company(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    company = await CompanyService(db).get_company(current_user.company_id)
    return _company_response(company)


@router.patch("", response_model=CompanyResponse, summary="Update company settings")
async def update_company(
    data: CompanyUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Update currency, tax policy, branding or name. Admin only."""
    company = await CompanyService(db).update_company(
        current_user.company_id,
        **data.model_dump(exclude_unset=True),
    )
    return _company_response(company)


@router.post(
    "/contributions",
    response_model=ContributionSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Add a recurring contribution",
)
async def add_contribution(
    data: ContributionCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await CompanyService(db).add_contribution(
        current_user.company_id, data.name, data.percentage
    )


@router.patch(
    "/contributions/{contribution_id}",
    response_model=ContributionSchema,
    summary="Edit a recurring contribution",
)
async def edit_contribution(
    contribution_id: str,
    data: ContributionUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await CompanyService(db).edit_contribution(
        current_user.company_id,
        contribution_id,
        name=data.name,
        percentage=data.percentage,
    )


@router.delete(
    "/contributions/{contribution_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a recurring contribution",
)
async def delete_contribution(
    contribution_id: str,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    await CompanyService(db).delete_contribution(current_user.company_id, contribution_id)
