"""
PayDesk - Company Service

Company onboarding and payroll settings:
- Creation with defaults (currency, tax rate, pension contribution, branding)
- Currency, tax and branding edits
- Recurring contribution add/edit/delete
"""

import logging
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.company import Company, Currency
from app.services.change_feed import ChangeAction, Collection, publish_change
from app.utils.error_handling import (
    CompanyNotFoundException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


DEFAULT_CONTRIBUTION_ID = "pension"


def default_branding(name: str) -> Dict[str, str]:
    """Payslip branding seeded at onboarding."""
    slug = re.sub(r"\s+", "", name).lower()
    return {
        "payslip_company_name": name,
        "payslip_company_tagline": f"Payroll for {name}",
        "payslip_company_contact": f"contact@{slug}.com",
    }


def _non_negative(value: Any, field: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationException(f"{field} must be a number", field=field)
    if not number.is_finite() or number < 0:
        raise ValidationException(f"{field} cannot be negative", field=field)
    return number


def company_to_dict(company: Company) -> Dict[str, Any]:
    """Change-feed payload for a company."""
    return {
        "id": company.id,
        "name": company.name,
        "currency": Currency(company.currency).value,
        "tax_rate": str(company.tax_rate),
        "flat_tax_amount": (
            str(company.flat_tax_amount) if company.flat_tax_amount is not None else None
        ),
        "recurring_contributions": list(company.recurring_contributions or []),
    }


class CompanyService:
    """Service for company settings operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ===========================================
    # COMPANY
    # ===========================================

    async def create_company(
        self,
        name: str,
        currency: Optional[Currency] = None,
        commit: bool = True,
    ) -> Company:
        """
        Create a company with onboarding defaults.

        Defaults: currency USD, tax rate 20, one "Pension Fund" contribution
        at 5% and branding derived from the name.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationException("Company name is required", field="name")

        company = Company(
            name=name,
            currency=currency or Currency(settings.default_currency),
            tax_rate=settings.default_tax_rate,
            flat_tax_amount=None,
            recurring_contributions=[
                {
                    "id": DEFAULT_CONTRIBUTION_ID,
                    "name": settings.default_contribution_name,
                    "percentage": float(settings.default_contribution_percentage),
                }
            ],
            **default_branding(name),
        )
        self.db.add(company)
        await self.db.flush()

        if commit:
            await self.db.commit()
            await self.db.refresh(company)
            await self._publish(company, ChangeAction.CREATED)

        logger.info(f"Created company {company.id} ({company.name})")
        return company

    async def get_company(self, company_id: str) -> Company:
        """Get a company or raise CompanyNotFoundException."""
        result = await self.db.execute(
            select(Company).where(Company.id == company_id)
        )
        company = result.scalar_one_or_none()
        if not company:
            raise CompanyNotFoundException(company_id)
        return company

    async def update_company(self, company_id: str, **kwargs) -> Company:
        """
        Update company settings.

        Accepts name, currency, tax_rate, flat_tax_amount and the payslip
        branding fields. A flat_tax_amount of None clears the override.
        """
        company = await self.get_company(company_id)

        if "name" in kwargs and kwargs["name"] is not None:
            name = kwargs["name"].strip()
            if not name:
                raise ValidationException("Company name is required", field="name")
            company.name = name
        if kwargs.get("currency") is not None:
            company.currency = Currency(kwargs["currency"])
        if kwargs.get("tax_rate") is not None:
            company.tax_rate = _non_negative(kwargs["tax_rate"], "tax_rate")
        if "flat_tax_amount" in kwargs:
            value = kwargs["flat_tax_amount"]
            company.flat_tax_amount = (
                _non_negative(value, "flat_tax_amount") if value is not None else None
            )
        for field in ("payslip_company_name", "payslip_company_tagline", "payslip_company_contact"):
            if kwargs.get(field) is not None:
                setattr(company, field, kwargs[field])

        await self.db.commit()
        await self.db.refresh(company)
        await self._publish(company, ChangeAction.UPDATED)
        return company

    # ===========================================
    # RECURRING CONTRIBUTIONS
    # ===========================================

    async def add_contribution(
        self,
        company_id: str,
        name: str,
        percentage: Any,
    ) -> Dict[str, Any]:
        """Append a recurring contribution with a fresh id."""
        company = await self.get_company(company_id)
        name = (name or "").strip()
        if not name:
            raise ValidationException("Contribution name is required", field="name")

        contribution = {
            "id": str(uuid.uuid4()),
            "name": name,
            "percentage": float(_non_negative(percentage, "percentage")),
        }
        # Reassign so the JSON column is flagged dirty
        company.recurring_contributions = [*(company.recurring_contributions or []), contribution]

        await self.db.commit()
        await self.db.refresh(company)
        await self._publish(company, ChangeAction.UPDATED)
        return contribution

    async def edit_contribution(
        self,
        company_id: str,
        contribution_id: str,
        name: Optional[str] = None,
        percentage: Optional[Any] = None,
    ) -> Dict[str, Any]:
        """Rename and/or re-rate a contribution, keeping its id and position."""
        company = await self.get_company(company_id)
        contributions: List[Dict[str, Any]] = [
            dict(item) for item in (company.recurring_contributions or [])
        ]

        for item in contributions:
            if item["id"] == contribution_id:
                if name is not None:
                    if not name.strip():
                        raise ValidationException("Contribution name is required", field="name")
                    item["name"] = name.strip()
                if percentage is not None:
                    item["percentage"] = float(_non_negative(percentage, "percentage"))
                updated = item
                break
        else:
            raise NotFoundException("Contribution", contribution_id)

        company.recurring_contributions = contributions
        await self.db.commit()
        await self.db.refresh(company)
        await self._publish(company, ChangeAction.UPDATED)
        return updated

    async def delete_contribution(self, company_id: str, contribution_id: str) -> None:
        """Remove a contribution by id."""
        company = await self.get_company(company_id)
        contributions = list(company.recurring_contributions or [])
        remaining = [item for item in contributions if item["id"] != contribution_id]
        if len(remaining) == len(contributions):
            raise NotFoundException("Contribution", contribution_id)

        company.recurring_contributions = remaining
        await self.db.commit()
        await self.db.refresh(company)
        await self._publish(company, ChangeAction.UPDATED)

    async def _publish(self, company: Company, action: ChangeAction) -> None:
        await publish_change(
            Collection.COMPANIES,
            action,
            company_id=company.id,
            record_id=company.id,
            data=company_to_dict(company),
        )
