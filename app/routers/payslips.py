"""
PayDesk - Payslips Router

API endpoints for payslip preview, PDF export and AI narration.
"""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.payslip import (
    PayslipData,
    PayslipNarrativeResponse,
    PayslipRequest,
    PayslipResponse,
)
from app.services.payroll_aggregator import PayPeriod
from app.services.payslip_narrator import PayslipNarrator, get_payslip_narrator
from app.services.payslip_pdf_service import (
    PayslipPDFService,
    get_payslip_pdf_service,
    payslip_filename,
)
from app.services.payslip_service import GeneratedPayslip, PayslipService


router = APIRouter()


def _period(request: PayslipRequest) -> PayPeriod:
    today = date.today()
    return PayPeriod(
        month=request.month or today.month,
        year=request.year or today.year,
    )


def _payslip_data(generated: GeneratedPayslip) -> PayslipData:
    data = asdict(generated.payslip)
    data.pop("period", None)
    return PayslipData(**data)


async def _generate(
    request: PayslipRequest,
    current_user: User,
    db: AsyncSession,
) -> GeneratedPayslip:
    return await PayslipService(db).generate(
        current_user,
        request.employee_id,
        period=_period(request),
        days_worked=request.days_worked,
    )


@router.post("/generate", response_model=PayslipResponse, summary="Generate a payslip")
async def generate_payslip(
    request: PayslipRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Structured payslip plus the canonical text document."""
    generated = await _generate(request, current_user, db)
    return PayslipResponse(
        payslip=_payslip_data(generated),
        text=generated.text,
        filename=payslip_filename(generated.payslip),
    )


@router.post(
    "/pdf",
    summary="Download a payslip PDF",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def download_payslip_pdf(
    request: PayslipRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    pdf_service: PayslipPDFService = Depends(get_payslip_pdf_service),
):
    """The payslip text rendered verbatim in a fixed-width font."""
    generated = await _generate(request, current_user, db)
    filename = payslip_filename(generated.payslip)
    pdf_bytes = pdf_service.generate_pdf(generated.text, title=filename[:-4])
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/narrative",
    response_model=PayslipNarrativeResponse,
    summary="Narrate a payslip",
    description="AI-phrased payslip when enabled; otherwise the standard payslip text.",
)
async def narrate_payslip(
    request: PayslipRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    narrator: PayslipNarrator = Depends(get_payslip_narrator),
):
    generated = await _generate(request, current_user, db)
    narrative = await narrator.narrate(generated.payslip)
    return PayslipNarrativeResponse(
        payslip=_payslip_data(generated),
        text=narrative.text,
        source=narrative.source,
    )
