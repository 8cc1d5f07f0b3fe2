"""
PayDesk - Dashboard Router
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import require_staff_manager
from app.models.user import User
from app.schemas.dashboard import DashboardResponse
from app.services.dashboard_service import DashboardService


router = APIRouter()


@router.get("", response_model=DashboardResponse, summary="Payroll at a glance")
async def get_dashboard(
    current_user: User = Depends(require_staff_manager),
    db: AsyncSession = Depends(get_async_session),
):
    summary = await DashboardService(db).get_summary(current_user.company_id)
    return DashboardResponse.model_validate(summary)
