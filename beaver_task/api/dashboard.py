from fastapi import APIRouter, Depends, HTTPException
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_dashboard_service
from ..services.dashboard_service import DashboardService
from ..shared.models import DashboardSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(service: DashboardService = Depends(get_dashboard_service)):
    """Счетчики для главной страницы"""
    try:
        return await service.summary()
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения сводки: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard summary")
