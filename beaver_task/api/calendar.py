from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_calendar_service
from ..services.calendar_service import CalendarService
from ..shared.models import CalendarEvent

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/events", response_model=List[CalendarEvent])
async def calendar_events(service: CalendarService = Depends(get_calendar_service)):
    """
    События календаря: сроки задач и проектов, выполненные привычки,
    сессии помодоро
    """
    try:
        return await service.events()
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения событий календаря: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch calendar events")
