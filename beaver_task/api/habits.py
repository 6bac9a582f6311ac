from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_habit_service
from ..services.habit_service import HabitService
from ..shared.models import (
    HabitCreate,
    HabitEntryRead,
    HabitRead,
    HabitToggleRequest,
    HabitUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[HabitRead])
async def list_habits(service: HabitService = Depends(get_habit_service)):
    """
    Привычки со статистикой: серия, отметка за сегодня, неделя, процент
    """
    try:
        return await service.list()
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения привычек: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch habits")


@router.post("", response_model=HabitRead, status_code=status.HTTP_201_CREATED)
async def create_habit(
    data: HabitCreate,
    service: HabitService = Depends(get_habit_service),
):
    try:
        return await service.create(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания привычки: {e}")
        raise HTTPException(status_code=500, detail="Failed to create habit")


@router.get("/{habit_id}", response_model=HabitRead)
async def get_habit(
    habit_id: str,
    service: HabitService = Depends(get_habit_service),
):
    try:
        return await service.get_dict(habit_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения привычки: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch habit")


@router.put("/{habit_id}", response_model=HabitRead)
async def update_habit(
    habit_id: str,
    data: HabitUpdate,
    service: HabitService = Depends(get_habit_service),
):
    try:
        return await service.update(habit_id, data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления привычки: {e}")
        raise HTTPException(status_code=500, detail="Failed to update habit")


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(
    habit_id: str,
    service: HabitService = Depends(get_habit_service),
):
    try:
        await service.delete(habit_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления привычки: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete habit")


@router.post("/{habit_id}/toggle", response_model=HabitRead)
async def toggle_habit(
    habit_id: str,
    data: HabitToggleRequest,
    service: HabitService = Depends(get_habit_service),
):
    """
    Отметить выполнение привычки за сегодня
    """
    try:
        return await service.toggle(habit_id, data.completed)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка отметки привычки: {e}")
        raise HTTPException(status_code=500, detail="Failed to update habit")


@router.get("/{habit_id}/entries", response_model=List[HabitEntryRead])
async def habit_entries(
    habit_id: str,
    days: int = Query(30, ge=1, le=366),
    service: HabitService = Depends(get_habit_service),
):
    try:
        return await service.entries(habit_id, days)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения истории привычки: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch habit entries")
