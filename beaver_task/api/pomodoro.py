from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
import logging

from ..config import BeaverSettings
from ..core.exceptions import BadRequestError, BeaverError
from ..core.models import User
from ..dependencies import (
    get_app_settings,
    get_pomodoro_service,
    get_timer_service,
    require_auth,
)
from ..services.pomodoro_service import PomodoroService
from ..services.timer_service import TimerAction, TimerService
from ..shared.models import (
    FocusStats,
    PomodoroCreate,
    PomodoroRead,
    PomodoroUpdate,
    TimerCommand,
    TimerState,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ===== СЕССИИ =====

@router.get("", response_model=List[PomodoroRead])
async def list_sessions(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    service: PomodoroService = Depends(get_pomodoro_service),
):
    """
    Сессии помодоро пользователя, новые первыми
    """
    try:
        return await service.list(limit)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения сессий помодоро: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch pomodoro sessions")


@router.post("", response_model=PomodoroRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: PomodoroCreate,
    service: PomodoroService = Depends(get_pomodoro_service),
):
    """Начать сессию: startTime = сейчас, completed = false"""
    try:
        return await service.create(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания сессии помодоро: {e}")
        raise HTTPException(status_code=500, detail="Failed to create pomodoro session")


@router.get("/stats/today", response_model=FocusStats)
async def today_focus(service: PomodoroService = Depends(get_pomodoro_service)):
    """
    Время фокуса за сегодня в часах
    """
    try:
        return await service.today_focus()
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка расчета времени фокуса: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch focus stats")


@router.patch("/{session_id}", response_model=PomodoroRead)
async def update_session(
    session_id: str,
    data: PomodoroUpdate,
    service: PomodoroService = Depends(get_pomodoro_service),
):
    """Отметить сессию завершенной (endTime = сейчас) или снять отметку"""
    try:
        return await service.set_completed(session_id, data.completed)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления сессии помодоро: {e}")
        raise HTTPException(status_code=500, detail="Failed to update pomodoro session")


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    service: PomodoroService = Depends(get_pomodoro_service),
):
    try:
        await service.delete(session_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления сессии помодоро: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete pomodoro session")


# ===== ТАЙМЕР =====

@router.get("/timer", response_model=TimerState)
async def timer_state(
    user: User = Depends(require_auth),
    timers: TimerService = Depends(get_timer_service),
):
    """Текущее состояние таймера пользователя"""
    return timers.get_state(user.id).to_dict()


@router.post("/timer/{action}", response_model=TimerState)
async def timer_command(
    action: TimerAction,
    command: Optional[TimerCommand] = None,
    user: User = Depends(require_auth),
    timers: TimerService = Depends(get_timer_service),
    service: PomodoroService = Depends(get_pomodoro_service),
    settings: BeaverSettings = Depends(get_app_settings),
):
    """
    Команда таймеру: start, pause, resume, reset или sync

    start с sessionId берет длительность сессии; при завершении отсчета
    сессия отмечается выполненной.
    """
    command = command or TimerCommand()
    default_seconds = settings.POMODORO_FOCUS_MINUTES * 60

    try:
        if action == TimerAction.START:
            seconds = command.seconds
            if command.session_id:
                pomodoro = await service.get(command.session_id)
                if seconds is None:
                    seconds = pomodoro.duration * 60
            state = await timers.start(
                user.id,
                seconds if seconds is not None else default_seconds,
                session_id=command.session_id,
            )
        elif action == TimerAction.PAUSE:
            state = await timers.pause(user.id)
        elif action == TimerAction.RESUME:
            state = await timers.resume(user.id)
        elif action == TimerAction.RESET:
            state = await timers.reset(
                user.id, command.seconds if command.seconds is not None else default_seconds
            )
        else:
            if command.seconds is None:
                raise BadRequestError("seconds is required for sync")
            state = timers.sync(user.id, command.seconds)

        return state.to_dict()
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка команды таймера {action.value}: {e}")
        raise HTTPException(status_code=500, detail="Failed to control timer")
