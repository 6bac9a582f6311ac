#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Beaver Task - Dependencies
Провайдеры зависимостей FastAPI: настройки, сессия БД, текущий пользователь
и сервисы сущностей

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.config import BeaverSettings, get_settings
from beaver_task.core.database import close_database, get_db_session
from beaver_task.core.models import User
from beaver_task.services import close_all_services, get_service_manager
from beaver_task.services.calendar_service import CalendarService
from beaver_task.services.dashboard_service import DashboardService
from beaver_task.services.habit_service import HabitService
from beaver_task.services.kanban_service import KanbanService
from beaver_task.services.note_service import NoteService
from beaver_task.services.organization_service import OrganizationService
from beaver_task.services.pomodoro_service import PomodoroService
from beaver_task.services.project_service import ProjectService
from beaver_task.services.task_service import TaskService
from beaver_task.services.timer_service import TimerService
from beaver_task.services.user_service import UserService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# ===== НАСТРОЙКИ =====


def get_app_settings(request: Request) -> BeaverSettings:
    """Настройки, с которыми создано приложение"""
    return getattr(request.app.state, "settings", None) or get_settings()


# ===== АВТОРИЗАЦИЯ =====


async def get_user_service(
    session: AsyncSession = Depends(get_db_session),
    settings: BeaverSettings = Depends(get_app_settings),
) -> UserService:
    return UserService(session, settings)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserService = Depends(get_user_service),
) -> Optional[User]:
    """Пользователь по bearer токену сессии"""
    if not credentials:
        return None
    return await users.resolve_token(credentials.credentials)


async def require_auth(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    """Требовать авторизации"""
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None


# ===== СЕРВИСЫ СУЩНОСТЕЙ =====


async def get_organization_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
) -> OrganizationService:
    return OrganizationService(session, user.id)


async def get_project_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
) -> ProjectService:
    return ProjectService(session, user.id)


async def get_task_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
) -> TaskService:
    return TaskService(session, user.id)


async def get_kanban_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
) -> KanbanService:
    return KanbanService(session, user.id)


async def get_habit_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
    settings: BeaverSettings = Depends(get_app_settings),
) -> HabitService:
    return HabitService(session, user.id, settings.tz)


async def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
) -> NoteService:
    return NoteService(session, user.id)


async def get_pomodoro_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
    settings: BeaverSettings = Depends(get_app_settings),
) -> PomodoroService:
    return PomodoroService(session, user.id, settings.tz)


async def get_calendar_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
    settings: BeaverSettings = Depends(get_app_settings),
) -> CalendarService:
    return CalendarService(session, user.id, settings)


async def get_dashboard_service(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_auth),
    settings: BeaverSettings = Depends(get_app_settings),
) -> DashboardService:
    return DashboardService(session, user.id, settings.tz)


def get_timer_service() -> TimerService:
    manager = get_service_manager()
    if manager.timer_service is None:
        raise HTTPException(status_code=503, detail="Timer service is not running")
    return manager.timer_service


# ===== УТИЛИТЫ =====


def get_client_ip(request: Request) -> str:
    """Получить IP адрес клиента"""
    # Проверяем заголовки прокси
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


# ===== ОЧИСТКА РЕСУРСОВ =====


async def cleanup_resources():
    """Очистка ресурсов при остановке приложения"""
    logger.info("🧹 Очистка ресурсов...")

    try:
        await close_all_services()
        await close_database()
        logger.info("✅ Ресурсы очищены")

    except Exception as e:
        logger.error(f"❌ Ошибка при очистке ресурсов: {e}")
