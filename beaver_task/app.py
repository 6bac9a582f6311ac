#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Beaver Task - FastAPI Application
JSON API персонального планировщика: задачи, проекты, организации,
привычки, заметки и помодоро

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from beaver_task.api import (
    auth,
    calendar,
    dashboard,
    habits,
    kanban,
    notes,
    organizations,
    pomodoro,
    projects,
    tasks,
    users,
)
from beaver_task.config import BeaverSettings, get_settings
from beaver_task.core.database import check_database, init_database
from beaver_task.core.exceptions import BeaverError
from beaver_task.dependencies import cleanup_resources, get_client_ip
from beaver_task.services import get_service_manager, initialize_all_services
from beaver_task.shared.models import HealthCheck
from beaver_task.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[BeaverSettings] = None) -> FastAPI:
    """Фабрика для создания приложения"""
    settings = app_settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        setup_logging(settings)

        # Startup
        logger.info(f"🚀 Запуск {settings.APP_NAME} ({settings.ENVIRONMENT})...")
        app.state.start_time = time.time()

        await init_database(settings)
        initialize_all_services(settings)

        logger.info(f"🌐 API доступен на: {settings.get_full_url()}")
        logger.info(f"🕒 Часовой пояс дней: {settings.TIMEZONE}")
        logger.info("✅ Сервис готов к работе")

        yield

        # Shutdown
        logger.info("🛑 Остановка сервиса...")
        await cleanup_resources()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Персональный планировщик: задачи, проекты, привычки, заметки и помодоро",
        version=settings.VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=None,
        openapi_url=settings.OPENAPI_URL,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.start_time = time.time()

    # ===== MIDDLEWARE =====

    # Trusted Host middleware (безопасность)
    if not settings.DEBUG:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Middleware для логирования запросов"""
        start_time = time.time()
        request_id = uuid.uuid4().hex[:12]
        client_ip = get_client_ip(request)

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(f"❌ Ошибка обработки запроса: {e} ({process_time:.3f}s)")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error", "request_id": request_id},
            )

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s "
            f"- {client_ip}"
        )

        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        response.headers["X-Request-ID"] = request_id
        return response

    # ===== ОБРАБОТЧИКИ ОШИБОК =====

    @app.exception_handler(BeaverError)
    async def beaver_error_handler(request: Request, exc: BeaverError):
        """Ошибки предметной области -> HTTP статус исключения"""
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        else:
            logger.warning(f"⚠️ {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "status_code": exc.status_code},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Обработчик HTTP исключений"""
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = "API endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": detail, "status_code": exc.status_code},
            headers=getattr(exc, "headers", None),
        )

    # ===== РОУТЕРЫ =====

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/user", tags=["user"])
    app.include_router(organizations.router, prefix="/api/organizations", tags=["organizations"])
    app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
    # Колонки раньше задач: иначе /api/tasks/columns попадет в /{task_id}
    app.include_router(kanban.router, prefix="/api/tasks/columns", tags=["kanban"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(habits.router, prefix="/api/habits", tags=["habits"])
    app.include_router(notes.router, prefix="/api/notes", tags=["notes"])
    app.include_router(pomodoro.router, prefix="/api/pomodoro", tags=["pomodoro"])
    app.include_router(calendar.router, prefix="/api/calendar", tags=["calendar"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])

    # ===== СЛУЖЕБНЫЕ МАРШРУТЫ =====

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        """Health check для мониторинга"""
        try:
            if not await check_database():
                raise RuntimeError("Database is not initialized")
            services = get_service_manager().health_check()
            return HealthCheck(
                status="healthy",
                service="beaver-task",
                version=settings.VERSION,
                timestamp=time.time(),
                data={
                    "database": "ok",
                    "services": services["services"],
                    "debug_mode": settings.DEBUG,
                    "uptime_seconds": time.time() - app.state.start_time,
                },
            )
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "beaver-task",
                    "error": str(e),
                    "timestamp": time.time(),
                },
            )

    @app.get("/api/info")
    async def api_info():
        """Информация об API"""
        return {
            "name": f"{settings.APP_NAME} API",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG,
            "timezone": settings.TIMEZONE,
            "uptime": time.time() - app.state.start_time,
            "endpoints": {
                "auth": "/api/auth",
                "user": "/api/user",
                "organizations": "/api/organizations",
                "projects": "/api/projects",
                "tasks": "/api/tasks",
                "columns": "/api/tasks/columns",
                "habits": "/api/habits",
                "notes": "/api/notes",
                "pomodoro": "/api/pomodoro",
                "calendar": "/api/calendar/events",
                "dashboard": "/api/dashboard/summary",
            },
            "pomodoro_defaults": settings.pomodoro_defaults(),
        }

    @app.get("/ping")
    async def ping():
        """Простой ping endpoint"""
        return {
            "message": "pong",
            "timestamp": time.time(),
            "service": "beaver-task",
        }

    return app


app = create_app()


# ===== ЗАПУСК ПРИЛОЖЕНИЯ =====

def run_server(host: str = None, port: int = None, reload: bool = None):
    """Запуск API сервера"""
    settings = get_settings()
    host = host or settings.HOST
    port = port or settings.PORT
    reload = reload if reload is not None else settings.DEBUG

    logger.info(f"🌐 Запуск {settings.APP_NAME} на http://{host}:{port}")
    logger.info(f"🔧 Режим отладки: {settings.DEBUG}")

    try:
        uvicorn.run(
            "beaver_task.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level="debug" if settings.DEBUG else "info",
            access_log=settings.DEBUG,
            server_header=False,
        )
    except KeyboardInterrupt:
        logger.info("👋 Сервис остановлен")


if __name__ == "__main__":
    run_server()
