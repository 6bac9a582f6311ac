#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Beaver Task - Database
Async движок SQLAlchemy, фабрика сессий и декларативная база моделей

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Декларативная база всех ORM моделей"""


# ===== ГЛОБАЛЬНЫЕ ПЕРЕМЕННЫЕ =====

_db_engine: Optional[AsyncEngine] = None
_db_session_factory: Optional[async_sessionmaker] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite не проверяет внешние ключи без этой прагмы
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ===== ИНИЦИАЛИЗАЦИЯ =====

async def init_database(settings) -> async_sessionmaker:
    """Создание движка, фабрики сессий и таблиц"""
    global _db_engine, _db_session_factory

    if _db_engine is not None:
        await close_database()

    logger.info("🔄 Инициализация базы данных...")

    url = make_url(settings.DATABASE_URL)
    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    _db_engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    if is_sqlite:
        event.listen(_db_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    _db_session_factory = async_sessionmaker(
        _db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    # Импорт регистрирует таблицы в Base.metadata
    from beaver_task.core import models  # noqa: F401

    async with _db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"✅ База данных инициализирована: {url.render_as_string(hide_password=True)}")
    return _db_session_factory


async def close_database() -> None:
    """Закрытие пула соединений"""
    global _db_engine, _db_session_factory

    if _db_engine is not None:
        await _db_engine.dispose()
        logger.info("🗄️ Соединения с БД закрыты")
    _db_engine = None
    _db_session_factory = None


def get_session_factory() -> async_sessionmaker:
    if _db_session_factory is None:
        raise RuntimeError("Database is not initialized")
    return _db_session_factory


async def check_database() -> bool:
    """Проверка доступности БД для health check"""
    if _db_engine is None:
        return False
    async with _db_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


# ===== ПРОВАЙДЕР СЕССИЙ =====

async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Сессия на время запроса: commit при успехе, rollback при ошибке"""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
