#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Beaver Task - Configuration
Конфигурация сервиса с настройками для разных сред

Версия: 1.0.0
Дата: 2026-10-18
"""

from pathlib import Path
from typing import Annotated, List, Optional

import pytz
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class BeaverSettings(BaseSettings):
    """Настройки сервиса Beaver Task"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="Beaver Task",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия сервиса"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=True,
        description="Режим отладки"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    HOST: str = Field(
        default="0.0.0.0",
        description="Хост для запуска сервиса"
    )

    PORT: int = Field(
        default=8000,
        description="Порт для запуска сервиса"
    )

    BASE_URL: Optional[str] = Field(
        default=None,
        description="Базовый URL сервиса (для продакшена)"
    )

    # ===== CORS И ХОСТЫ =====

    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Разрешенные источники для CORS"
    )

    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Разрешенные хосты (TrustedHostMiddleware вне DEBUG)"
    )

    # ===== ПУТИ =====

    LOGS_DIR: Path = Field(
        default=Path("logs"),
        description="Директория логов"
    )

    # ===== БАЗА ДАННЫХ =====

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/beaver_task.db",
        description="URL базы данных (async драйвер SQLAlchemy)"
    )

    DB_ECHO: bool = Field(
        default=False,
        description="Выводить SQL запросы в лог"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Формат даты в логах"
    )

    LOG_TO_FILE: bool = Field(
        default=True,
        description="Писать логи в файл с ротацией"
    )

    # ===== БЕЗОПАСНОСТЬ =====

    SESSION_TIMEOUT: int = Field(
        default=30 * 24 * 3600,
        description="Время жизни сессии в секундах (30 дней)"
    )

    PASSWORD_MIN_LENGTH: int = Field(
        default=8,
        description="Минимальная длина пароля"
    )

    PASSWORD_HASH_ITERATIONS: int = Field(
        default=260_000,
        description="Количество итераций PBKDF2"
    )

    # ===== ВРЕМЯ И ТАЙМЕР =====

    TIMEZONE: str = Field(
        default="UTC",
        description="Часовой пояс для границ дня (привычки, статистика)"
    )

    TIMER_TICK_SECONDS: float = Field(
        default=1.0,
        description="Интервал тика таймера помодоро в секундах"
    )

    POMODORO_FOCUS_MINUTES: int = Field(
        default=25,
        description="Длительность фокус-сессии по умолчанию"
    )

    POMODORO_SHORT_BREAK_MINUTES: int = Field(
        default=5,
        description="Длительность короткого перерыва по умолчанию"
    )

    POMODORO_LONG_BREAK_MINUTES: int = Field(
        default=15,
        description="Длительность длинного перерыва по умолчанию"
    )

    # ===== КАЛЕНДАРЬ =====

    CALENDAR_HABIT_DAYS: int = Field(
        default=30,
        description="Сколько дней истории привычек показывать в календаре"
    )

    # ===== API НАСТРОЙКИ =====

    DOCS_URL: Optional[str] = Field(
        default="/api/docs",
        description="URL документации API (None для отключения)"
    )

    OPENAPI_URL: Optional[str] = Field(
        default="/api/openapi.json",
        description="URL OpenAPI схемы (None для отключения)"
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        """Валидация среды выполнения"""
        allowed_envs = ['development', 'production', 'testing', 'staging']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Валидация уровня логирования"""
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('PORT')
    @classmethod
    def validate_port(cls, v):
        """Валидация порта"""
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator('TIMEZONE')
    @classmethod
    def validate_timezone(cls, v):
        """Часовой пояс должен быть известен pytz"""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown TIMEZONE: {v}")
        return v

    @field_validator('ALLOWED_ORIGINS', 'ALLOWED_HOSTS', mode='before')
    @classmethod
    def validate_origins(cls, v):
        """Строка через запятую превращается в список"""
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @field_validator('TIMER_TICK_SECONDS')
    @classmethod
    def validate_tick(cls, v):
        if v <= 0:
            raise ValueError("TIMER_TICK_SECONDS must be positive")
        return v

    @model_validator(mode='after')
    def validate_production_settings(self):
        """Валидация настроек для продакшена"""
        if self.ENVIRONMENT == 'production':
            # В продакшене отключаем DEBUG и документацию API
            self.DEBUG = False
            self.DOCS_URL = None
            self.OPENAPI_URL = None
        return self

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def is_production(self) -> bool:
        """Проверка продакшен среды"""
        return self.ENVIRONMENT == "production"

    @property
    def tz(self):
        """Объект часового пояса pytz"""
        return pytz.timezone(self.TIMEZONE)

    def get_full_url(self, path: str = "") -> str:
        """Получить полный URL"""
        if self.BASE_URL:
            return f"{self.BASE_URL.rstrip('/')}/{path.lstrip('/')}"
        return f"http://{self.HOST}:{self.PORT}/{path.lstrip('/')}"

    def pomodoro_defaults(self) -> dict:
        """Длительности помодоро по умолчанию в минутах"""
        return {
            "FOCUS": self.POMODORO_FOCUS_MINUTES,
            "SHORT_BREAK": self.POMODORO_SHORT_BREAK_MINUTES,
            "LONG_BREAK": self.POMODORO_LONG_BREAK_MINUTES,
        }


# ===== ГЛОБАЛЬНЫЕ НАСТРОЙКИ =====

settings = BeaverSettings()


def get_settings() -> BeaverSettings:
    """Получить глобальные настройки"""
    return settings
