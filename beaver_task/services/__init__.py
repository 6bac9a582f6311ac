# services/__init__.py

"""
Модуль сервисов Beaver Task

Сервисы сущностей создаются на каждый запрос (им нужна сессия БД);
долгоживущие сервисы процесса (таймеры помодоро) держит ServiceManager.
"""

import logging
from typing import Optional

from .timer_service import TimerService
from .pomodoro_service import make_timer_completion_handler

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Менеджер долгоживущих сервисов

    Обеспечивает:
    - Инициализацию при старте приложения
    - Проверку состояния для health check
    - Корректную остановку при завершении
    """

    def __init__(self):
        self.timer_service: Optional[TimerService] = None
        self.initialized = False

    def initialize_services(self, settings) -> bool:
        """Инициализация всех сервисов"""
        logger.info("🔧 Инициализация сервисов Beaver Task...")

        self.timer_service = TimerService(
            tick_seconds=settings.TIMER_TICK_SECONDS,
            on_complete=make_timer_completion_handler(settings.tz),
        )

        self.initialized = True
        logger.info("✅ Все сервисы инициализированы успешно!")
        return True

    def health_check(self) -> dict:
        """Проверка состояния всех сервисов"""
        health = {
            "status": "healthy" if self.initialized else "error",
            "services": {}
        }

        if self.timer_service:
            health["services"]["timer_service"] = {
                "status": "healthy",
                "active_timers": len(self.timer_service.active_timers),
            }

        return health

    async def close_services(self):
        """Закрытие всех сервисов"""
        try:
            logger.info("🛑 Закрытие сервисов...")

            if self.timer_service:
                await self.timer_service.cleanup_all_timers()
                self.timer_service = None

            self.initialized = False
            logger.info("✅ Все сервисы закрыты")

        except Exception as e:
            logger.error(f"❌ Ошибка закрытия сервисов: {e}")


# Глобальный экземпляр менеджера сервисов
_service_manager: Optional[ServiceManager] = None


def get_service_manager() -> ServiceManager:
    """Получить глобальный менеджер сервисов"""
    global _service_manager
    if _service_manager is None:
        _service_manager = ServiceManager()
    return _service_manager


def initialize_all_services(settings) -> bool:
    return get_service_manager().initialize_services(settings)


async def close_all_services():
    """Закрытие всех сервисов"""
    global _service_manager
    if _service_manager:
        await _service_manager.close_services()
        _service_manager = None


__all__ = [
    'ServiceManager',
    'TimerService',
    'get_service_manager',
    'initialize_all_services',
    'close_all_services',
]
