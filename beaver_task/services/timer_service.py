"""
Сервис таймеров помодоро

Один обратный отсчет на пользователя. Команды START/PAUSE/RESUME/RESET/SYNC,
события TICK (каждый интервал) и COMPLETE (time_left дошел до нуля).
"""

import asyncio
import logging
from contextlib import suppress
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[str, int], Awaitable[None]]
CompleteCallback = Callable[[str, Optional[str]], Awaitable[None]]


class TimerAction(str, Enum):
    """Команды таймера"""
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    RESET = "reset"
    SYNC = "sync"


@dataclass
class TimerState:
    """Состояние таймера пользователя"""
    time_left: int = 0
    is_active: bool = False
    session_id: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class TimerService:
    """Управление пользовательскими таймерами"""

    def __init__(
        self,
        tick_seconds: float = 1.0,
        on_tick: Optional[TickCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ):
        self.tick_seconds = tick_seconds
        self.on_tick = on_tick
        self.on_complete = on_complete
        self.timers: Dict[str, TimerState] = {}
        self.active_timers: Dict[str, asyncio.Task] = {}

    # ===== КОМАНДЫ =====

    async def start(self, user_id: str, seconds: int, session_id: Optional[str] = None) -> TimerState:
        """Новый отсчет; предыдущий таймер пользователя останавливается"""
        await self._stop_worker(user_id)

        state = TimerState(time_left=seconds, session_id=session_id)
        self.timers[user_id] = state
        self._launch(user_id)

        logger.info(f"⏰ Запущен таймер для пользователя {user_id}: {seconds} сек")
        return state

    async def pause(self, user_id: str) -> TimerState:
        state = self.get_state(user_id)
        await self._stop_worker(user_id)
        state.is_active = False
        logger.info(f"⏸️ Таймер пользователя {user_id} на паузе ({state.time_left} сек)")
        return state

    async def resume(self, user_id: str) -> TimerState:
        state = self.get_state(user_id)
        if not self.is_timer_active(user_id) and state.time_left > 0:
            self._launch(user_id)
            logger.info(f"▶️ Таймер пользователя {user_id} продолжен")
        return state

    async def reset(self, user_id: str, seconds: int) -> TimerState:
        await self._stop_worker(user_id)
        state = TimerState(time_left=seconds)
        self.timers[user_id] = state
        logger.info(f"🔄 Таймер пользователя {user_id} сброшен на {seconds} сек")
        return state

    def sync(self, user_id: str, seconds: int) -> TimerState:
        """Перезаписать оставшееся время, не меняя состояние хода"""
        state = self.timers.setdefault(user_id, TimerState())
        state.time_left = seconds
        return state

    # ===== СОСТОЯНИЕ =====

    def get_state(self, user_id: str) -> TimerState:
        """Состояние таймера; пользователь без таймера получает пустое, оно не сохраняется"""
        return self.timers.get(user_id) or TimerState()

    def is_timer_active(self, user_id: str) -> bool:
        """Проверка активности таймера"""
        return user_id in self.active_timers and not self.active_timers[user_id].done()

    # ===== ВНУТРЕННЕЕ =====

    def _launch(self, user_id: str) -> None:
        self.timers[user_id].is_active = True
        self.active_timers[user_id] = asyncio.create_task(self._timer_worker(user_id))

    async def _stop_worker(self, user_id: str) -> None:
        timer_task = self.active_timers.pop(user_id, None)
        if timer_task and not timer_task.done():
            timer_task.cancel()
            with suppress(asyncio.CancelledError):
                await timer_task
            logger.debug(f"⏹️ Остановлен таймер пользователя {user_id}")

    async def _timer_worker(self, user_id: str):
        """Рабочий процесс таймера"""
        state = self.timers[user_id]
        try:
            while state.time_left > 0:
                await asyncio.sleep(self.tick_seconds)
                state.time_left -= 1
                if self.on_tick:
                    await self.on_tick(user_id, state.time_left)

            state.is_active = False
            logger.info(f"🔔 Таймер пользователя {user_id} завершен")

            if self.on_complete:
                try:
                    await self.on_complete(user_id, state.session_id)
                except Exception as e:
                    logger.error(f"❌ Ошибка обработки завершения таймера: {e}")

        except asyncio.CancelledError:
            logger.debug(f"⏹️ Таймер пользователя {user_id} отменен")
            raise
        finally:
            # Удаляем из активных, если нас не заменил новый таймер
            if self.active_timers.get(user_id) is asyncio.current_task():
                del self.active_timers[user_id]

    async def cleanup_all_timers(self):
        """Очистка всех активных таймеров при остановке"""
        for user_id in list(self.active_timers.keys()):
            await self._stop_worker(user_id)
            self.timers[user_id].is_active = False

        logger.info("🧹 Все таймеры очищены")
