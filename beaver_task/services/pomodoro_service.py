"""
Сервис сессий помодоро
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.core.database import get_session_factory
from beaver_task.core.models import PomodoroSession, PomodoroType, Task
from beaver_task.shared.models import PomodoroCreate
from beaver_task.services.common import get_owned
from beaver_task.utils.datetime_utils import local_midnight_utc, today_local, utcnow

logger = logging.getLogger(__name__)


class PomodoroService:

    def __init__(self, session: AsyncSession, user_id: str, tz):
        self.session = session
        self.user_id = user_id
        self.tz = tz

    async def list(self, limit: Optional[int] = None) -> List[PomodoroSession]:
        stmt = (
            select(PomodoroSession)
            .where(PomodoroSession.user_id == self.user_id)
            .order_by(PomodoroSession.created_at.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        return list((await self.session.execute(stmt)).scalars().all())

    async def get(self, session_id: str) -> PomodoroSession:
        return await get_owned(
            self.session, PomodoroSession, session_id, self.user_id, "Session"
        )

    async def create(self, data: PomodoroCreate) -> PomodoroSession:
        if data.task_id:
            await get_owned(self.session, Task, data.task_id, self.user_id, "Task")

        pomodoro = PomodoroSession(
            duration=data.duration,
            type=data.type.value,
            completed=False,
            start_time=utcnow(),
            task_id=data.task_id,
            user_id=self.user_id,
        )
        self.session.add(pomodoro)
        await self.session.commit()

        logger.info(f"🍅 Начата сессия {pomodoro.id}: {pomodoro.type} {pomodoro.duration} мин")
        return pomodoro

    async def set_completed(self, session_id: str, completed: bool = True) -> PomodoroSession:
        """Завершить сессию (end_time = сейчас) или снять отметку"""
        pomodoro = await self.get(session_id)
        pomodoro.completed = completed
        pomodoro.end_time = utcnow() if completed else None
        await self.session.commit()
        return pomodoro

    async def delete(self, session_id: str) -> None:
        pomodoro = await self.get(session_id)
        await self.session.delete(pomodoro)
        await self.session.commit()
        logger.info(f"🗑️ Удалена сессия помодоро {session_id}")

    async def today_focus(self) -> dict:
        """Время фокуса за сегодня: завершенные FOCUS сессии с полуночи"""
        since = local_midnight_utc(today_local(self.tz), self.tz)
        stmt = select(PomodoroSession).where(
            PomodoroSession.user_id == self.user_id,
            PomodoroSession.type == PomodoroType.FOCUS.value,
            PomodoroSession.completed.is_(True),
            PomodoroSession.start_time >= since,
        )
        sessions = (await self.session.execute(stmt)).scalars().all()
        minutes = sum(item.duration for item in sessions)
        return {
            "hours": round(minutes / 60, 2),
            "minutes": minutes,
            "sessions": len(sessions),
        }


def make_timer_completion_handler(tz):
    """Callback таймера: по окончании отсчета сессия отмечается завершенной"""

    async def on_complete(user_id: str, session_id: Optional[str]) -> None:
        if not session_id:
            return
        async with get_session_factory()() as session:
            service = PomodoroService(session, user_id, tz)
            await service.set_completed(session_id, True)
        logger.info(f"🔔 Сессия {session_id} завершена таймером")

    return on_complete
