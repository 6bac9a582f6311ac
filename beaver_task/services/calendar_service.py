"""
Сервис календаря: сводит задачи, проекты, отметки привычек и сессии
помодоро в единый список событий
"""

import logging
from collections import defaultdict
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.core.models import Habit, HabitEntry, PomodoroSession, Project, Task
from beaver_task.utils.datetime_utils import local_midnight_utc, today_local

logger = logging.getLogger(__name__)

# ===== ЦВЕТА =====

TASK_STATUS_COLORS = {
    "ACTIVE": "#3b82f6",
    "PLANNING": "#8b5cf6",
    "IN_PROGRESS": "#f59e0b",
    "ON_HOLD": "#6b7280",
    "COMPLETED": "#10b981",
}
DEFAULT_TASK_COLOR = "#6b7280"
DEFAULT_PROJECT_COLOR = "#3b82f6"
HABIT_COLOR = "#10b981"
POMODORO_COLORS = {
    "FOCUS": "#ef4444",
    "SHORT_BREAK": "#10b981",
    "LONG_BREAK": "#3b82f6",
}


def _event(event_id: str, title: str, start, color: str, **extra) -> Dict[str, Any]:
    event = {
        "id": event_id,
        "title": title,
        "start": start,
        "end": extra.pop("end", None),
        "all_day": extra.pop("all_day", False),
        "background_color": color,
        "border_color": color,
        "text_color": "#ffffff",
        "extended_props": extra,
    }
    return event


class CalendarService:

    def __init__(self, session: AsyncSession, user_id: str, settings):
        self.session = session
        self.user_id = user_id
        self.settings = settings

    async def task_events(self) -> List[Dict[str, Any]]:
        stmt = select(Task).where(Task.user_id == self.user_id, Task.due_date.is_not(None))
        tasks = (await self.session.execute(stmt)).scalars().all()
        return [
            _event(
                f"task-{task.id}",
                task.title,
                task.due_date,
                TASK_STATUS_COLORS.get(task.status, DEFAULT_TASK_COLOR),
                all_day=True,
                type="task",
                status=task.status,
                priority=task.priority,
                description=task.description,
            )
            for task in tasks
        ]

    async def project_events(self) -> List[Dict[str, Any]]:
        stmt = select(Project).where(
            Project.user_id == self.user_id, Project.due_date.is_not(None)
        )
        projects = (await self.session.execute(stmt)).scalars().all()
        return [
            _event(
                f"project-{project.id}",
                f"📁 {project.name}",
                project.due_date,
                project.color or DEFAULT_PROJECT_COLOR,
                all_day=True,
                type="project",
                status=project.status,
                description=project.description,
            )
            for project in projects
        ]

    async def habit_events(self) -> List[Dict[str, Any]]:
        """Выполненные привычки за последние дни, одно событие на день"""
        tz = self.settings.tz
        since = today_local(tz) - timedelta(days=self.settings.CALENDAR_HABIT_DAYS - 1)
        stmt = (
            select(HabitEntry, Habit.name)
            .join(Habit, Habit.id == HabitEntry.habit_id)
            .where(
                HabitEntry.user_id == self.user_id,
                HabitEntry.completed.is_(True),
                HabitEntry.day >= since,
            )
            .order_by(HabitEntry.day, Habit.name)
        )
        by_day = defaultdict(list)
        for entry, name in (await self.session.execute(stmt)).all():
            by_day[entry.day].append(name)

        return [
            _event(
                f"habits-{day.isoformat()}",
                f"✅ {', '.join(names)}",
                local_midnight_utc(day, tz),
                HABIT_COLOR,
                all_day=True,
                type="habits",
                habits=names,
                count=len(names),
            )
            for day, names in sorted(by_day.items())
        ]

    async def pomodoro_events(self) -> List[Dict[str, Any]]:
        stmt = select(PomodoroSession).where(
            PomodoroSession.user_id == self.user_id,
            PomodoroSession.end_time.is_not(None),
        )
        sessions = (await self.session.execute(stmt)).scalars().all()
        return [
            _event(
                f"pomodoro-{item.id}",
                f"🍅 {item.type} ({item.duration}min)",
                item.start_time,
                POMODORO_COLORS.get(item.type, POMODORO_COLORS["FOCUS"]),
                end=item.end_time,
                type="pomodoro",
                sessionType=item.type,
                duration=item.duration,
                completed=item.completed,
            )
            for item in sessions
        ]

    async def events(self) -> List[Dict[str, Any]]:
        events = []
        events.extend(await self.task_events())
        events.extend(await self.project_events())
        events.extend(await self.habit_events())
        events.extend(await self.pomodoro_events())
        logger.debug(f"📅 Событий календаря: {len(events)}")
        return events
