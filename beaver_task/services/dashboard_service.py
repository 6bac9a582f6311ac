"""Сводка для главной страницы"""

from collections import Counter

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.core.models import (
    Habit,
    HabitEntry,
    Note,
    Organization,
    Project,
    ProjectStatus,
    Task,
)
from beaver_task.services.common import count_where
from beaver_task.services.pomodoro_service import PomodoroService
from beaver_task.utils.datetime_utils import today_local


class DashboardService:

    def __init__(self, session: AsyncSession, user_id: str, tz):
        self.session = session
        self.user_id = user_id
        self.tz = tz

    async def summary(self) -> dict:
        statuses = (
            await self.session.execute(select(Task.status).where(Task.user_id == self.user_id))
        ).scalars().all()

        projects_total = await count_where(self.session, Project, Project.user_id == self.user_id)
        completed_projects = await count_where(
            self.session, Project,
            Project.user_id == self.user_id,
            Project.status == ProjectStatus.COMPLETED.value,
        )
        completed_today = await count_where(
            self.session, HabitEntry,
            HabitEntry.user_id == self.user_id,
            HabitEntry.day == today_local(self.tz),
            HabitEntry.completed.is_(True),
        )
        focus = await PomodoroService(self.session, self.user_id, self.tz).today_focus()

        return {
            "tasks_total": len(statuses),
            "tasks_by_status": dict(Counter(statuses)),
            "projects_total": projects_total,
            "active_projects": projects_total - completed_projects,
            "organizations_total": await count_where(
                self.session, Organization, Organization.user_id == self.user_id
            ),
            "habits_total": await count_where(self.session, Habit, Habit.user_id == self.user_id),
            "habits_completed_today": completed_today,
            "notes_total": await count_where(self.session, Note, Note.user_id == self.user_id),
            "focus_hours_today": focus["hours"],
        }
