"""
Сервис привычек: CRUD, отметка выполнения за сегодня и статистика
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from beaver_task.core.models import Habit, HabitEntry
from beaver_task.shared.models import HabitCreate, HabitUpdate
from beaver_task.services.common import apply_updates, get_owned
from beaver_task.services.habit_stats import compute_habit_stats
from beaver_task.utils.datetime_utils import local_date, today_local

logger = logging.getLogger(__name__)

HABIT_FIELDS = (
    "id", "name", "description", "frequency", "target", "color",
    "custom_days", "custom_period", "created_at", "updated_at",
)


class HabitService:

    def __init__(self, session: AsyncSession, user_id: str, tz):
        self.session = session
        self.user_id = user_id
        self.tz = tz

    def today(self):
        return today_local(self.tz)

    def to_dict(self, habit: Habit) -> Dict[str, Any]:
        """Привычка вместе с вычисленной статистикой"""
        data = {field: getattr(habit, field) for field in HABIT_FIELDS}
        entries = [(entry.day, entry.completed) for entry in habit.entries]
        data.update(
            compute_habit_stats(entries, local_date(habit.created_at, self.tz), self.today())
        )
        return data

    # ===== ЧТЕНИЕ =====

    async def list(self) -> List[Dict[str, Any]]:
        stmt = (
            select(Habit)
            .where(Habit.user_id == self.user_id)
            .options(selectinload(Habit.entries))
            .order_by(Habit.created_at.desc())
            .execution_options(populate_existing=True)
        )
        habits = (await self.session.execute(stmt)).scalars().all()
        return [self.to_dict(habit) for habit in habits]

    async def get(self, habit_id: str) -> Habit:
        return await get_owned(
            self.session, Habit, habit_id, self.user_id, "Habit",
            options=[selectinload(Habit.entries)],
        )

    async def get_dict(self, habit_id: str) -> Dict[str, Any]:
        return self.to_dict(await self.get(habit_id))

    async def entries(self, habit_id: str, days: int = 30) -> List[HabitEntry]:
        """История отметок за последние days дней, новые первыми"""
        await self.get(habit_id)
        since = self.today() - timedelta(days=days - 1)
        stmt = (
            select(HabitEntry)
            .where(
                HabitEntry.habit_id == habit_id,
                HabitEntry.user_id == self.user_id,
                HabitEntry.day >= since,
            )
            .order_by(HabitEntry.day.desc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

    # ===== ЗАПИСЬ =====

    async def create(self, data: HabitCreate) -> Dict[str, Any]:
        habit = Habit(
            name=data.name,
            description=data.description,
            frequency=data.frequency.value,
            target=data.target,
            color=data.color,
            custom_days=data.custom_days,
            custom_period=data.custom_period,
            user_id=self.user_id,
        )
        self.session.add(habit)
        await self.session.commit()

        logger.info(f"🎯 Создана привычка {habit.id}")
        return await self.get_dict(habit.id)

    async def update(self, habit_id: str, data: HabitUpdate) -> Dict[str, Any]:
        habit = await self.get(habit_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("frequency") is not None:
            changes["frequency"] = changes["frequency"].value

        apply_updates(habit, changes)
        await self.session.commit()
        return await self.get_dict(habit_id)

    async def delete(self, habit_id: str) -> None:
        """Отметки удаляются каскадом в БД"""
        habit = await self.get(habit_id)
        await self.session.delete(habit)
        await self.session.commit()
        logger.info(f"🗑️ Удалена привычка {habit_id}")

    async def toggle(self, habit_id: str, completed: bool) -> Dict[str, Any]:
        """
        Отметка выполнения за сегодня

        Существующая запись дня обновляется. Новая создается только
        при completed=True.
        """
        await self.get(habit_id)
        today = self.today()

        stmt = select(HabitEntry).where(
            HabitEntry.habit_id == habit_id,
            HabitEntry.user_id == self.user_id,
            HabitEntry.day == today,
        )
        entry: Optional[HabitEntry] = (await self.session.execute(stmt)).scalar_one_or_none()

        if entry is not None:
            entry.completed = completed
        elif completed:
            self.session.add(HabitEntry(
                habit_id=habit_id,
                user_id=self.user_id,
                day=today,
                completed=True,
                value=1,
            ))

        await self.session.commit()
        logger.info(f"✅ Привычка {habit_id}: {today.isoformat()} -> {completed}")
        return await self.get_dict(habit_id)
