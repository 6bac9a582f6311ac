#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Beaver Task - ORM Models
Таблицы предметной области: пользователи, задачи, проекты, организации,
колонки канбана, заметки, привычки и сессии помодоро

Версия: 1.0.0
Дата: 2026-10-18
"""

import json
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from beaver_task.core.database import Base
from beaver_task.utils.datetime_utils import utcnow

# ===== ПЕРЕЧИСЛЕНИЯ =====


class TaskStatus(str, Enum):
    TODO = "TODO"
    ACTIVE = "ACTIVE"
    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class ProjectStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class TaskPriority(str, Enum):
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class TaskSeverity(str, Enum):
    S0 = "S0"
    S1 = "S1"
    S2 = "S2"
    S3 = "S3"


class HabitFrequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    CUSTOM = "CUSTOM"


class PomodoroType(str, Enum):
    FOCUS = "FOCUS"
    SHORT_BREAK = "SHORT_BREAK"
    LONG_BREAK = "LONG_BREAK"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


DEFAULT_USER_SETTINGS: Dict[str, Any] = {
    "theme": Theme.SYSTEM.value,
    "emailNotifications": True,
    "pushNotifications": True,
}


def new_id() -> str:
    return uuid.uuid4().hex


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


# ===== ПОЛЬЗОВАТЕЛИ =====


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password: Mapped[Optional[str]] = mapped_column(String(255))
    image: Mapped[Optional[str]] = mapped_column(String(1024))
    # JSON строка; см. DEFAULT_USER_SETTINGS
    settings: Mapped[Optional[str]] = mapped_column(Text)

    def get_settings(self) -> Dict[str, Any]:
        """Настройки пользователя с подставленными значениями по умолчанию"""
        data = dict(DEFAULT_USER_SETTINGS)
        if self.settings:
            try:
                stored = json.loads(self.settings)
            except json.JSONDecodeError:
                stored = {}
            if isinstance(stored, dict):
                data.update(stored)
        return data

    def set_settings(self, value: Dict[str, Any]) -> None:
        self.settings = json.dumps(value)


class UserSession(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    expires: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    user: Mapped[User] = relationship(lazy="joined")


# ===== ОРГАНИЗАЦИИ И ПРОЕКТЫ =====


class Organization(TimestampMixin, Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    color: Mapped[Optional[str]] = mapped_column(String(32))
    department: Mapped[Optional[str]] = mapped_column(String(255))
    categories: Mapped[List[str]] = mapped_column(JSON, default=list)
    website: Mapped[Optional[str]] = mapped_column(String(1024))
    documents: Mapped[List[str]] = mapped_column(JSON, default=list)
    order: Mapped[Optional[int]] = mapped_column(Integer)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    projects: Mapped[List["Project"]] = relationship(viewonly=True, order_by="Project.created_at")


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(32), default=ProjectStatus.ACTIVE.value)
    color: Mapped[Optional[str]] = mapped_column(String(32))
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    organization_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("organizations.id"), index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    organization: Mapped[Optional[Organization]] = relationship()
    tasks: Mapped[List["Task"]] = relationship(viewonly=True, order_by="Task.created_at")


class KanbanColumn(TimestampMixin, Base):
    __tablename__ = "kanban_columns"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # NULL означает колонку общей доски
    project_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    @property
    def status_key(self) -> str:
        """Статус задачи в этой колонке: имя в верхнем регистре, пробелы -> _"""
        return self.name.strip().upper().replace(" ", "_")


# ===== ЗАДАЧИ =====


class Task(TimestampMixin, Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    # Строка, а не enum: колонки канбана задают произвольные статусы
    status: Mapped[str] = mapped_column(String(64), default=TaskStatus.TODO.value)
    priority: Mapped[str] = mapped_column(String(2), default=TaskPriority.P1.value)
    severity: Mapped[str] = mapped_column(String(2), default=TaskSeverity.S1.value)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    project_id: Mapped[Optional[str]] = mapped_column(ForeignKey("projects.id"), index=True)
    parent_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), index=True
    )
    column_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("kanban_columns.id", ondelete="SET NULL"), index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    project: Mapped[Optional[Project]] = relationship()


# ===== ЗАМЕТКИ =====


class Note(TimestampMixin, Base):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Теги хранятся строкой через запятую
    tags: Mapped[Optional[str]] = mapped_column(Text)
    project_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), index=True
    )
    task_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("tasks.id", ondelete="SET NULL"), index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    project: Mapped[Optional[Project]] = relationship()
    task: Mapped[Optional[Task]] = relationship()

    @property
    def tag_list(self) -> List[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


# ===== ПРИВЫЧКИ =====


class Habit(TimestampMixin, Base):
    __tablename__ = "habits"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    frequency: Mapped[str] = mapped_column(String(16), default=HabitFrequency.DAILY.value)
    target: Mapped[int] = mapped_column(Integer, default=1)
    color: Mapped[Optional[str]] = mapped_column(String(32))
    custom_days: Mapped[Optional[List[int]]] = mapped_column(JSON)
    custom_period: Mapped[Optional[str]] = mapped_column(String(32))
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    entries: Mapped[List["HabitEntry"]] = relationship(viewonly=True, order_by="HabitEntry.day")


class HabitEntry(Base):
    __tablename__ = "habit_entries"
    __table_args__ = (
        UniqueConstraint("habit_id", "user_id", "date", name="uq_habit_entry_day"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    habit_id: Mapped[str] = mapped_column(
        ForeignKey("habits.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # Календарный день в часовом поясе TIMEZONE
    day: Mapped[date] = mapped_column("date", Date, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    habit: Mapped[Habit] = relationship()


# ===== ПОМОДОРО =====


class PomodoroSession(TimestampMixin, Base):
    __tablename__ = "pomodoro_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(16), default=PomodoroType.FOCUS.value)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    task_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("tasks.id", ondelete="SET NULL"), index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
