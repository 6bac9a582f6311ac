# services/task_service.py

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from beaver_task.core.exceptions import BadRequestError, NotFoundError
from beaver_task.core.models import KanbanColumn, Project, Task, TaskStatus
from beaver_task.shared.models import TaskCreate, TaskUpdate
from beaver_task.services.common import apply_updates, get_owned
from beaver_task.utils.datetime_utils import to_storage

logger = logging.getLogger(__name__)

# ===== КОНСТАНТЫ =====

# Встроенные колонки доски: ключ колонки -> статус задачи
DEFAULT_COLUMN_STATUS = {
    "active": TaskStatus.ACTIVE.value,
    "planning": TaskStatus.PLANNING.value,
    "in_progress": TaskStatus.IN_PROGRESS.value,
    "on_hold": TaskStatus.ON_HOLD.value,
    "completed": TaskStatus.COMPLETED.value,
}

TASK_LOAD_OPTIONS = (selectinload(Task.project),)

# Связи, которые PATCH с null очищает
LINK_FIELDS = ("project_id", "parent_id")


class TaskService:
    """Задачи, подзадачи и перемещение по канбану"""

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id

    # ===== ЧТЕНИЕ =====

    async def list(
        self,
        project_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        status: Optional[str] = None,
        top_level: bool = False,
    ) -> List[Task]:
        stmt = (
            select(Task)
            .where(Task.user_id == self.user_id)
            .options(*TASK_LOAD_OPTIONS)
            .order_by(Task.created_at.desc())
            .execution_options(populate_existing=True)
        )
        if project_id:
            stmt = stmt.where(Task.project_id == project_id)
        if parent_id:
            stmt = stmt.where(Task.parent_id == parent_id)
        elif top_level:
            stmt = stmt.where(Task.parent_id.is_(None))
        if status:
            stmt = stmt.where(Task.status == status)
        return list((await self.session.execute(stmt)).scalars().all())

    async def get(self, task_id: str) -> Task:
        return await get_owned(
            self.session, Task, task_id, self.user_id, "Task", options=TASK_LOAD_OPTIONS
        )

    async def subtasks(self, task_id: str) -> List[Task]:
        await self.get(task_id)
        return await self.list(parent_id=task_id)

    # ===== ПРОВЕРКИ =====

    async def _check_project(self, project_id: Optional[str]) -> None:
        if project_id:
            await get_owned(self.session, Project, project_id, self.user_id, "Project")

    async def _check_parent(self, parent_id: Optional[str], task_id: Optional[str] = None) -> None:
        """Родитель существует, принадлежит пользователю и не создает цикл"""
        if not parent_id:
            return
        if parent_id == task_id:
            raise BadRequestError("Task cannot be its own parent")

        try:
            parent = await get_owned(self.session, Task, parent_id, self.user_id, "Parent task")
        except NotFoundError:
            raise NotFoundError("Parent task not found")

        # Поднимаемся по предкам нового родителя
        ancestor_id = parent.parent_id
        while ancestor_id and task_id:
            if ancestor_id == task_id:
                raise BadRequestError("Task cannot be moved under its own subtask")
            ancestor = await self.session.get(Task, ancestor_id)
            ancestor_id = ancestor.parent_id if ancestor else None

    # ===== ЗАПИСЬ =====

    async def create(self, data: TaskCreate) -> Task:
        await self._check_project(data.project_id)
        await self._check_parent(data.parent_id)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status.value,
            priority=data.priority.value,
            severity=data.severity.value,
            due_date=to_storage(data.due_date),
            project_id=data.project_id,
            parent_id=data.parent_id,
            user_id=self.user_id,
        )
        self.session.add(task)
        await self.session.commit()

        logger.info(f"📝 Создана задача {task.id} для пользователя {self.user_id}")
        return await self.get(task.id)

    async def update(self, task_id: str, data: TaskUpdate) -> Task:
        """
        Частичное обновление

        Пропущенные поля не меняются. Явный null в projectId/parentId
        отвязывает задачу от проекта или родителя.
        """
        task = await self.get(task_id)
        changes = data.model_dump(exclude_unset=True)

        for field in LINK_FIELDS:
            if field in changes and changes[field] is None:
                setattr(task, field, None)
        if changes.get("project_id"):
            await self._check_project(changes["project_id"])
        if changes.get("parent_id"):
            await self._check_parent(changes["parent_id"], task.id)
        for field in ("status", "priority", "severity"):
            if changes.get(field) is not None:
                changes[field] = changes[field].value
        if changes.get("due_date") is not None:
            changes["due_date"] = to_storage(changes["due_date"])

        apply_updates(task, changes)
        if "project_id" in changes:
            await self._drop_foreign_column(task)
        await self.session.commit()
        return await self.get(task_id)

    async def _drop_foreign_column(self, task: Task) -> None:
        """Колонка проекта остается только у задач этого проекта"""
        if not task.column_id:
            return
        column = await self.session.get(KanbanColumn, task.column_id)
        if column is not None and column.project_id and column.project_id != task.project_id:
            task.column_id = None

    async def delete(self, task_id: str) -> None:
        """Удаление задачи; подзадачи удаляются каскадом в БД"""
        task = await self.get(task_id)
        await self.session.delete(task)
        await self.session.commit()
        logger.info(f"🗑️ Удалена задача {task_id}")

    async def move(self, task_id: str, column_id: str) -> Task:
        """
        Перемещение задачи в колонку канбана

        Встроенная колонка меняет только статус. Пользовательская колонка
        задает статус из своего имени и должна относиться к проекту задачи.
        """
        task = await self.get(task_id)

        if column_id in DEFAULT_COLUMN_STATUS:
            task.status = DEFAULT_COLUMN_STATUS[column_id]
            task.column_id = None
        else:
            column = await get_owned(
                self.session, KanbanColumn, column_id, self.user_id, "Column"
            )
            if column.project_id and column.project_id != task.project_id:
                raise BadRequestError("Column does not belong to the task's project")
            task.status = column.status_key
            task.column_id = column.id

        await self.session.commit()
        logger.info(f"➡️ Задача {task_id} перемещена в {column_id} ({task.status})")
        return await self.get(task_id)
