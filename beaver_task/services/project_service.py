"""
Сервис проектов
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from beaver_task.core.exceptions import ConflictError
from beaver_task.core.models import Organization, Project, Task
from beaver_task.shared.models import ProjectCreate, ProjectUpdate
from beaver_task.services.common import apply_updates, count_where, get_owned
from beaver_task.utils.datetime_utils import to_storage

logger = logging.getLogger(__name__)

PROJECT_LOAD_OPTIONS = (
    selectinload(Project.organization),
    selectinload(Project.tasks),
)


class ProjectService:

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id

    async def list(self, organization_id: Optional[str] = None) -> List[Project]:
        stmt = (
            select(Project)
            .where(Project.user_id == self.user_id)
            .options(*PROJECT_LOAD_OPTIONS)
            .order_by(Project.created_at.desc())
            .execution_options(populate_existing=True)
        )
        if organization_id:
            stmt = stmt.where(Project.organization_id == organization_id)
        return list((await self.session.execute(stmt)).scalars().all())

    async def get(self, project_id: str) -> Project:
        return await get_owned(
            self.session, Project, project_id, self.user_id, "Project",
            options=PROJECT_LOAD_OPTIONS,
        )

    async def _check_organization(self, organization_id: Optional[str]) -> None:
        if organization_id:
            await get_owned(
                self.session, Organization, organization_id, self.user_id, "Organization"
            )

    async def create(self, data: ProjectCreate) -> Project:
        await self._check_organization(data.organization_id)

        project = Project(
            name=data.name,
            description=data.description,
            status=data.status.value,
            color=data.color,
            due_date=to_storage(data.due_date),
            organization_id=data.organization_id,
            user_id=self.user_id,
        )
        self.session.add(project)
        await self.session.commit()

        logger.info(f"📁 Создан проект {project.id}")
        return await self.get(project.id)

    async def update(self, project_id: str, data: ProjectUpdate) -> Project:
        project = await self.get(project_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("organization_id"):
            await self._check_organization(changes["organization_id"])
        if changes.get("status") is not None:
            changes["status"] = changes["status"].value
        if changes.get("due_date") is not None:
            changes["due_date"] = to_storage(changes["due_date"])

        apply_updates(project, changes)
        await self.session.commit()
        return await self.get(project_id)

    async def delete(self, project_id: str) -> None:
        """Удаление запрещено, пока в проекте есть задачи"""
        project = await self.get(project_id)

        tasks = await count_where(self.session, Task, Task.project_id == project.id)
        if tasks:
            raise ConflictError("Cannot delete project with existing tasks")

        await self.session.delete(project)
        await self.session.commit()
        logger.info(f"🗑️ Удален проект {project_id}")
