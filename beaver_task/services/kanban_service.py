"""
Сервис колонок канбана

Колонка без project_id принадлежит общей доске пользователя.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.core.exceptions import BadRequestError
from beaver_task.core.models import KanbanColumn, Project
from beaver_task.shared.models import ColumnCreate, ColumnUpdate
from beaver_task.services.common import apply_updates, get_owned
from beaver_task.utils.ordering import assign_order, reorder

logger = logging.getLogger(__name__)


class KanbanService:

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id

    async def list_columns(self, project_id: Optional[str] = None) -> List[KanbanColumn]:
        """Колонки общей доски и проектов пользователя, по order"""
        stmt = (
            select(KanbanColumn)
            .where(KanbanColumn.user_id == self.user_id)
            .order_by(KanbanColumn.order.asc(), KanbanColumn.created_at.asc())
            .execution_options(populate_existing=True)
        )
        if project_id:
            stmt = stmt.where(
                (KanbanColumn.project_id.is_(None)) | (KanbanColumn.project_id == project_id)
            )
        return list((await self.session.execute(stmt)).scalars().all())

    async def board(self, project_id: Optional[str]) -> List[KanbanColumn]:
        """Колонки одной доски: проекта или общей"""
        condition = (
            KanbanColumn.project_id == project_id
            if project_id else KanbanColumn.project_id.is_(None)
        )
        stmt = (
            select(KanbanColumn)
            .where(KanbanColumn.user_id == self.user_id, condition)
            .order_by(KanbanColumn.order.asc(), KanbanColumn.created_at.asc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_column(self, column_id: str) -> KanbanColumn:
        return await get_owned(self.session, KanbanColumn, column_id, self.user_id, "Column")

    async def create_column(self, data: ColumnCreate) -> KanbanColumn:
        if data.project_id:
            await get_owned(self.session, Project, data.project_id, self.user_id, "Project")

        column = KanbanColumn(
            name=data.name,
            color=data.color,
            order=data.order,
            project_id=data.project_id,
            user_id=self.user_id,
        )
        self.session.add(column)
        await self.session.commit()

        logger.info(f"🗂️ Создана колонка {column.id} ({column.name})")
        return column

    async def update_column(self, column_id: str, data: ColumnUpdate) -> KanbanColumn:
        column = await self.get_column(column_id)
        apply_updates(column, data.model_dump(exclude_unset=True))
        await self.session.commit()
        return await self.get_column(column_id)

    async def delete_column(self, column_id: str) -> None:
        """Задачи колонки остаются, column_id обнуляется в БД"""
        column = await self.get_column(column_id)
        await self.session.delete(column)
        await self.session.commit()
        logger.info(f"🗑️ Удалена колонка {column_id}")

    async def reorder_columns(
        self, source_index: int, destination_index: int, project_id: Optional[str] = None
    ) -> List[KanbanColumn]:
        """Drag-and-drop внутри одной доски"""
        if project_id:
            await get_owned(self.session, Project, project_id, self.user_id, "Project")

        columns = await self.board(project_id)
        try:
            ordered = reorder(columns, source_index, destination_index)
        except IndexError as e:
            raise BadRequestError(str(e))

        changed = assign_order(ordered)
        await self.session.commit()

        logger.info(f"↕️ Порядок колонок обновлен ({len(changed)} изменено)")
        return ordered
