"""
Сервис организаций

Организации упорядочены полем order (drag-and-drop); записи без order
идут после упорядоченных, новее - выше.
"""

import logging
from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from beaver_task.core.exceptions import BadRequestError, ConflictError
from beaver_task.core.models import Organization, Project
from beaver_task.shared.models import OrganizationCreate, OrganizationUpdate
from beaver_task.services.common import apply_updates, count_where, get_owned
from beaver_task.utils.ordering import assign_order, reorder

logger = logging.getLogger(__name__)


class OrganizationService:

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id

    def _query(self):
        return (
            select(Organization)
            .where(Organization.user_id == self.user_id)
            .options(selectinload(Organization.projects))
            .order_by(
                Organization.order.is_(None),
                Organization.order.asc(),
                Organization.created_at.desc(),
            )
            .execution_options(populate_existing=True)
        )

    async def list(self) -> List[Organization]:
        return list((await self.session.execute(self._query())).scalars().all())

    async def get(self, organization_id: str) -> Organization:
        return await get_owned(
            self.session, Organization, organization_id, self.user_id, "Organization",
            options=[selectinload(Organization.projects)],
        )

    async def _next_order(self) -> int:
        stmt = select(func.max(Organization.order)).where(Organization.user_id == self.user_id)
        current = (await self.session.execute(stmt)).scalar_one_or_none()
        return (current if current is not None else -1) + 1

    async def create(self, data: OrganizationCreate) -> Organization:
        values = data.model_dump()
        if values["order"] is None:
            values["order"] = await self._next_order()

        organization = Organization(user_id=self.user_id, **values)
        self.session.add(organization)
        await self.session.commit()

        logger.info(f"🏢 Создана организация {organization.id} (order={organization.order})")
        return await self.get(organization.id)

    async def update(self, organization_id: str, data: OrganizationUpdate) -> Organization:
        organization = await self.get(organization_id)
        apply_updates(organization, data.model_dump(exclude_unset=True))
        await self.session.commit()
        return await self.get(organization_id)

    async def delete(self, organization_id: str) -> None:
        """Удаление запрещено, пока у организации есть проекты"""
        organization = await self.get(organization_id)

        projects = await count_where(
            self.session, Project, Project.organization_id == organization.id
        )
        if projects:
            raise ConflictError("Cannot delete organization with existing projects")

        removed_order = organization.order
        await self.session.delete(organization)

        # Сдвигаем вверх организации, стоявшие ниже удаленной
        if removed_order is not None:
            await self.session.execute(
                update(Organization)
                .where(
                    Organization.user_id == self.user_id,
                    Organization.order > removed_order,
                )
                .values(order=Organization.order - 1)
                .execution_options(synchronize_session=False)
            )

        await self.session.commit()
        logger.info(f"🗑️ Удалена организация {organization_id}")

    async def reorder(self, source_index: int, destination_index: int) -> List[Organization]:
        organizations = await self.list()
        try:
            ordered = reorder(organizations, source_index, destination_index)
        except IndexError as e:
            raise BadRequestError(str(e))

        changed = assign_order(ordered)
        await self.session.commit()

        logger.info(f"↕️ Порядок организаций обновлен ({len(changed)} изменено)")
        return await self.list()
