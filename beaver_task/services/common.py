"""Общие помощники сервисов: загрузка сущности с проверкой владельца"""

from typing import Any, Iterable, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.core.exceptions import AuthorizationError, NotFoundError


async def get_owned(
    session: AsyncSession,
    model: Type[Any],
    entity_id: str,
    user_id: str,
    label: str,
    options: Iterable[Any] = (),
):
    """
    Получить сущность пользователя по id

    Нет записи -> NotFoundError, запись другого пользователя -> AuthorizationError.
    populate_existing перечитывает объект, уже лежащий в identity map.
    """
    stmt = (
        select(model)
        .where(model.id == entity_id)
        .options(*options)
        .execution_options(populate_existing=True)
    )
    entity = (await session.execute(stmt)).scalar_one_or_none()
    if entity is None:
        raise NotFoundError(f"{label} not found")
    if entity.user_id != user_id:
        raise AuthorizationError(f"{label} not found or unauthorized")
    return entity


async def count_where(session: AsyncSession, model: Type[Any], *criteria) -> int:
    stmt = select(func.count()).select_from(model).where(*criteria)
    return (await session.execute(stmt)).scalar_one()


def apply_updates(entity: Any, changes: dict, mapping: Optional[dict] = None) -> None:
    """Записать в сущность непустые поля частичного обновления"""
    mapping = mapping or {}
    for field, value in changes.items():
        if value is None:
            continue
        setattr(entity, mapping.get(field, field), value)
