"""
Сервис заметок

Теги хранятся одной строкой через запятую и отдаются списком.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from beaver_task.core.models import Note, Project, Task
from beaver_task.shared.models import NoteCreate, NoteUpdate
from beaver_task.services.common import get_owned

logger = logging.getLogger(__name__)

NOTE_LOAD_OPTIONS = (selectinload(Note.project), selectinload(Note.task))


def join_tags(tags: Optional[List[str]]) -> Optional[str]:
    if not tags:
        return None
    return ",".join(tags)


class NoteService:

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id

    @staticmethod
    def to_dict(note: Note) -> Dict[str, Any]:
        return {
            "id": note.id,
            "title": note.title,
            "content": note.content,
            "tags": note.tag_list,
            "project_id": note.project_id,
            "task_id": note.task_id,
            "project_name": note.project.name if note.project else None,
            "task_name": note.task.title if note.task else None,
            "created_at": note.created_at,
            "updated_at": note.updated_at,
        }

    async def list(
        self, project_id: Optional[str] = None, task_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        stmt = (
            select(Note)
            .where(Note.user_id == self.user_id)
            .options(*NOTE_LOAD_OPTIONS)
            .order_by(Note.created_at.desc())
            .execution_options(populate_existing=True)
        )
        if project_id:
            stmt = stmt.where(Note.project_id == project_id)
        if task_id:
            stmt = stmt.where(Note.task_id == task_id)
        notes = (await self.session.execute(stmt)).scalars().all()
        return [self.to_dict(note) for note in notes]

    async def get(self, note_id: str) -> Note:
        return await get_owned(
            self.session, Note, note_id, self.user_id, "Note", options=NOTE_LOAD_OPTIONS
        )

    async def _check_links(self, project_id: Optional[str], task_id: Optional[str]) -> None:
        if project_id:
            await get_owned(self.session, Project, project_id, self.user_id, "Project")
        if task_id:
            await get_owned(self.session, Task, task_id, self.user_id, "Task")

    async def create(self, data: NoteCreate) -> Dict[str, Any]:
        await self._check_links(data.project_id, data.task_id)

        note = Note(
            title=data.title,
            content=data.content,
            tags=join_tags(data.tags),
            project_id=data.project_id,
            task_id=data.task_id,
            user_id=self.user_id,
        )
        self.session.add(note)
        await self.session.commit()

        logger.info(f"🗒️ Создана заметка {note.id}")
        return self.to_dict(await self.get(note.id))

    async def update(self, note_id: str, data: NoteUpdate) -> Dict[str, Any]:
        note = await self.get(note_id)
        changes = data.model_dump(exclude_unset=True)
        await self._check_links(changes.get("project_id"), changes.get("task_id"))

        for field in ("title", "content"):
            if changes.get(field) is not None:
                setattr(note, field, changes[field])
        # Явный null отвязывает заметку от проекта или задачи
        for field in ("project_id", "task_id"):
            if field in changes:
                setattr(note, field, changes[field])
        # Пустой список тегов очищает теги
        if "tags" in changes and changes["tags"] is not None:
            note.tags = join_tags(changes["tags"])

        await self.session.commit()
        return self.to_dict(await self.get(note_id))

    async def delete(self, note_id: str) -> None:
        note = await self.get(note_id)
        await self.session.delete(note)
        await self.session.commit()
        logger.info(f"🗑️ Удалена заметка {note_id}")
