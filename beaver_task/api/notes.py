from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_note_service
from ..services.note_service import NoteService
from ..shared.models import NoteCreate, NoteRead, NoteUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[NoteRead])
async def list_notes(
    project_id: Optional[str] = Query(None, alias="projectId"),
    task_id: Optional[str] = Query(None, alias="taskId"),
    service: NoteService = Depends(get_note_service),
):
    """
    Заметки пользователя с названиями связанных проекта и задачи
    """
    try:
        return await service.list(project_id=project_id, task_id=task_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения заметок: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch notes")


@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    data: NoteCreate,
    service: NoteService = Depends(get_note_service),
):
    try:
        return await service.create(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания заметки: {e}")
        raise HTTPException(status_code=500, detail="Failed to create note")


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
):
    try:
        return service.to_dict(await service.get(note_id))
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения заметки: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch note")


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    service: NoteService = Depends(get_note_service),
):
    try:
        return await service.update(note_id, data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления заметки: {e}")
        raise HTTPException(status_code=500, detail="Failed to update note")


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
):
    try:
        await service.delete(note_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления заметки: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete note")
