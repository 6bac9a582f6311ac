from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_kanban_service
from ..services.kanban_service import KanbanService
from ..shared.models import ColumnCreate, ColumnRead, ColumnUpdate, ReorderRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ColumnRead])
async def list_columns(
    project_id: Optional[str] = Query(None, alias="projectId"),
    service: KanbanService = Depends(get_kanban_service),
):
    """
    Колонки канбана по возрастанию order

    С projectId - общая доска и колонки этого проекта.
    """
    try:
        return await service.list_columns(project_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения колонок: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch columns")


@router.post("", response_model=ColumnRead, status_code=status.HTTP_201_CREATED)
async def create_column(
    data: ColumnCreate,
    service: KanbanService = Depends(get_kanban_service),
):
    try:
        return await service.create_column(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания колонки: {e}")
        raise HTTPException(status_code=500, detail="Failed to create column")


@router.post("/reorder", response_model=List[ColumnRead])
async def reorder_columns(
    data: ReorderRequest,
    service: KanbanService = Depends(get_kanban_service),
):
    """Перетаскивание колонки внутри доски (projectId или общая доска)"""
    try:
        return await service.reorder_columns(
            data.source_index, data.destination_index, data.project_id
        )
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка изменения порядка колонок: {e}")
        raise HTTPException(status_code=500, detail="Failed to reorder columns")


@router.patch("/{column_id}", response_model=ColumnRead)
async def update_column(
    column_id: str,
    data: ColumnUpdate,
    service: KanbanService = Depends(get_kanban_service),
):
    try:
        return await service.update_column(column_id, data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления колонки: {e}")
        raise HTTPException(status_code=500, detail="Failed to update column")


@router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(
    column_id: str,
    service: KanbanService = Depends(get_kanban_service),
):
    try:
        await service.delete_column(column_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления колонки: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete column")
