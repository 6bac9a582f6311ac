from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_task_service
from ..services.task_service import TaskService
from ..shared.models import TaskCreate, TaskMoveRequest, TaskRead, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[TaskRead])
async def list_tasks(
    project_id: Optional[str] = Query(None, alias="projectId"),
    parent_id: Optional[str] = Query(None, alias="parentId"),
    status_filter: Optional[str] = Query(None, alias="status"),
    top_level: bool = Query(False, alias="topLevel"),
    service: TaskService = Depends(get_task_service),
):
    """
    Получить список задач пользователя, новые первыми
    """
    try:
        return await service.list(
            project_id=project_id,
            parent_id=parent_id,
            status=status_filter,
            top_level=top_level,
        )
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения задач: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """
    Создать задачу; projectId и parentId должны принадлежать пользователю
    """
    try:
        return await service.create(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания задачи: {e}")
        raise HTTPException(status_code=500, detail="Failed to create task")


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.get(task_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения задачи: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch task")


@router.get("/{task_id}/subtasks", response_model=List[TaskRead])
async def get_subtasks(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.subtasks(task_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения подзадач: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch subtasks")


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.update(task_id, data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления задачи: {e}")
        raise HTTPException(status_code=500, detail="Failed to update task")


@router.patch("/{task_id}/move", response_model=TaskRead)
async def move_task(
    task_id: str,
    data: TaskMoveRequest,
    service: TaskService = Depends(get_task_service),
):
    """
    Переместить задачу в колонку канбана
    """
    try:
        return await service.move(task_id, data.column_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка перемещения задачи: {e}")
        raise HTTPException(status_code=500, detail="Failed to move task")


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    try:
        await service.delete(task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления задачи: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete task")
