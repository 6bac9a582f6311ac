from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_project_service
from ..services.project_service import ProjectService
from ..shared.models import ProjectCreate, ProjectRead, ProjectUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ProjectRead])
async def list_projects(
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    service: ProjectService = Depends(get_project_service),
):
    """
    Проекты пользователя с организацией и кратким списком задач
    """
    try:
        return await service.list(organization_id=organization_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения проектов: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch projects")


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
):
    try:
        return await service.create(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания проекта: {e}")
        raise HTTPException(status_code=500, detail="Failed to create project")


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    try:
        return await service.get(project_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения проекта: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch project")


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    service: ProjectService = Depends(get_project_service),
):
    try:
        return await service.update(project_id, data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления проекта: {e}")
        raise HTTPException(status_code=500, detail="Failed to update project")


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    """
    Удалить проект (409, пока в нем есть задачи)
    """
    try:
        await service.delete(project_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления проекта: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete project")
