from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_organization_service
from ..services.organization_service import OrganizationService
from ..shared.models import (
    OrganizationCreate,
    OrganizationRead,
    OrganizationUpdate,
    ReorderRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[OrganizationRead])
async def list_organizations(
    service: OrganizationService = Depends(get_organization_service),
):
    """
    Организации пользователя со списком проектов
    """
    try:
        return await service.list()
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения организаций: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch organizations")


@router.post("", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
async def create_organization(
    data: OrganizationCreate,
    service: OrganizationService = Depends(get_organization_service),
):
    """
    Создать организацию; без order она встает в конец списка
    """
    try:
        return await service.create(data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка создания организации: {e}")
        raise HTTPException(status_code=500, detail="Failed to create organization")


@router.post("/reorder", response_model=List[OrganizationRead])
async def reorder_organizations(
    data: ReorderRequest,
    service: OrganizationService = Depends(get_organization_service),
):
    """Перетаскивание организации из позиции sourceIndex в destinationIndex"""
    try:
        return await service.reorder(data.source_index, data.destination_index)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка изменения порядка организаций: {e}")
        raise HTTPException(status_code=500, detail="Failed to reorder organizations")


@router.get("/{organization_id}", response_model=OrganizationRead)
async def get_organization(
    organization_id: str,
    service: OrganizationService = Depends(get_organization_service),
):
    try:
        return await service.get(organization_id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка получения организации: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch organization")


@router.put("/{organization_id}", response_model=OrganizationRead)
async def update_organization(
    organization_id: str,
    data: OrganizationUpdate,
    service: OrganizationService = Depends(get_organization_service),
):
    try:
        return await service.update(organization_id, data)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления организации: {e}")
        raise HTTPException(status_code=500, detail="Failed to update organization")


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(
    organization_id: str,
    service: OrganizationService = Depends(get_organization_service),
):
    """
    Удалить организацию (409, если у нее есть проекты)
    """
    try:
        await service.delete(organization_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка удаления организации: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete organization")
