from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from ..core.exceptions import BeaverError
from ..core.models import User
from ..dependencies import get_token, get_user_service, require_auth
from ..services.user_service import UserService
from ..shared.models import (
    MessageResponse,
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(require_auth)):
    """
    Профиль текущего пользователя с разобранными настройками
    """
    return {"user": UserService.profile(user)}


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(require_auth),
    users: UserService = Depends(get_user_service),
):
    """
    Обновить имя, email, аватар и настройки
    """
    try:
        updated = await users.update_profile(user, data)
        return {"user": UserService.profile(updated)}
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка обновления профиля: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.put("/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChangeRequest,
    user: User = Depends(require_auth),
    token: Optional[str] = Depends(get_token),
    users: UserService = Depends(get_user_service),
):
    """Смена пароля; прочие сессии пользователя завершаются"""
    try:
        await users.change_password(user, data.current_password, data.new_password, keep_token=token)
        return MessageResponse(message="Password updated")
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка смены пароля: {e}")
        raise HTTPException(status_code=500, detail="Failed to update password")
