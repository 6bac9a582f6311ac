from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import Optional
import logging

from ..core.exceptions import BeaverError
from ..dependencies import get_token, get_user_service
from ..services.user_service import UserService
from ..shared.models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserBrief,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    users: UserService = Depends(get_user_service),
):
    """
    Регистрация по email и паролю
    """
    try:
        user = await users.register(data)
        return RegisterResponse(message="User created successfully", user_id=user.id)
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка регистрации: {e}")
        raise HTTPException(status_code=500, detail="Failed to register user")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    """
    Вход: создает сессию и возвращает bearer токен
    """
    try:
        user_session, user = await users.login(data.email, data.password)
        return LoginResponse(
            token=user_session.token,
            expires_at=user_session.expires,
            user=UserBrief.model_validate(user),
        )
    except (BeaverError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"❌ Ошибка входа: {e}")
        raise HTTPException(status_code=500, detail="Failed to log in")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: Optional[str] = Depends(get_token),
    users: UserService = Depends(get_user_service),
):
    """Завершить текущую сессию; без токена ничего не делает"""
    try:
        if token:
            await users.logout(token)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        logger.error(f"❌ Ошибка выхода: {e}")
        raise HTTPException(status_code=500, detail="Failed to log out")
