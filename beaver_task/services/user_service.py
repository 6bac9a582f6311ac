"""
Сервис пользователей: регистрация, вход по паролю, сессии и профиль
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from beaver_task.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    ValidationError,
)
from beaver_task.core.models import User, UserSession
from beaver_task.shared.models import ProfileUpdate, RegisterRequest
from beaver_task.utils.datetime_utils import utcnow
from beaver_task.utils.security import (
    generate_session_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class UserService:
    """Учетные записи и сессии пользователей"""

    def __init__(self, session: AsyncSession, settings):
        self.session = session
        self.settings = settings

    # ===== РЕГИСТРАЦИЯ И ВХОД =====

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.lower())
        return (await self.session.execute(stmt)).scalar_one_or_none()

    def _check_password(self, password: str) -> None:
        if len(password) < self.settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {self.settings.PASSWORD_MIN_LENGTH} characters"
            )

    async def register(self, data: RegisterRequest) -> User:
        """Создать пользователя; email уникален без учета регистра"""
        self._check_password(data.password)

        if await self.get_by_email(data.email):
            raise ConflictError("User already exists")

        user = User(
            name=data.name,
            email=data.email.lower(),
            password=hash_password(data.password, self.settings.PASSWORD_HASH_ITERATIONS),
        )
        self.session.add(user)
        await self.session.commit()

        logger.info(f"👤 Зарегистрирован пользователь {user.id}")
        return user

    async def login(self, email: str, password: str) -> Tuple[UserSession, User]:
        user = await self.get_by_email(email)
        if not user or not user.password or not verify_password(password, user.password):
            logger.warning(f"🔒 Неудачная попытка входа: {email}")
            raise AuthorizationError("Invalid email or password")

        user_session = UserSession(
            token=generate_session_token(),
            user_id=user.id,
            expires=utcnow() + timedelta(seconds=self.settings.SESSION_TIMEOUT),
        )
        self.session.add(user_session)
        await self.session.commit()

        logger.info(f"🔑 Вход пользователя {user.id}")
        return user_session, user

    async def logout(self, token: str) -> None:
        await self.session.execute(delete(UserSession).where(UserSession.token == token))
        await self.session.commit()

    async def resolve_token(self, token: str) -> Optional[User]:
        """Пользователь по токену сессии; просроченная сессия удаляется"""
        stmt = select(UserSession).where(UserSession.token == token)
        user_session = (await self.session.execute(stmt)).scalar_one_or_none()
        if user_session is None:
            return None

        if user_session.expires <= utcnow():
            await self.session.delete(user_session)
            await self.session.commit()
            logger.info(f"⌛ Сессия пользователя {user_session.user_id} истекла")
            return None

        return user_session.user

    # ===== ПРОФИЛЬ =====

    @staticmethod
    def profile(user: User) -> dict:
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "image": user.image,
            "settings": user.get_settings(),
        }

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        email = data.email.lower()
        if email != user.email:
            existing = await self.get_by_email(email)
            if existing and existing.id != user.id:
                raise ConflictError("Email already taken")

        user.name = data.name
        user.email = email
        user.image = data.image
        if data.settings is not None:
            # Неизвестные ключи сохраненного блоба не теряются
            merged = user.get_settings()
            merged.update(data.settings.model_dump(by_alias=True, mode="json"))
            user.set_settings(merged)

        await self.session.commit()
        logger.info(f"📝 Профиль пользователя {user.id} обновлен")
        return user

    async def change_password(
        self, user: User, current_password: str, new_password: str, keep_token: Optional[str] = None
    ) -> None:
        if not user.password or not verify_password(current_password, user.password):
            raise BadRequestError("Current password is incorrect")
        self._check_password(new_password)

        user.password = hash_password(new_password, self.settings.PASSWORD_HASH_ITERATIONS)
        # Остальные сессии пользователя завершаются
        await self.session.execute(
            delete(UserSession).where(
                UserSession.user_id == user.id, UserSession.token != (keep_token or "")
            )
        )
        await self.session.commit()
        logger.info(f"🔐 Пароль пользователя {user.id} изменен")
