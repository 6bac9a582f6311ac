"""
Исключения предметной области Beaver Task

Каждое исключение несет HTTP статус, в который его превращает
обработчик ошибок приложения.
"""


class BeaverError(Exception):
    """Базовое исключение сервиса"""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(BeaverError):
    """Сущность не найдена"""
    status_code = 404


class AuthorizationError(BeaverError):
    """Нет сессии или сущность принадлежит другому пользователю"""
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ConflictError(BeaverError):
    """Конфликт состояния: дубликат или блокирующие дочерние записи"""
    status_code = 409


class BadRequestError(BeaverError):
    """Некорректный запрос, который прошел валидацию схемы"""
    status_code = 400


class ValidationError(BeaverError):
    """Ошибка валидации данных"""
    status_code = 422
