import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

_configured = False


def setup_logging(settings, max_bytes: int = 10_000_000, backup_count: int = 5):
    """Настройка корневого логгера: консоль + файл с ротацией"""
    global _configured

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL))
    formatter = logging.Formatter(settings.LOG_FORMAT, datefmt=settings.LOG_DATE_FORMAT)

    # Повторный вызов (новое приложение в тестах) только меняет уровень
    if not _configured:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

        if settings.LOG_TO_FILE:
            log_file = Path(settings.LOGS_DIR) / "beaver_task.log"
            log_file.parent.mkdir(exist_ok=True, parents=True)
            handler = RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
            handler.setFormatter(formatter)
            root.addHandler(handler)

        _configured = True

    # Настройка логгеров внешних библиотек
    if not settings.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )
    return root
