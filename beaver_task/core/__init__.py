"""Ядро: модели SQLAlchemy, подключение к БД и ошибки предметной области"""
