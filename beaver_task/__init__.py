"""
Beaver Task

Персональный планировщик: задачи и канбан, проекты и организации,
привычки со стриками, заметки, помодоро и календарь.
"""

__version__ = "1.0.0"
