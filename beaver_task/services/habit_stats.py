"""
Статистика привычек

Все функции работают с календарными днями, уже приведенными к
часовому поясу сервиса.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Set, Tuple

from beaver_task.utils.datetime_utils import week_start_sunday


def completed_days(entries: Iterable[Tuple[date, bool]]) -> Set[date]:
    return {day for day, completed in entries if completed}


def current_streak(done: Set[date], today: date) -> int:
    """Подряд идущие выполненные дни, заканчивая сегодняшним"""
    streak = 0
    day = today
    while day in done:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(done: Set[date]) -> int:
    best = 0
    for day in done:
        # Считаем только от начала серии
        if day - timedelta(days=1) in done:
            continue
        length = 1
        while day + timedelta(days=length) in done:
            length += 1
        best = max(best, length)
    return best


def weekly_progress(done: Set[date], today: date) -> List[bool]:
    """Семь флагов текущей недели, начиная с воскресенья"""
    start = week_start_sunday(today)
    return [start + timedelta(days=offset) in done for offset in range(7)]


def completion_rate(total_completed: int, created_day: date, today: date) -> float:
    """Процент выполненных дней с дня создания по сегодня включительно"""
    total_days = (today - created_day).days + 1
    if total_days <= 0:
        return 0.0
    return round(total_completed / total_days * 100, 2)


def compute_habit_stats(
    entries: Iterable[Tuple[date, bool]], created_day: date, today: date
) -> Dict[str, object]:
    done = completed_days(entries)
    return {
        "completed_today": today in done,
        "streak": current_streak(done, today),
        "longest_streak": longest_streak(done),
        "weekly_progress": weekly_progress(done, today),
        "total_completed_days": len(done),
        "completion_rate": completion_rate(len(done), created_day, today),
    }
