from datetime import date, datetime, timedelta, timezone

import pytz

UTC = pytz.utc


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (формат хранения в БД)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage(dt):
    """Привести datetime к naive UTC; naive значения считаются UTC"""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def as_utc(dt):
    """Добавить tzinfo=UTC к значению из БД"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def now_local(tz) -> datetime:
    return datetime.now(tz)


def today_local(tz) -> date:
    """Календарный день "сегодня" в заданном часовом поясе"""
    return now_local(tz).date()


def local_date(dt: datetime, tz) -> date:
    """Календарный день момента времени (naive = UTC) в заданном поясе"""
    return as_utc(dt).astimezone(tz).date()


def local_midnight_utc(day: date, tz) -> datetime:
    """Полночь дня в заданном поясе, выраженная в naive UTC"""
    midnight = tz.localize(datetime.combine(day, datetime.min.time()))
    return to_storage(midnight)


def week_start_sunday(day: date) -> date:
    """Воскресенье текущей недели (неделя начинается с воскресенья)"""
    # weekday(): понедельник = 0 ... воскресенье = 6
    return day - timedelta(days=(day.weekday() + 1) % 7)
