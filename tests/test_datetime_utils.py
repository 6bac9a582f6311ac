# tests/test_datetime_utils.py
from __future__ import annotations

from datetime import date, datetime

import pytz

from beaver_task.utils.datetime_utils import (
    as_utc,
    local_date,
    local_midnight_utc,
    to_storage,
    week_start_sunday,
)


def test_storage_round_trip_keeps_instant():
    moscow = pytz.timezone("Europe/Moscow").localize(datetime(2026, 10, 18, 3, 0))
    stored = to_storage(moscow)
    assert stored == datetime(2026, 10, 18, 0, 0)
    assert stored.tzinfo is None
    assert as_utc(stored) == moscow


def test_naive_values_are_treated_as_utc():
    naive = datetime(2026, 10, 18, 12, 0)
    assert to_storage(naive) == naive
    assert as_utc(naive).tzinfo is not None
    assert to_storage(None) is None
    assert as_utc(None) is None


def test_local_day_boundaries():
    tz = pytz.timezone("America/New_York")
    # 02:00 UTC 18 октября - еще 17 октября в Нью-Йорке
    assert local_date(datetime(2026, 10, 18, 2, 0), tz) == date(2026, 10, 17)
    assert local_midnight_utc(date(2026, 10, 18), tz) == datetime(2026, 10, 18, 4, 0)


def test_week_starts_on_sunday():
    assert week_start_sunday(date(2026, 10, 18)) == date(2026, 10, 18)
    assert week_start_sunday(date(2026, 10, 24)) == date(2026, 10, 18)
    assert week_start_sunday(date(2026, 10, 19)) == date(2026, 10, 18)
