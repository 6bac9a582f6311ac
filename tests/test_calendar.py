# tests/test_calendar.py
from __future__ import annotations

import asyncio
from datetime import timedelta

from beaver_task.core.database import close_database, init_database
from beaver_task.core.models import Habit, HabitEntry, User
from beaver_task.services.calendar_service import CalendarService
from beaver_task.utils.datetime_utils import today_local


def _events_by_type(client, auth):
    events = client.get("/api/calendar/events", headers=auth).json()
    grouped = {}
    for event in events:
        grouped.setdefault(event["extendedProps"]["type"], []).append(event)
    return grouped


def test_empty_calendar(client, auth):
    assert client.get("/api/calendar/events", headers=auth).json() == []


def test_calendar_collects_all_sources(client, auth):
    project = client.post(
        "/api/projects",
        headers=auth,
        json={"name": "Lodge", "dueDate": "2026-12-24T00:00:00Z", "color": "#a16207"},
    ).json()
    client.post(
        "/api/tasks",
        headers=auth,
        json={
            "title": "Stack logs",
            "status": "IN_PROGRESS",
            "dueDate": "2026-12-20T00:00:00Z",
            "projectId": project["id"],
        },
    )
    # Задача без срока в календарь не попадает
    client.post("/api/tasks", headers=auth, json={"title": "Someday"})

    for name in ("Swim", "Gnaw"):
        habit = client.post("/api/habits", headers=auth, json={"name": name}).json()
        client.post(f"/api/habits/{habit['id']}/toggle", headers=auth, json={"completed": True})

    session = client.post("/api/pomodoro", headers=auth, json={"duration": 25}).json()
    client.patch(f"/api/pomodoro/{session['id']}", headers=auth, json={"completed": True})
    # Незавершенная сессия не показывается
    client.post("/api/pomodoro", headers=auth, json={"duration": 25})

    grouped = _events_by_type(client, auth)

    [task_event] = grouped["task"]
    assert task_event["title"] == "Stack logs"
    assert task_event["allDay"] is True
    assert task_event["backgroundColor"] == "#f59e0b"
    assert task_event["start"].startswith("2026-12-20")

    [project_event] = grouped["project"]
    assert project_event["title"] == "📁 Lodge"
    assert project_event["backgroundColor"] == "#a16207"

    [habit_event] = grouped["habits"]
    assert habit_event["title"] == "✅ Gnaw, Swim"
    assert habit_event["extendedProps"]["count"] == 2

    [pomodoro_event] = grouped["pomodoro"]
    assert pomodoro_event["title"] == "🍅 FOCUS (25min)"
    assert pomodoro_event["end"] is not None


def test_calendar_is_per_user(client, auth, other_auth):
    client.post("/api/tasks", headers=auth, json={"title": "Mine", "dueDate": "2026-12-20T00:00:00Z"})
    assert client.get("/api/calendar/events", headers=other_auth).json() == []


def test_dashboard_summary(client, auth):
    org = client.post("/api/organizations", headers=auth, json={"name": "Acme"}).json()
    client.post("/api/projects", headers=auth, json={"name": "A", "organizationId": org["id"]})
    client.post("/api/projects", headers=auth, json={"name": "B", "status": "COMPLETED"})
    client.post("/api/tasks", headers=auth, json={"title": "One"})
    client.post("/api/tasks", headers=auth, json={"title": "Two", "status": "COMPLETED"})
    habit = client.post("/api/habits", headers=auth, json={"name": "Swim"}).json()
    client.post(f"/api/habits/{habit['id']}/toggle", headers=auth, json={"completed": True})
    client.post("/api/notes", headers=auth, json={"title": "N", "content": "c"})

    summary = client.get("/api/dashboard/summary", headers=auth).json()
    assert summary["tasksTotal"] == 2
    assert summary["tasksByStatus"] == {"TODO": 1, "COMPLETED": 1}
    assert summary["projectsTotal"] == 2
    assert summary["activeProjects"] == 1
    assert summary["organizationsTotal"] == 1
    assert summary["habitsTotal"] == 1
    assert summary["habitsCompletedToday"] == 1
    assert summary["notesTotal"] == 1
    assert summary["focusHoursToday"] == 0.0


def test_habit_window_covers_configured_days(settings):
    today = today_local(settings.tz)
    oldest = today - timedelta(days=settings.CALENDAR_HABIT_DAYS - 1)

    async def scenario():
        factory = await init_database(settings)
        try:
            async with factory() as session:
                user = User(email="window@example.com", name="Window")
                session.add(user)
                await session.flush()
                habit = Habit(name="Swim", user_id=user.id)
                session.add(habit)
                await session.flush()
                for day in (oldest, oldest - timedelta(days=1)):
                    session.add(HabitEntry(habit_id=habit.id, user_id=user.id, day=day, completed=True))
                await session.commit()

                return await CalendarService(session, user.id, settings).habit_events()
        finally:
            await close_database()

    events = asyncio.run(scenario())
    assert [event["id"] for event in events] == [f"habits-{oldest.isoformat()}"]
