# tests/test_pomodoro.py
from __future__ import annotations

import asyncio
import time

from beaver_task.services.timer_service import TimerService


# --- timer service ---------------------------------------------------------

def test_timer_counts_down_and_completes():
    ticks = []
    completed = []

    async def on_tick(user_id, time_left):
        ticks.append(time_left)

    async def on_complete(user_id, session_id):
        completed.append((user_id, session_id))

    async def scenario():
        timers = TimerService(tick_seconds=0.001, on_tick=on_tick, on_complete=on_complete)
        await timers.start("u1", 3, session_id="s1")
        assert timers.is_timer_active("u1")
        for _ in range(200):
            if completed:
                break
            await asyncio.sleep(0.005)
        return timers

    timers = asyncio.run(scenario())
    assert ticks == [2, 1, 0]
    assert completed == [("u1", "s1")]
    state = timers.get_state("u1")
    assert state.time_left == 0
    assert state.is_active is False
    assert not timers.is_timer_active("u1")


def test_timer_pause_resume_reset_sync():
    async def scenario():
        timers = TimerService(tick_seconds=10)
        await timers.start("u1", 100)
        paused = await timers.pause("u1")
        assert paused.is_active is False
        assert paused.time_left == 100

        timers.sync("u1", 42)
        resumed = await timers.resume("u1")
        assert resumed.is_active is True
        assert resumed.time_left == 42

        reset = await timers.reset("u1", 1500)
        assert reset.is_active is False
        assert reset.time_left == 1500
        assert reset.session_id is None

        await timers.start("u2", 100)
        await timers.cleanup_all_timers()
        assert timers.active_timers == {}
        assert timers.get_state("u2").is_active is False

    asyncio.run(scenario())


def test_resume_does_nothing_at_zero():
    async def scenario():
        timers = TimerService(tick_seconds=10)
        state = await timers.resume("idle")
        assert state.is_active is False
        assert not timers.is_timer_active("idle")

    asyncio.run(scenario())


# --- sessions API ----------------------------------------------------------

def test_session_lifecycle_and_focus_stats(client, auth):
    resp = client.post("/api/pomodoro", headers=auth, json={"duration": 25})
    assert resp.status_code == 201, resp.text
    focus = resp.json()
    assert focus["type"] == "FOCUS"
    assert focus["completed"] is False
    assert focus["endTime"] is None

    brk = client.post(
        "/api/pomodoro", headers=auth, json={"duration": 5, "type": "SHORT_BREAK"}
    ).json()

    assert client.get("/api/pomodoro/stats/today", headers=auth).json() == {
        "hours": 0.0, "minutes": 0, "sessions": 0,
    }

    done = client.patch(f"/api/pomodoro/{focus['id']}", headers=auth, json={"completed": True})
    assert done.status_code == 200
    assert done.json()["completed"] is True
    assert done.json()["endTime"] is not None
    client.patch(f"/api/pomodoro/{brk['id']}", headers=auth, json={})

    stats = client.get("/api/pomodoro/stats/today", headers=auth).json()
    assert stats == {"hours": 0.42, "minutes": 25, "sessions": 1}

    listed = client.get("/api/pomodoro", headers=auth, params={"limit": 1}).json()
    assert len(listed) == 1


def test_session_validation_and_ownership(client, auth, other_auth):
    assert client.post("/api/pomodoro", headers=auth, json={"duration": 0}).status_code == 422
    assert client.post(
        "/api/pomodoro", headers=auth, json={"duration": 25, "type": "NAP"}
    ).status_code == 422

    session = client.post("/api/pomodoro", headers=auth, json={"duration": 25}).json()
    assert client.delete(f"/api/pomodoro/{session['id']}", headers=other_auth).status_code == 401
    assert client.delete(f"/api/pomodoro/{session['id']}", headers=auth).status_code == 204


# --- timer API -------------------------------------------------------------

def test_timer_commands(client, auth):
    state = client.get("/api/pomodoro/timer", headers=auth).json()
    assert state == {"timeLeft": 0, "isActive": False, "sessionId": None}

    resp = client.post("/api/pomodoro/timer/reset", headers=auth)
    assert resp.json()["timeLeft"] == 25 * 60

    resp = client.post("/api/pomodoro/timer/sync", headers=auth, json={})
    assert resp.status_code == 400
    resp = client.post("/api/pomodoro/timer/sync", headers=auth, json={"seconds": 90})
    assert resp.json()["timeLeft"] == 90

    assert client.post("/api/pomodoro/timer/jump", headers=auth).status_code == 422


def test_timer_completion_marks_session_done(client, auth):
    session = client.post("/api/pomodoro", headers=auth, json={"duration": 1}).json()

    resp = client.post(
        "/api/pomodoro/timer/start",
        headers=auth,
        json={"seconds": 3, "sessionId": session["id"]},
    )
    assert resp.status_code == 200
    assert resp.json()["isActive"] is True
    assert resp.json()["sessionId"] == session["id"]

    # Тик в тестах 0.01 сек
    deadline = time.time() + 5
    while time.time() < deadline:
        sessions = client.get("/api/pomodoro", headers=auth).json()
        if sessions[0]["completed"]:
            break
        time.sleep(0.05)

    assert sessions[0]["completed"] is True
    state = client.get("/api/pomodoro/timer", headers=auth).json()
    assert state["timeLeft"] == 0
    assert state["isActive"] is False


def test_deleting_task_keeps_session(client, auth):
    task = client.post("/api/tasks", headers=auth, json={"title": "Write report"}).json()
    session = client.post(
        "/api/pomodoro", headers=auth, json={"duration": 25, "taskId": task["id"]}
    ).json()
    assert session["taskId"] == task["id"]

    assert client.delete(f"/api/tasks/{task['id']}", headers=auth).status_code == 204

    [kept] = client.get("/api/pomodoro", headers=auth).json()
    assert kept["id"] == session["id"]
    assert kept["taskId"] is None


def test_timer_state_for_unknown_user_is_not_stored():
    timers = TimerService(tick_seconds=10)
    state = timers.get_state("nobody")
    assert state.time_left == 0
    assert state.is_active is False
    assert timers.timers == {}

    timers.sync("somebody", 30)
    assert timers.get_state("somebody").time_left == 30
