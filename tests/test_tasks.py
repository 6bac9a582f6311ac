# tests/test_tasks.py
from __future__ import annotations

import pytest


@pytest.fixture()
def project(client, auth):
    resp = client.post("/api/projects", headers=auth, json={"name": "Dam"})
    assert resp.status_code == 201
    return resp.json()


def _create_task(client, auth, **payload):
    resp = client.post("/api/tasks", headers=auth, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_task_defaults(client, auth, project):
    task = _create_task(client, auth, title="Gather logs", projectId=project["id"])
    assert task["status"] == "TODO"
    assert task["priority"] == "P1"
    assert task["severity"] == "S1"
    assert task["project"] == {"id": project["id"], "name": "Dam"}
    assert task["parentId"] is None

    fetched = client.get(f"/api/tasks/{task['id']}", headers=auth).json()
    assert fetched["title"] == "Gather logs"


def test_task_filters(client, auth, project):
    _create_task(client, auth, title="A", projectId=project["id"], status="ACTIVE")
    _create_task(client, auth, title="B", projectId=project["id"])
    _create_task(client, auth, title="C")

    in_project = client.get("/api/tasks", headers=auth, params={"projectId": project["id"]}).json()
    assert sorted(t["title"] for t in in_project) == ["A", "B"]

    active = client.get("/api/tasks", headers=auth, params={"status": "ACTIVE"}).json()
    assert [t["title"] for t in active] == ["A"]


def test_foreign_project_is_unauthorized(client, auth, other_auth, project):
    resp = client.post(
        "/api/tasks", headers=other_auth, json={"title": "Sneaky", "projectId": project["id"]}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Project not found or unauthorized"


def test_foreign_task_is_unauthorized(client, auth, other_auth):
    task = _create_task(client, auth, title="Mine")
    assert client.get(f"/api/tasks/{task['id']}", headers=other_auth).status_code == 401
    assert client.delete(f"/api/tasks/{task['id']}", headers=other_auth).status_code == 401
    assert client.get("/api/tasks", headers=other_auth).json() == []


def test_missing_task_is_not_found(client, auth):
    resp = client.get("/api/tasks/does-not-exist", headers=auth)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Task not found"


def test_partial_update(client, auth):
    task = _create_task(
        client, auth, title="Chew", description="Birch", dueDate="2026-11-01T08:30:00+02:00"
    )
    resp = client.patch(f"/api/tasks/{task['id']}", headers=auth, json={"priority": "P0"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["priority"] == "P0"
    assert body["description"] == "Birch"
    assert body["dueDate"].startswith("2026-11-01T06:30:00")


def test_subtasks_and_cascade_delete(client, auth):
    parent = _create_task(client, auth, title="Build dam")
    child = _create_task(client, auth, title="Cut tree", parentId=parent["id"])
    grandchild = _create_task(client, auth, title="Sharpen teeth", parentId=child["id"])

    subtasks = client.get(f"/api/tasks/{parent['id']}/subtasks", headers=auth).json()
    assert [t["id"] for t in subtasks] == [child["id"]]

    top = client.get("/api/tasks", headers=auth, params={"topLevel": "true"}).json()
    assert [t["id"] for t in top] == [parent["id"]]

    assert client.delete(f"/api/tasks/{parent['id']}", headers=auth).status_code == 204
    assert client.get(f"/api/tasks/{child['id']}", headers=auth).status_code == 404
    assert client.get(f"/api/tasks/{grandchild['id']}", headers=auth).status_code == 404


def test_parent_checks(client, auth):
    resp = client.post("/api/tasks", headers=auth, json={"title": "Orphan", "parentId": "missing"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Parent task not found"

    parent = _create_task(client, auth, title="Parent")
    child = _create_task(client, auth, title="Child", parentId=parent["id"])

    resp = client.patch(f"/api/tasks/{parent['id']}", headers=auth, json={"parentId": parent["id"]})
    assert resp.status_code == 400
    resp = client.patch(f"/api/tasks/{parent['id']}", headers=auth, json={"parentId": child["id"]})
    assert resp.status_code == 400


def test_move_to_default_column(client, auth):
    task = _create_task(client, auth, title="Swim")
    resp = client.patch(
        f"/api/tasks/{task['id']}/move", headers=auth, json={"columnId": "in_progress"}
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "IN_PROGRESS"
    assert resp.json()["columnId"] is None

    resp = client.patch(f"/api/tasks/{task['id']}/move", headers=auth, json={"columnId": "completed"})
    assert resp.json()["status"] == "COMPLETED"


def test_move_to_custom_column(client, auth, project):
    column = client.post(
        "/api/tasks/columns",
        headers=auth,
        json={"name": "Code Review", "color": "#8b5cf6", "order": 0, "projectId": project["id"]},
    ).json()
    task = _create_task(client, auth, title="Review", projectId=project["id"])

    resp = client.patch(f"/api/tasks/{task['id']}/move", headers=auth, json={"columnId": column["id"]})
    assert resp.status_code == 200
    assert resp.json()["status"] == "CODE_REVIEW"
    assert resp.json()["columnId"] == column["id"]

    # Задача вне проекта колонки не переносится
    stray = _create_task(client, auth, title="Stray")
    resp = client.patch(f"/api/tasks/{stray['id']}/move", headers=auth, json={"columnId": column["id"]})
    assert resp.status_code == 400

    # Удаление колонки оставляет задачу
    assert client.delete(f"/api/tasks/columns/{column['id']}", headers=auth).status_code == 204
    kept = client.get(f"/api/tasks/{task['id']}", headers=auth).json()
    assert kept["columnId"] is None
    assert kept["status"] == "CODE_REVIEW"


def test_move_to_unknown_column(client, auth):
    task = _create_task(client, auth, title="Lost")
    resp = client.patch(f"/api/tasks/{task['id']}/move", headers=auth, json={"columnId": "nowhere"})
    assert resp.status_code == 404


def test_changing_project_drops_foreign_column(client, auth, project):
    other = client.post("/api/projects", headers=auth, json={"name": "Pond"}).json()
    column = client.post(
        "/api/tasks/columns",
        headers=auth,
        json={"name": "Review", "color": "#8b5cf6", "order": 0, "projectId": project["id"]},
    ).json()
    shared = client.post(
        "/api/tasks/columns", headers=auth, json={"name": "Blocked", "color": "#ef4444", "order": 1}
    ).json()
    task = _create_task(client, auth, title="Migrate", projectId=project["id"])
    client.patch(f"/api/tasks/{task['id']}/move", headers=auth, json={"columnId": column["id"]})

    resp = client.patch(f"/api/tasks/{task['id']}", headers=auth, json={"projectId": other["id"]})
    assert resp.status_code == 200
    assert resp.json()["projectId"] == other["id"]
    assert resp.json()["columnId"] is None

    # Колонка общей доски подходит любому проекту
    client.patch(f"/api/tasks/{task['id']}/move", headers=auth, json={"columnId": shared["id"]})
    resp = client.patch(f"/api/tasks/{task['id']}", headers=auth, json={"projectId": project["id"]})
    assert resp.json()["columnId"] == shared["id"]


def test_null_clears_project_and_parent(client, auth, project):
    parent = _create_task(client, auth, title="Parent", projectId=project["id"])
    child = _create_task(client, auth, title="Child", projectId=project["id"], parentId=parent["id"])

    resp = client.patch(
        f"/api/tasks/{child['id']}", headers=auth, json={"projectId": None, "parentId": None}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["projectId"] is None
    assert body["parentId"] is None
    assert body["project"] is None
    assert body["title"] == "Child"

    top = client.get("/api/tasks", headers=auth, params={"topLevel": "true"}).json()
    assert sorted(t["title"] for t in top) == ["Child", "Parent"]


def test_omitted_links_stay(client, auth, project):
    parent = _create_task(client, auth, title="Parent")
    child = _create_task(client, auth, title="Child", projectId=project["id"], parentId=parent["id"])

    resp = client.patch(f"/api/tasks/{child['id']}", headers=auth, json={"title": "Renamed"})
    assert resp.json()["projectId"] == project["id"]
    assert resp.json()["parentId"] == parent["id"]
