# tests/test_notes.py
from __future__ import annotations


def test_create_note_with_links(client, auth):
    project = client.post("/api/projects", headers=auth, json={"name": "Lodge"}).json()
    task = client.post(
        "/api/tasks", headers=auth, json={"title": "Patch roof", "projectId": project["id"]}
    ).json()

    resp = client.post(
        "/api/notes",
        headers=auth,
        json={
            "title": "Roof",
            "content": "Mud and sticks",
            "tags": "build, urgent ,",
            "projectId": project["id"],
            "taskId": task["id"],
        },
    )
    assert resp.status_code == 201, resp.text
    note = resp.json()
    assert note["tags"] == ["build", "urgent"]
    assert note["projectName"] == "Lodge"
    assert note["taskName"] == "Patch roof"

    by_task = client.get("/api/notes", headers=auth, params={"taskId": task["id"]}).json()
    assert [n["id"] for n in by_task] == [note["id"]]


def test_tags_as_list_and_clearing(client, auth):
    note = client.post(
        "/api/notes", headers=auth, json={"title": "Ideas", "content": "...", "tags": ["a", " b "]}
    ).json()
    assert note["tags"] == ["a", "b"]

    resp = client.put(f"/api/notes/{note['id']}", headers=auth, json={"content": "More"})
    assert resp.json()["tags"] == ["a", "b"]
    assert resp.json()["title"] == "Ideas"

    resp = client.put(f"/api/notes/{note['id']}", headers=auth, json={"tags": []})
    assert resp.json()["tags"] == []


def test_note_requires_content(client, auth):
    resp = client.post("/api/notes", headers=auth, json={"title": "Empty", "content": ""})
    assert resp.status_code == 422


def test_deleting_task_keeps_note(client, auth):
    task = client.post("/api/tasks", headers=auth, json={"title": "Temp"}).json()
    note = client.post(
        "/api/notes", headers=auth, json={"title": "Log", "content": "x", "taskId": task["id"]}
    ).json()

    assert client.delete(f"/api/tasks/{task['id']}", headers=auth).status_code == 204
    kept = client.get(f"/api/notes/{note['id']}", headers=auth).json()
    assert kept["taskId"] is None
    assert kept["taskName"] is None


def test_notes_are_private(client, auth, other_auth):
    note = client.post("/api/notes", headers=auth, json={"title": "Secret", "content": "x"}).json()
    assert client.get(f"/api/notes/{note['id']}", headers=other_auth).status_code == 401
    assert client.get("/api/notes", headers=other_auth).json() == []
    assert client.delete(f"/api/notes/{note['id']}", headers=auth).status_code == 204
    assert client.get(f"/api/notes/{note['id']}", headers=auth).status_code == 404


def test_null_detaches_note(client, auth):
    project = client.post("/api/projects", headers=auth, json={"name": "Lodge"}).json()
    task = client.post("/api/tasks", headers=auth, json={"title": "Patch roof"}).json()
    note = client.post(
        "/api/notes",
        headers=auth,
        json={"title": "Roof", "content": "x", "projectId": project["id"], "taskId": task["id"]},
    ).json()

    resp = client.put(f"/api/notes/{note['id']}", headers=auth, json={"taskId": None})
    assert resp.status_code == 200
    assert resp.json()["taskId"] is None
    assert resp.json()["projectName"] == "Lodge"

    resp = client.put(f"/api/notes/{note['id']}", headers=auth, json={"projectId": None})
    assert resp.json()["projectId"] is None
    assert resp.json()["projectName"] is None
