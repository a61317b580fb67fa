"""Tests for the todo CRUD routes."""

from __future__ import annotations

import pytest

from models import db
from models.todo import Todo
from models.user import ROLE_ADMIN

TODO_PAYLOAD = {
    "title": "Write report",
    "description": "Quarterly numbers",
    "duration": 90,
}


@pytest.fixture()
def admin_headers(make_user, auth_headers):
    return auth_headers(make_user("admin@example.com", role=ROLE_ADMIN))


def _create_todo(app, **overrides) -> int:
    with app.app_context():
        todo = Todo(**{**TODO_PAYLOAD, **overrides})
        db.session.add(todo)
        db.session.commit()
        return todo.id


def test_list_todos_is_public(client, app):
    _create_todo(app)
    _create_todo(app, title="Second")

    response = client.get("/todos")

    assert response.status_code == 200
    assert [todo["title"] for todo in response.get_json()] == ["Write report", "Second"]


def test_create_requires_token(client):
    response = client.post("/todos", json=TODO_PAYLOAD)

    assert response.status_code == 401
    assert response.get_json()["message"] == "Unauthorized"


def test_any_authenticated_user_can_create(client, make_user, auth_headers):
    headers = auth_headers(make_user("user@example.com"))

    response = client.post(
        "/todos",
        json={**TODO_PAYLOAD, "duration": "1.5", "owner": "ignored"},
        headers=headers,
    )

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["title"] == "Write report"
    assert payload["duration"] == 1.5
    assert payload["created_at"]
    assert payload["updated_at"] is None
    assert "owner" not in payload


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"title": ""}, "title is required"),
        ({"description": None}, "description is required"),
        ({"duration": "soon"}, "duration must be a number"),
        ({"duration": True}, "duration must be a number"),
    ],
)
def test_create_validates_payload(client, admin_headers, overrides, fragment):
    response = client.post("/todos", json={**TODO_PAYLOAD, **overrides}, headers=admin_headers)

    assert response.status_code == 400
    assert fragment in response.get_json()["message"]


def test_admin_gets_updates_and_deletes_any_todo(client, app, admin_headers):
    todo_id = _create_todo(app)
    _create_todo(app, title="Other")
    other_id = todo_id + 1

    fetched = client.get(f"/todos/{other_id}", headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.get_json()["title"] == "Other"

    updated = client.put(
        f"/todos/{other_id}",
        json={"title": "Renamed", "description": "New", "duration": 15},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.get_json()["title"] == "Renamed"
    assert updated.get_json()["duration"] == 15
    assert updated.get_json()["updated_at"] is not None

    deleted = client.delete(f"/todos/{other_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.get_json() == {"message": "Todo deleted successfully"}

    with app.app_context():
        assert db.session.get(Todo, other_id) is None


def test_update_requires_all_fields(client, app, admin_headers):
    todo_id = _create_todo(app)

    response = client.put(f"/todos/{todo_id}", json={"title": "Only"}, headers=admin_headers)

    assert response.status_code == 400


def test_non_admin_access_compares_path_id_with_caller_id(client, app, make_user, auth_headers):
    """A regular caller only reaches the todo whose id equals their own user id."""

    make_user("admin@example.com", role=ROLE_ADMIN)
    user_id = make_user("user@example.com")
    headers = auth_headers(user_id)
    for index in range(user_id + 1):
        _create_todo(app, title=f"Todo {index + 1}")

    matching = client.get(f"/todos/{user_id}", headers=headers)
    assert matching.status_code == 200
    assert matching.get_json()["id"] == user_id

    other = user_id + 1
    assert client.get(f"/todos/{other}", headers=headers).status_code == 401
    assert client.put(f"/todos/{other}", json=TODO_PAYLOAD, headers=headers).status_code == 401
    assert client.delete(f"/todos/{other}", headers=headers).status_code == 401

    with app.app_context():
        assert db.session.get(Todo, other) is not None


@pytest.mark.parametrize("todo_id", ["42", "not-an-id", "99999999999999999999"])
def test_unknown_or_malformed_todo_id_is_not_found(client, admin_headers, todo_id):
    for method in ("get", "delete"):
        response = getattr(client, method)(f"/todos/{todo_id}", headers=admin_headers)
        assert response.status_code == 404
        assert response.get_json()["message"] == "Todo not found"

    response = client.put(f"/todos/{todo_id}", json=TODO_PAYLOAD, headers=admin_headers)
    assert response.status_code == 404
