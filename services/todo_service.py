"""Todo store."""

from __future__ import annotations

from typing import Any, Mapping

from models import db
from models.todo import Todo
from services.errors import NotFoundError
from utils.request_validation import parse_record_id

TODO_FIELDS = ("title", "description", "duration")


def get_all() -> list[dict[str, Any]]:
    return [todo.to_dict() for todo in Todo.query.order_by(Todo.id).all()]


def get_by_id(todo_id: int | str) -> dict[str, Any]:
    return _get_todo(todo_id).to_dict()


def create(params: Mapping[str, Any]) -> dict[str, Any]:
    todo = Todo(**{field: params[field] for field in TODO_FIELDS})
    db.session.add(todo)
    db.session.commit()
    return todo.to_dict()


def update(todo_id: int | str, params: Mapping[str, Any]) -> dict[str, Any]:
    todo = _get_todo(todo_id)

    for field in TODO_FIELDS:
        if params.get(field) is not None:
            setattr(todo, field, params[field])

    todo.touch()
    db.session.commit()
    return todo.to_dict()


def delete(todo_id: int | str) -> None:
    todo = _get_todo(todo_id)
    db.session.delete(todo)
    db.session.commit()


def _get_todo(todo_id: int | str) -> Todo:
    key = parse_record_id(todo_id)
    if key is None:
        raise NotFoundError("Todo not found")

    todo = db.session.get(Todo, key)
    if todo is None:
        raise NotFoundError("Todo not found")
    return todo
