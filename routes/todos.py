"""Todo blueprint with CRUD endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from services import todo_service
from utils.authorization import authorize, require_self_or_admin
from utils.request_validation import (
    parse_json_request,
    parse_number,
    pick,
    raise_for_errors,
    string_errors,
)

todos_bp = Blueprint("todos", __name__)

TODO_FIELDS = ("title", "description", "duration")


def _validate_todo_payload(data: dict) -> dict:
    errors = string_errors(data, ("title", "description"), max_lengths={"title": 200})

    duration = data.get("duration")
    if duration is None or duration == "":
        errors.append("duration is required")
    else:
        duration = parse_number(duration)
        if duration is None:
            errors.append("duration must be a number")
    raise_for_errors(errors)

    return {**data, "duration": duration}


@todos_bp.route("", methods=["GET"])
def list_todos():
    return jsonify(todo_service.get_all())


@todos_bp.route("/<todo_id>", methods=["GET"])
@authorize()
def get_todo(todo_id: str):
    # the path id is compared with the caller id, not with an owner column
    require_self_or_admin(todo_id)
    return jsonify(todo_service.get_by_id(todo_id))


@todos_bp.route("", methods=["POST"])
@authorize()
def create_todo():
    data = _validate_todo_payload(pick(parse_json_request(request), TODO_FIELDS))
    return jsonify(todo_service.create(data)), HTTPStatus.CREATED


@todos_bp.route("/<todo_id>", methods=["PUT"])
@authorize()
def update_todo(todo_id: str):
    require_self_or_admin(todo_id)
    data = _validate_todo_payload(pick(parse_json_request(request), TODO_FIELDS))
    return jsonify(todo_service.update(todo_id, data))


@todos_bp.route("/<todo_id>", methods=["DELETE"])
@authorize()
def delete_todo(todo_id: str):
    require_self_or_admin(todo_id)
    todo_service.delete(todo_id)
    return jsonify({"message": "Todo deleted successfully"})
