"""User blueprint: account workflows and user administration."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from models.user import ROLE_ADMIN, ROLES
from services import user_service
from utils.authorization import authorize, require_self_or_admin
from utils.request_validation import (
    email_errors,
    normalize_email,
    parse_json_request,
    password_errors,
    pick,
    raise_for_errors,
    string_errors,
)

users_bp = Blueprint("users", __name__)

PROFILE_FIELDS = ("title", "first_name", "last_name")
PASSWORD_FIELDS = ("password", "confirm_password")
PROFILE_MAX_LENGTHS = {"title": 32, "first_name": 120, "last_name": 120}


def _origin() -> str | None:
    """Return the request origin when it is one of the configured CORS origins."""

    origin = request.headers.get("Origin")
    allowed = current_app.config.get("CORS_ORIGINS")
    if not origin or not isinstance(allowed, (list, tuple, set)):
        return None
    return origin if origin in allowed else None


def _with_normalized_email(data: dict) -> dict:
    if isinstance(data.get("email"), str):
        data["email"] = normalize_email(data["email"])
    return data


def _role_errors(data: dict, *, required: bool) -> list[str]:
    role = data.get("role")
    if role is None or role == "":
        return ["role is required"] if required else []
    if role not in ROLES:
        return ["role must be one of: {}".format(", ".join(ROLES))]
    return []


@users_bp.route("/authenticate", methods=["POST"])
def authenticate():
    """Exchange email and password for a bearer token."""

    data = pick(parse_json_request(request), ("email", "password"), raw=("password",))
    raise_for_errors(string_errors(data, ("email", "password")))

    result = user_service.authenticate(normalize_email(data["email"]), data["password"])
    if result is None:
        return jsonify({"message": "Email or password is incorrect"}), HTTPStatus.BAD_REQUEST
    return jsonify(result)


@users_bp.route("/register", methods=["POST"])
def register():
    """Register an account; the response never reveals whether the email exists."""

    data = pick(
        parse_json_request(request),
        PROFILE_FIELDS + ("email",) + PASSWORD_FIELDS + ("accept_terms",),
        raw=PASSWORD_FIELDS,
    )
    errors = string_errors(data, PROFILE_FIELDS, max_lengths=PROFILE_MAX_LENGTHS)
    errors += email_errors(data)
    errors += password_errors(data)
    if data.get("accept_terms") is not True:
        errors.append("accept_terms must be true")
    raise_for_errors(errors)

    user_service.register(_with_normalized_email(data), _origin())
    return jsonify(
        {
            "message": (
                "Registration successful, please check your email "
                "for verification instructions"
            )
        }
    )


@users_bp.route("/verify-email", methods=["POST"])
def verify_email():
    data = pick(parse_json_request(request), ("token",))
    raise_for_errors(string_errors(data, ("token",)))

    user_service.verify_email(data["token"])
    return jsonify({"message": "Verification successful, you can now login"})


@users_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    data = pick(parse_json_request(request), ("email",))
    raise_for_errors(email_errors(data))

    user_service.forgot_password(normalize_email(data["email"]), _origin())
    return jsonify({"message": "Please check your email for password reset instructions"})


@users_bp.route("/validate-reset-token", methods=["POST"])
def validate_reset_token():
    data = pick(parse_json_request(request), ("token",))
    raise_for_errors(string_errors(data, ("token",)))

    user_service.validate_reset_token(data["token"])
    return jsonify({"message": "Token is valid"})


@users_bp.route("/reset-password", methods=["POST"])
def reset_password():
    data = pick(
        parse_json_request(request), ("token",) + PASSWORD_FIELDS, raw=PASSWORD_FIELDS
    )
    errors = string_errors(data, ("token",))
    errors += password_errors(data)
    raise_for_errors(errors)

    user_service.reset_password(data["token"], data["password"])
    return jsonify({"message": "Password reset successful, you can now login"})


@users_bp.route("", methods=["GET"])
@authorize(ROLE_ADMIN)
def list_users():
    return jsonify(user_service.get_all())


@users_bp.route("/<user_id>", methods=["GET"])
@authorize()
def get_user(user_id: str):
    """Users can fetch themselves; admins can fetch anyone."""

    require_self_or_admin(user_id)
    return jsonify(user_service.get_by_id(user_id))


@users_bp.route("", methods=["POST"])
@authorize(ROLE_ADMIN)
def create_user():
    """Create a pre-verified account. Admins only."""

    data = pick(
        parse_json_request(request),
        PROFILE_FIELDS + ("email", "role") + PASSWORD_FIELDS,
        raw=PASSWORD_FIELDS,
    )
    errors = string_errors(data, PROFILE_FIELDS, max_lengths=PROFILE_MAX_LENGTHS)
    errors += email_errors(data)
    errors += password_errors(data)
    errors += _role_errors(data, required=True)
    raise_for_errors(errors)

    user = user_service.create(_with_normalized_email(data))
    return jsonify(user), HTTPStatus.CREATED


@users_bp.route("/<user_id>", methods=["PUT"])
@authorize()
def update_user(user_id: str):
    """Users can update themselves; only admins may change roles."""

    caller = require_self_or_admin(user_id)

    allowed = PROFILE_FIELDS + ("email",) + PASSWORD_FIELDS
    if caller.is_admin:
        allowed += ("role",)

    data = pick(
        parse_json_request(request, allow_empty=True),
        allowed,
        drop_empty=True,
        raw=PASSWORD_FIELDS,
    )
    errors = string_errors(
        data, PROFILE_FIELDS, required=False, max_lengths=PROFILE_MAX_LENGTHS
    )
    errors += email_errors(data, required=False)
    errors += password_errors(data, required=False)
    errors += _role_errors(data, required=False)
    raise_for_errors(errors)

    return jsonify(user_service.update(user_id, _with_normalized_email(data)))


@users_bp.route("/<user_id>", methods=["DELETE"])
@authorize()
def delete_user(user_id: str):
    require_self_or_admin(user_id)
    user_service.delete(user_id)
    return jsonify({"message": "User deleted successfully"})
