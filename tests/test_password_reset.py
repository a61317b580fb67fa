"""Tests for the forgot-password and reset-password workflow."""

from __future__ import annotations

from datetime import timedelta

from models import db
from models.user import User
from services import mailer
from utils.security import utcnow


def _request_reset(client, app, email: str) -> str:
    response = client.post("/users/forgot-password", json={"email": email})
    assert response.status_code == 200
    with app.app_context():
        return User.query.filter_by(email=email).first().reset_token


def _reset(client, token: str, password: str = "newsecret1"):
    return client.post(
        "/users/reset-password",
        json={"token": token, "password": password, "confirm_password": password},
    )


def test_forgot_password_for_unknown_email_is_silent(client, outbox):
    response = client.post("/users/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 200
    assert "password reset instructions" in response.get_json()["message"]
    assert outbox == []


def test_forgot_password_issues_token_with_24_hour_expiry(client, app, make_user, outbox):
    make_user("reset@example.com")
    before = utcnow()

    token = _request_reset(client, app, "reset@example.com")

    with app.app_context():
        user = User.query.filter_by(email="reset@example.com").first()
        assert len(token) == 80
        assert before + timedelta(hours=24) <= user.reset_token_expires
        assert user.reset_token_expires <= utcnow() + timedelta(hours=24)

    assert len(outbox) == 1
    assert token in outbox[0]["html"]


def test_each_request_replaces_the_reset_token(client, app, make_user):
    make_user("twice@example.com")

    first = _request_reset(client, app, "twice@example.com")
    second = _request_reset(client, app, "twice@example.com")

    assert first != second
    assert client.post("/users/validate-reset-token", json={"token": first}).status_code == 400
    assert client.post("/users/validate-reset-token", json={"token": second}).status_code == 200


def test_reset_password_flow(client, app, make_user):
    user_id = make_user("flow@example.com", password="oldsecret1", verified=False)
    token = _request_reset(client, app, "flow@example.com")

    validate = client.post("/users/validate-reset-token", json={"token": token})
    assert validate.status_code == 200
    assert validate.get_json() == {"message": "Token is valid"}

    response = _reset(client, token)
    assert response.status_code == 200
    assert "Password reset successful" in response.get_json()["message"]

    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.is_verified is True
        assert user.reset_token is None
        assert user.reset_token_expires is None
        assert user.check_password("newsecret1")
        assert not user.check_password("oldsecret1")

    login = client.post(
        "/users/authenticate",
        json={"email": "flow@example.com", "password": "newsecret1"},
    )
    assert login.status_code == 200


def test_reset_token_cannot_be_reused(client, app, make_user):
    make_user("reuse@example.com")
    token = _request_reset(client, app, "reuse@example.com")

    assert _reset(client, token).status_code == 200

    again = _reset(client, token, password="another1")
    assert again.status_code == 400
    assert again.get_json()["message"] == "Invalid token"
    assert client.post("/users/validate-reset-token", json={"token": token}).status_code == 400


def test_expired_reset_token_is_rejected(client, app, make_user):
    user_id = make_user("expired@example.com")
    token = _request_reset(client, app, "expired@example.com")

    with app.app_context():
        user = db.session.get(User, user_id)
        user.reset_token_expires = utcnow() - timedelta(seconds=1)
        db.session.commit()

    validate = client.post("/users/validate-reset-token", json={"token": token})
    assert validate.status_code == 400
    assert validate.get_json()["message"] == "Invalid token"

    assert _reset(client, token).status_code == 400
    with app.app_context():
        assert db.session.get(User, user_id).check_password("secret123")


def test_reset_password_validates_payload(client):
    response = client.post(
        "/users/reset-password",
        json={"token": "abc", "password": "newsecret1", "confirm_password": "mismatch"},
    )

    assert response.status_code == 400
    assert "confirm_password must match password" in response.get_json()["message"]


def test_failed_reset_email_keeps_previous_token(client, app, make_user, monkeypatch):
    make_user("keep@example.com")
    token = _request_reset(client, app, "keep@example.com")

    def _smtp_down(user, origin):
        raise ConnectionRefusedError("mail server unavailable")

    monkeypatch.setattr(mailer, "send_password_reset_email", _smtp_down)

    response = client.post("/users/forgot-password", json={"email": "keep@example.com"})

    assert response.status_code == 500
    with app.app_context():
        assert User.query.filter_by(email="keep@example.com").first().reset_token == token
