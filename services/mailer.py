"""Outgoing account notices."""

from __future__ import annotations

import smtplib
from email.mime.text import MIMEText
from html import escape

from flask import current_app


def send_email(to: str, subject: str, html: str) -> None:
    """Deliver an HTML email, or record it when delivery is suppressed."""

    config = current_app.config
    prefix = config.get("MAIL_SUBJECT_PREFIX")
    full_subject = f"{prefix} - {subject}" if prefix else subject

    if config.get("MAIL_SUPPRESS_SEND"):
        current_app.logger.info("Mail delivery suppressed: to=%s subject=%s", to, full_subject)
        outbox = current_app.extensions.setdefault("mail_outbox", [])
        outbox.append({"to": to, "subject": full_subject, "html": html})
        return

    msg = MIMEText(html, "html")
    msg["Subject"] = full_subject
    msg["From"] = config["MAIL_FROM"]
    msg["To"] = to

    with smtplib.SMTP(config["MAIL_SERVER"], config["MAIL_PORT"]) as server:
        if config.get("MAIL_USE_TLS"):
            server.starttls()
        if config.get("MAIL_USERNAME"):
            server.login(config["MAIL_USERNAME"], config.get("MAIL_PASSWORD") or "")
        server.sendmail(config["MAIL_FROM"], [to], msg.as_string())
    current_app.logger.info("Sent mail: to=%s subject=%s", to, full_subject)


def send_verification_email(user, origin: str | None) -> None:
    if origin:
        verify_url = escape(f"{origin}/users/verify-email?token={user.verification_token}")
        message = (
            "<p>Please click the link below to verify your email address:</p>"
            f'<p><a href="{verify_url}">{verify_url}</a></p>'
        )
    else:
        message = (
            "<p>Please use the token below to verify your email address with the "
            "<code>/users/verify-email</code> api route:</p>"
            f"<p><code>{user.verification_token}</code></p>"
        )

    send_email(
        to=user.email,
        subject="Verify Email",
        html=f"<h4>Verify Email</h4><p>Thanks for registering!</p>{message}",
    )


def send_already_registered_email(email: str, origin: str | None) -> None:
    if origin:
        message = (
            "<p>If you don't know your password please visit the "
            f'<a href="{escape(origin)}/users/forgot-password">forgot password</a> page.</p>'
        )
    else:
        message = (
            "<p>If you don't know your password you can reset it via the "
            "<code>/users/forgot-password</code> api route.</p>"
        )

    send_email(
        to=email,
        subject="Email Already Registered",
        html=(
            "<h4>Email Already Registered</h4>"
            f"<p>Your email <strong>{escape(email)}</strong> is already registered.</p>{message}"
        ),
    )


def send_password_reset_email(user, origin: str | None) -> None:
    if origin:
        reset_url = escape(f"{origin}/users/reset-password?token={user.reset_token}")
        message = (
            "<p>Please click the link below to reset your password, "
            "the link will be valid for 1 day:</p>"
            f'<p><a href="{reset_url}">{reset_url}</a></p>'
        )
    else:
        message = (
            "<p>Please use the token below to reset your password with the "
            "<code>/users/reset-password</code> api route:</p>"
            f"<p><code>{user.reset_token}</code></p>"
        )

    send_email(
        to=user.email,
        subject="Reset Password",
        html=f"<h4>Reset Password Email</h4>{message}",
    )
