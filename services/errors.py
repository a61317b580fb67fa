"""Errors raised by the service layer and rendered by the application."""

from __future__ import annotations

from http import HTTPStatus


class ServiceError(Exception):
    """Base class for failures the API reports back to the caller."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Not found"


class InvalidTokenError(ServiceError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid token"


class ConflictError(ServiceError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Resource already exists"


class UnauthorizedError(ServiceError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Unauthorized"
