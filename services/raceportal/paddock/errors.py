"""Typed failures raised by portal services.

Services raise these; views translate them into responses. Anything not in
this hierarchy (store unavailable, disk full) is left to Django's 500 path.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base class carrying a user-facing message and the HTTP status to use."""

    status = 400
    default_message = "Bad request"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    # Forms are re-rendered with the message, so the response stays 200.
    status = 200
    default_message = "Please fill required fields."


class ConflictError(PortalError):
    status = 200
    default_message = "Email already in use."


class AuthenticationError(PortalError):
    status = 200
    default_message = "Invalid credentials."


class AuthorizationError(PortalError):
    status = 403
    default_message = "Forbidden"


class NotFoundError(PortalError):
    status = 404
    default_message = "Not found"


class UploadLimitError(PortalError):
    status = 400
    default_message = "Too many files uploaded."
