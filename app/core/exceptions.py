"""Errors raised by the secret lifecycle.

Every error carries a stable ``code`` and the HTTP status it maps to. The
owner-facing mutation paths only ever raise ``SecretNotFound`` for secrets
that belong to someone else, so the existence of other users' secrets is
never revealed. The disclosure path keeps its failures distinct because the
recipient is shown a different prompt for each of them.
"""
from fastapi import status


class SecretError(Exception):
    code = "SECRET_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Secret operation failed"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class SecretValidationError(SecretError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Invalid secret data"


class SecretNotFound(SecretError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    message = "Secret not found"


class SecretExpired(SecretError):
    code = "EXPIRED"
    status_code = status.HTTP_410_GONE
    message = "Secret has expired"


class SecretAlreadyConsumed(SecretError):
    code = "ALREADY_CONSUMED"
    status_code = status.HTTP_410_GONE
    message = "Secret has already been viewed"


class PasswordRequired(SecretError):
    code = "PASSWORD_REQUIRED"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Password required"


class InvalidPassword(SecretError):
    code = "INVALID_PASSWORD"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid password"


class SecretForbidden(SecretError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    message = "Secret has already been viewed and can no longer be changed"
