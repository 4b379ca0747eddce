"""Domain exception hierarchy for structured error reporting."""

from __future__ import annotations


class AppException(Exception):
    """Base exception for all domain errors.

    Subclasses set ``code`` and ``status_code`` at the class level; callers
    provide ``message`` and an optional ``details`` list.
    """

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class NotFoundException(AppException):
    code = "NOT_FOUND"
    status_code = 404


class InvalidContextRecordException(AppException):
    """A context row was handed to the wrong level constructor.

    This is a coding error in the caller, it is never converted into a
    soft failure.
    """

    code = "INVALID_CONTEXT_RECORD"
    status_code = 500


class TenancyNotInstalledException(AppException):
    code = "TENANCY_NOT_INSTALLED"
    status_code = 501
