# hwms/core/errors.py
"""
Error taxonomy shared by the authorization engine and the API layer.

Every denial carries a stable external ``code``. The ``message`` is a
human-readable diagnostic; two FORBIDDEN denials may carry different messages
(e.g. "Hospital access denied" vs "Insufficient permissions") but callers must
only branch on ``code``.

Record-store collaborators raise ``StoreError`` / ``ConflictError``; the core
wraps store failures as ``DependencyFailure`` and never retries them.
"""

import logging
from contextlib import contextmanager
from enum import Enum as PyEnum
from typing import Iterator

logger = logging.getLogger(__name__)


class ErrorCode(str, PyEnum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DEPENDENCY_ERROR = "DEPENDENCY_ERROR"


class DomainError(Exception):
    """Base class for errors that are surfaced verbatim to the caller."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    status_code: int = 400

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value}, message={self.message!r})"


class Unauthenticated(DomainError):
    code = ErrorCode.UNAUTHENTICATED
    status_code = 401


class Forbidden(DomainError):
    code = ErrorCode.FORBIDDEN
    status_code = 403


class ValidationFailed(DomainError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class NotFound(DomainError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class DependencyFailure(DomainError):
    code = ErrorCode.DEPENDENCY_ERROR
    status_code = 500


class StoreError(Exception):
    """Raised by a record store when a read or write fails."""


class ConflictError(Exception):
    """Raised by a record store when a conditional write's precondition no longer holds."""


@contextmanager
def dependency_call(description: str) -> Iterator[None]:
    """
    Wrap calls to an external collaborator.

    Usage:
        with dependency_call("Profile lookup failed"):
            row = store.fetch_row("profiles", user_id)
    """
    try:
        yield
    except StoreError as exc:
        logger.error(f"{description}: {exc}", exc_info=True)
        raise DependencyFailure(f"{description}: {exc}") from exc
