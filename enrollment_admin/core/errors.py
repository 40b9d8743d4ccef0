"""Exceptions raised by the store adapter and the dashboard controller."""

from __future__ import annotations


class EnrollmentAdminError(Exception):
    pass


class StoreWriteError(EnrollmentAdminError):
    """A create/update/delete against the remote store failed."""

    def __init__(self, operation: str, path: str, cause: Exception | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        message = f"{operation} failed for '{path}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class CourseCapReached(EnrollmentAdminError):
    def __init__(self, cap: int):
        self.cap = cap
        super().__init__(f"You can only keep {cap} courses. Delete one before adding another.")


class InvalidStatus(EnrollmentAdminError):
    def __init__(self, status):
        self.status = status
        super().__init__(f"Unknown enrollment status: {status!r}")
