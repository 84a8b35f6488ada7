from __future__ import annotations


class GraideError(Exception):
    """Base class for every error raised by the persistence layer."""

    code = "GRAIDE_ERROR"


class NotAuthenticatedError(GraideError):
    code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "No authentication token available. Please sign in.") -> None:
        super().__init__(message)


class AuthExpiredError(GraideError):
    """A Google API answered 401: the token expired or was revoked.

    Kept apart from BackendError because the caller has to sign in again,
    retrying will not help.
    """

    code = "AUTH_EXPIRED"

    def __init__(self, message: str = "Google session expired. Please sign in again.") -> None:
        super().__init__(message)


class BackendError(GraideError):
    code = "BACKEND_ERROR"

    def __init__(self, status_code: int, body: str, *, api: str = "Google API") -> None:
        super().__init__(f"{api} error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class NotFoundError(GraideError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class InvalidInputError(GraideError):
    code = "INVALID_INPUT"


class WorkspaceNotConfiguredError(GraideError):
    code = "WORKSPACE_NOT_CONFIGURED"

    def __init__(self, message: str = "No Drive folder configured. Please complete setup first.") -> None:
        super().__init__(message)


class InvalidTransitionError(GraideError):
    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move submission from '{current}' to '{target}'")
        self.current = current
        self.target = target


class RowDecodeError(GraideError):
    code = "ROW_DECODE_ERROR"

    def __init__(self, table: str, row_index: int, reason: str) -> None:
        super().__init__(f"Row {row_index} of {table} is malformed: {reason}")
        self.table = table
        self.row_index = row_index
