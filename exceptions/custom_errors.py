class WorkforceError(Exception):
    """Base class for every error raised by the workforce engine."""

    pass


class ValidationError(WorkforceError):
    """Raised when input is malformed: empty name or description, non-positive estimate, invalid date or priority."""

    pass


class NotFoundError(WorkforceError):
    """Raised when a referenced worker or task id does not exist."""

    pass


class StateError(WorkforceError):
    """Raised when an operation is invalid for the current task state, e.g. completing a task twice."""

    pass


class CapacityError(WorkforceError):
    """Raised when an assignment would exceed the daily capacity or the worker is unavailable."""

    pass


class PersistenceError(WorkforceError):
    """Raised when a snapshot cannot be loaded from or saved to storage."""


# Short titles shown next to the error message by the UI and CLI
ERROR_TITLES = {
    ValidationError: "Invalid input",
    NotFoundError: "Not found",
    StateError: "Not allowed",
    CapacityError: "Over capacity",
    PersistenceError: "Storage problem",
}


def error_title(error: Exception) -> str:
    for error_cls, title in ERROR_TITLES.items():
        if isinstance(error, error_cls):
            return title
    return "Error"
