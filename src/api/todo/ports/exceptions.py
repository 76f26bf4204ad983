"""Port-level exceptions for the Todo bounded context."""


class TodoNotFoundError(Exception):
    """Raised when a todo to update is not visible in the bound tenant."""

    pass
