"""Application error taxonomy shared by all bounded contexts.

Services translate repository and infrastructure failures into these
classes, and the presentation layer maps each class to a single HTTP
status. Raw datastore errors never cross the service boundary.
"""


class ApplicationError(Exception):
    """Base class for errors that are safe to surface to API callers.

    Attributes:
        message: Caller-facing description. Must not reveal whether a row
            exists in another tenant.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ApplicationError):
    """Entity absent, or present in a tenant the caller cannot see.

    Both cases are deliberately indistinguishable.
    """

    pass


class ForbiddenError(ApplicationError):
    """Entity is visible to the caller but the operation is not allowed."""

    pass


class ConflictError(ApplicationError):
    """A uniqueness rule was violated (e.g. duplicate email within a tenant)."""

    pass


class UnauthorizedError(ApplicationError):
    """Missing or invalid credential, or failed login."""

    pass


class BadRequestError(ApplicationError):
    """Malformed or missing caller input."""

    pass


class InternalError(ApplicationError):
    """Datastore or infrastructure failure."""

    pass


class TenantNotSetError(InternalError):
    """Raised when a tenant-scoped operation runs without a bound tenant.

    Raised before any statement is sent to the database.
    """

    def __init__(self, message: str = "tenant ID not found in context"):
        super().__init__(message)
