"""Database-specific exceptions."""

from shared_kernel.exceptions import InternalError, TenantNotSetError


class DatabaseError(InternalError):
    """Base exception for database operations."""

    pass


class TransactionError(DatabaseError):
    """Raised when transaction operations fail."""

    pass


class TenantBindingError(TransactionError):
    """Raised when the tenant identifier could not be bound to a transaction.

    The surrounding transaction is always rolled back when this is raised.
    """

    def __init__(self, message: str, tenant_id: str | None = None):
        super().__init__(message)
        self.tenant_id = tenant_id


__all__ = [
    "DatabaseError",
    "TenantBindingError",
    "TenantNotSetError",
    "TransactionError",
]
