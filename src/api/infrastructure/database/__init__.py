"""Database infrastructure - shared connection and tenant scoping primitives."""

from infrastructure.database.exceptions import (
    DatabaseError,
    TenantBindingError,
    TenantNotSetError,
    TransactionError,
)
from infrastructure.database.tenant_scope import (
    TenantScopedTransactionManager,
    current_tenant_setting,
    tenant_transaction,
)

__all__ = [
    "DatabaseError",
    "TenantBindingError",
    "TenantNotSetError",
    "TenantScopedTransactionManager",
    "TransactionError",
    "current_tenant_setting",
    "tenant_transaction",
]
