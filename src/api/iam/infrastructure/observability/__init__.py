"""Domain-Oriented Observability for IAM infrastructure layer."""

from iam.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    DefaultUserRepositoryProbe,
    TenantRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultTenantRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "TenantRepositoryProbe",
    "UserRepositoryProbe",
]
