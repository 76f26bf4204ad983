"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories without specifying
implementation details. This allows for dependency inversion and makes
the application layer testable against in-memory fakes.
"""

from iam.ports.exceptions import DuplicateTenantSlugError, DuplicateUserEmailError
from iam.ports.repositories import ITenantRepository, IUserRepository

__all__ = [
    "DuplicateTenantSlugError",
    "DuplicateUserEmailError",
    "ITenantRepository",
    "IUserRepository",
]
