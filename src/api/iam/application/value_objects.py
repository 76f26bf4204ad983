"""Application-layer value objects for IAM bounded context.

These are value objects specific to the application layer, representing
cross-cutting concerns like authentication context and use case results.
"""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.aggregates import User
from iam.domain.value_objects import TenantId, UserId, UserRole
from shared_kernel.auth import TokenPair


@dataclass(frozen=True)
class CurrentUser:
    """Represents the currently authenticated user with tenant context.

    Built exclusively from the claims of a validated access token. The
    tenant_id here is what every tenant-scoped transaction of the request
    binds.

    This is an application-layer concept (not domain) because it represents
    the authentication/authorization context of the request, not a core
    business entity.
    """

    user_id: UserId
    tenant_id: TenantId
    email: str
    role: UserRole


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful registration, login or token refresh."""

    tokens: TokenPair
    user: User
