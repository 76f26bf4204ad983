"""IAM presentation layer - aggregate-based organization.

Each package holds its own routes and models. Auth routes are public;
user routes require a bearer access token, enforced per endpoint.
"""

from __future__ import annotations

from iam.presentation import auth, users

auth_router = auth.router
users_router = users.router

__all__ = ["auth_router", "users_router"]
