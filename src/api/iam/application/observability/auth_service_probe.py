"""Domain probe for credential use cases.

Following Domain-Oriented Observability patterns, this probe captures
registration, login, email verification and token refresh events.
Emails and passwords are never logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthServiceProbe(Protocol):
    """Domain probe for AuthService operations."""

    def user_registered(self, user_id: str, tenant_id: str, tenant_created: bool) -> None:
        """Record that a user registered (and possibly created their tenant)."""
        ...

    def registration_rejected(self, tenant_slug: str, reason: str) -> None:
        """Record that a registration attempt was rejected."""
        ...

    def login_succeeded(self, user_id: str, tenant_id: str) -> None:
        """Record a successful login."""
        ...

    def login_failed(self, tenant_slug: str, reason: str) -> None:
        """Record a failed login. The reason is internal and not shown to callers."""
        ...

    def email_verified(self, user_id: str, tenant_id: str) -> None:
        """Record that a user verified their email."""
        ...

    def email_verification_failed(self, reason: str) -> None:
        """Record that an email verification attempt failed."""
        ...

    def tokens_refreshed(self, user_id: str, tenant_id: str) -> None:
        """Record that a token pair was refreshed."""
        ...

    def token_refresh_failed(self, reason: str) -> None:
        """Record that a refresh attempt failed."""
        ...

    def with_context(self, context: ObservationContext) -> AuthServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthServiceProbe:
    """Default implementation of AuthServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAuthServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthServiceProbe(logger=self._logger, context=context)

    def user_registered(self, user_id: str, tenant_id: str, tenant_created: bool) -> None:
        """Record that a user registered (and possibly created their tenant)."""
        self._logger.info(
            "user_registered",
            user_id=user_id,
            tenant_id=tenant_id,
            tenant_created=tenant_created,
            **self._get_context_kwargs(),
        )

    def registration_rejected(self, tenant_slug: str, reason: str) -> None:
        """Record that a registration attempt was rejected."""
        self._logger.warning(
            "registration_rejected",
            tenant_slug=tenant_slug,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def login_succeeded(self, user_id: str, tenant_id: str) -> None:
        """Record a successful login."""
        self._logger.info(
            "login_succeeded",
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def login_failed(self, tenant_slug: str, reason: str) -> None:
        """Record a failed login. The reason is internal and not shown to callers."""
        self._logger.warning(
            "login_failed",
            tenant_slug=tenant_slug,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def email_verified(self, user_id: str, tenant_id: str) -> None:
        """Record that a user verified their email."""
        self._logger.info(
            "email_verified",
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def email_verification_failed(self, reason: str) -> None:
        """Record that an email verification attempt failed."""
        self._logger.warning(
            "email_verification_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def tokens_refreshed(self, user_id: str, tenant_id: str) -> None:
        """Record that a token pair was refreshed."""
        self._logger.info(
            "tokens_refreshed",
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def token_refresh_failed(self, reason: str) -> None:
        """Record that a refresh attempt failed."""
        self._logger.warning(
            "token_refresh_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
