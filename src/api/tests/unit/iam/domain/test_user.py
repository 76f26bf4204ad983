"""Unit tests for the User and Tenant aggregates."""

from datetime import datetime, timedelta, timezone

from iam.domain.aggregates import Tenant, User
from iam.domain.value_objects import TenantId, TenantSlug, UserRole

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _register() -> User:
    return User.register(
        tenant_id=TenantId.generate(),
        email="alice@example.com",
        password_hash="hash",
        name="Alice",
        verification_token="a" * 64,
        verification_ttl=timedelta(hours=24),
        now=NOW,
    )


class TestUserRegister:
    """Tests for self-service registration."""

    def test_registers_unverified_member(self):
        """New users start as unverified members."""
        user = _register()

        assert user.role is UserRole.MEMBER
        assert user.email_verified is False
        assert user.verification_token == "a" * 64

    def test_verification_expires_after_ttl(self):
        """The token expiry is now plus the configured lifetime."""
        user = _register()

        assert user.verification_token_expires_at == NOW + timedelta(hours=24)
        assert not user.verification_expired(NOW + timedelta(hours=23))
        assert user.verification_expired(NOW + timedelta(hours=25))


class TestUserEmailVerification:
    """Tests for consuming the verification token."""

    def test_marking_verified_consumes_token(self):
        """The token is single use."""
        user = _register()

        user.mark_email_verified()

        assert user.email_verified is True
        assert user.verification_token is None
        assert user.verification_token_expires_at is None
        assert not user.verification_expired(NOW + timedelta(days=30))


class TestIdentity:
    """Aggregates compare by identity."""

    def test_users_with_same_id_are_equal(self):
        """Attribute changes do not affect equality."""
        user = _register()
        copy = User(
            id=user.id,
            tenant_id=user.tenant_id,
            email="other@example.com",
            password_hash="x",
            name="Other",
        )

        assert user == copy
        assert len({user, copy}) == 1

    def test_tenant_created_from_slug_is_named_after_it(self):
        """Self-service tenants are named after their slug."""
        tenant = Tenant.create(TenantSlug.from_string("acme"))

        assert tenant.name == "acme"
        assert tenant.slug.value == "acme"
