"""Unit tests for UserService."""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import OperationalError

from iam.application.observability import UserServiceProbe
from iam.domain.aggregates import User
from iam.ports.repositories import IUserRepository
from shared_kernel.exceptions import BadRequestError, InternalError, NotFoundError


@pytest.fixture
def mock_user_repository():
    """Create mock user repository."""
    repository = create_autospec(IUserRepository, instance=True)
    repository.save = AsyncMock()
    return repository


@pytest.fixture
def mock_probe():
    """Create mock user service probe."""
    return create_autospec(UserServiceProbe, instance=True)


@pytest.fixture
def user_service(mock_user_repository, mock_session, mock_probe):
    """Create UserService with mock dependencies."""
    from iam.application.services.user_service import UserService

    return UserService(
        user_repository=mock_user_repository,
        session=mock_session,
        probe=mock_probe,
    )


@pytest.fixture
def user(current_user) -> User:
    """Stored user matching the authenticated caller."""
    return User(
        id=current_user.user_id,
        tenant_id=current_user.tenant_id,
        email=current_user.email,
        password_hash="hash",
        name="Alice",
    )


class TestUserServiceInit:
    """Tests for UserService initialization."""

    def test_uses_default_probe_when_not_provided(
        self, mock_user_repository, mock_session
    ):
        """Service should create default probe when not provided."""
        from iam.application.services.user_service import UserService

        service = UserService(
            user_repository=mock_user_repository,
            session=mock_session,
        )
        assert service._probe is not None


class TestGetMe:
    """Tests for get_me."""

    @pytest.mark.asyncio
    async def test_returns_caller_profile_from_caller_tenant(
        self, user_service, mock_user_repository, mock_session, current_user, user
    ):
        """The lookup runs in the caller's tenant and uses the caller's ID."""
        mock_user_repository.get_by_id = AsyncMock(return_value=user)

        result = await user_service.get_me(current_user)

        assert result == user
        mock_user_repository.get_by_id.assert_awaited_once_with(current_user.user_id)
        params = mock_session.execute.await_args.args[1]
        assert params == {"tenant_id": current_user.tenant_id.value}

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_found(
        self, user_service, mock_user_repository, current_user, mock_probe
    ):
        mock_user_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="user not found"):
            await user_service.get_me(current_user)

        mock_probe.profile_not_found.assert_called_once_with(
            current_user.user_id.value
        )

    @pytest.mark.asyncio
    async def test_datastore_failure_is_internal_error(
        self, user_service, mock_user_repository, current_user, mock_probe
    ):
        mock_user_repository.get_by_id = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("down"))
        )

        with pytest.raises(InternalError, match="failed to get user"):
            await user_service.get_me(current_user)

        mock_probe.profile_operation_failed.assert_called_once()


class TestUpdateMe:
    """Tests for update_me."""

    @pytest.mark.asyncio
    async def test_renames_user(
        self, user_service, mock_user_repository, current_user, user, mock_probe
    ):
        mock_user_repository.get_by_id = AsyncMock(return_value=user)

        result = await user_service.update_me(current_user, name="  Alicia ")

        assert result.name == "Alicia"
        mock_user_repository.save.assert_awaited_once_with(user)
        mock_probe.profile_updated.assert_called_once_with(user.id.value)

    @pytest.mark.asyncio
    async def test_omitted_name_keeps_current_name(
        self, user_service, mock_user_repository, current_user, user
    ):
        mock_user_repository.get_by_id = AsyncMock(return_value=user)

        result = await user_service.update_me(current_user, name=None)

        assert result.name == "Alice"

    @pytest.mark.asyncio
    async def test_blank_name_is_bad_request(
        self, user_service, mock_session, current_user
    ):
        with pytest.raises(BadRequestError, match="name must not be empty"):
            await user_service.update_me(current_user, name="   ")

        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_found(
        self, user_service, mock_user_repository, current_user
    ):
        mock_user_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await user_service.update_me(current_user, name="Alicia")

        mock_user_repository.save.assert_not_awaited()
