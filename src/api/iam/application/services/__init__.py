"""Application services for IAM bounded context."""

from iam.application.services.auth_service import AuthService
from iam.application.services.user_service import UserService

__all__ = ["AuthService", "UserService"]
