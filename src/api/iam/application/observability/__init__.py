"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.auth_service_probe import (
    AuthServiceProbe,
    DefaultAuthServiceProbe,
)
from iam.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "AuthServiceProbe",
    "DefaultAuthServiceProbe",
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]
