"""Port-level exceptions for IAM bounded context.

These exceptions represent persistence-level rule violations raised by
repository implementations. The application layer catches them and
re-raises the matching application error.
"""


class DuplicateTenantSlugError(Exception):
    """Raised when attempting to create a tenant with a slug that already exists.

    Registration races can hit this when two users register against the
    same new slug at once; the losing request is reported as a conflict.
    """

    pass


class DuplicateUserEmailError(Exception):
    """Raised when an email is already registered within the tenant.

    The same email may exist in other tenants; uniqueness is per tenant.
    """

    pass
