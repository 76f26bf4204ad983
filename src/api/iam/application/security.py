"""Security utilities for credentials.

Provides password hashing and verification with bcrypt, and generation of
single-use email verification tokens.
"""

import secrets

import bcrypt

VERIFICATION_TOKEN_BYTES = 32

# bcrypt only uses the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Uses bcrypt with automatic salt generation. The work factor is
    determined by bcrypt's gensalt().

    Args:
        password: The plaintext password to hash

    Returns:
        The bcrypt hash as a string

    Raises:
        ValueError: If the password is longer than bcrypt can hash
    """
    encoded = password.encode()
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError("Password must be at most 72 bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison.

    Args:
        password: The plaintext password to verify
        password_hash: The bcrypt hash to verify against

    Returns:
        True if the password matches the hash, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash or oversized input
        return False


def generate_verification_token() -> str:
    """Generate a hex-encoded 32-byte email verification token."""
    return secrets.token_hex(VERIFICATION_TOKEN_BYTES)
