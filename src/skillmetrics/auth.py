"""
Password hashing and generation.

Passwords are hashed with bcrypt through passlib. New accounts receive a
generated password that is emailed to the user.
"""

import secrets

from passlib.context import CryptContext

# Password hashing configuration (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

GENERATED_PASSWORD_BYTES = 6


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt with a per-password salt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The bcrypt hash to check against

    Returns:
        True if password matches, False otherwise (including an empty hash)
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def generate_password() -> str:
    """Generate a random hex password for a newly registered account."""
    return secrets.token_hex(GENERATED_PASSWORD_BYTES)
