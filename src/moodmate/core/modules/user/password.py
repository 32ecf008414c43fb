"""Password hashing.

bcrypt embeds the salt and cost factor in the digest, so verification
needs nothing but the stored hash. `bcrypt.checkpw` compares in constant time.

bcrypt reads at most 72 bytes of input, so the password is first reduced
to a base64 SHA-256 digest (44 bytes). Every character of a long password
counts.
"""

import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash.

    A malformed or empty hash counts as a failed verification.
    """
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
