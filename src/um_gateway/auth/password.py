"""Password hashing utilities using bcrypt.

A bcrypt hash is 60 characters, which fits the 72-character
``users.password_hash`` column. bcrypt only reads the first 72 bytes of
its input, so longer passwords are refused rather than silently cut.
"""

import logging

import bcrypt

from config.settings import settings
from src.um_common.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must not be longer than {MAX_PASSWORD_BYTES} bytes.")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash; it can never match
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False
