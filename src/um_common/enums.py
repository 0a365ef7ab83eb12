"""Global enums."""

from enum import Enum


class CredentialStatus(str, Enum):
    """Outcome of a username/password check. The three values never merge."""
    VALID = "VALID"
    INVALID = "INVALID"
    NOT_FOUND = "NOT_FOUND"
