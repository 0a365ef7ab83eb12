"""Domain models for um_user.

UserDTO is the in-memory form of one ``users`` row. Unlike the other
domain models it carries behavior: every setter validates on the spot,
store rows are re-validated on the way in, and the permission set is
loaded lazily through an injected repository.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.datetime_utils import DEFAULT_DATETIME_FORMATS, DateTimeFormats
from src.um_common.enums import CredentialStatus
from src.um_common.errors import PermissionLoadError, ValidationError
from src.um_permission.domain.models import Permission

if TYPE_CHECKING:
    from src.um_user.domain.repository import UserPermissionRepositoryProtocol


def _is_blank(value: object) -> bool:
    return value is None or value == ""


def _coerce_id(value: object) -> int | None:
    """Return *value* as int if it is a numeric id, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class UserDTO:
    TABLE_NAME = "users"
    USERNAME_MAX_LENGTH = 64
    PASSWORD_HASH_MAX_LENGTH = 72
    EMAIL_MAX_LENGTH = 256

    def __init__(self) -> None:
        self._id: int | None = None
        self._username: str | None = None
        self._password_hash: str | None = None
        self._email: str | None = None
        self._creation_date: datetime | None = None
        self._last_modification_date: datetime | None = None
        self._permissions: list[Permission] = []

    def __repr__(self) -> str:
        return f"UserDTO(id={self._id!r}, username={self._username!r})"

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_values(cls, username: str, password_hash: str, email: str) -> "UserDTO":
        """Build a not-yet-inserted user. Setters validate each value."""
        user = cls()
        user.username = username
        user.password_hash = password_hash
        user.email = email
        return user

    @classmethod
    def from_db_row(
        cls,
        row: Mapping[str, Any],
        formats: DateTimeFormats = DEFAULT_DATETIME_FORMATS,
    ) -> "UserDTO":
        """Build a user from a ``users`` row after checking its shape.

        Raises:
            ValidationError (500): a required column is missing or malformed.
        """
        cls._validate_db_row(row, formats)

        user = cls()
        user.id = _coerce_id(row["id"])  # type: ignore[assignment]
        user.username = row["username"]
        user.password_hash = row["password_hash"]
        user.email = row["email"]
        user.creation_date = formats.parse_db(row["created_at"])
        if not _is_blank(row.get("last_modified_at")):
            user.last_modification_date = formats.parse_db(row["last_modified_at"])
        return user

    @staticmethod
    def _validate_db_row(row: Mapping[str, Any], formats: DateTimeFormats) -> None:
        def fail(message: str) -> NoReturn:
            raise ValidationError(message, http_status=500)

        if _is_blank(row.get("id")):
            fail("Record does not contain an [id] field. Check column names.")
        user_id = _coerce_id(row["id"])
        if user_id is None:
            fail("Record [id] field is not numeric. Check column types.")
        if user_id < 1:
            fail("Record does not contain an [id] field. Check column names.")
        for column in ("username", "password_hash", "email", "created_at"):
            if _is_blank(row.get(column)):
                fail(f"Record does not contain a [{column}] field. Check column names.")
        for column in ("created_at", "last_modified_at"):
            value = row.get(column)
            if _is_blank(value):
                continue
            try:
                formats.parse_db(value)
            except ValueError:
                fail(f"Failed to parse [{column}] field as datetime. Check column types.")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def id(self) -> int | None:
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Id value must be an integer.")
        if value < 1:
            raise ValidationError("Id value cannot be inferior to 1.")
        if self._id is not None and self._id != value:
            raise ValidationError(f"Id value is already set to [{self._id}] and cannot change.")
        self._id = value

    @property
    def username(self) -> str | None:
        return self._username

    @username.setter
    def username(self, value: str) -> None:
        self._username = self._checked_text("Username", value, self.USERNAME_MAX_LENGTH)

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @password_hash.setter
    def password_hash(self, value: str) -> None:
        self._password_hash = self._checked_text(
            "Password hash", value, self.PASSWORD_HASH_MAX_LENGTH
        )

    @property
    def email(self) -> str | None:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = self._checked_text("Email", value, self.EMAIL_MAX_LENGTH)

    @property
    def creation_date(self) -> datetime | None:
        return self._creation_date

    @creation_date.setter
    def creation_date(self, value: datetime | None) -> None:
        if self._creation_date is not None and value != self._creation_date:
            raise ValidationError("Creation date is already set and cannot change.")
        self._creation_date = value

    @property
    def last_modification_date(self) -> datetime | None:
        return self._last_modification_date

    @last_modification_date.setter
    def last_modification_date(self, value: datetime | None) -> None:
        self._last_modification_date = value

    @property
    def permissions(self) -> list[Permission]:
        """Cached permissions as of the last load. Never hits the store."""
        return self._permissions

    @staticmethod
    def _checked_text(field: str, value: object, max_length: int) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string.")
        # len() counts code points, not bytes
        if len(value) > max_length:
            raise ValidationError(f"{field} length must not be longer than {max_length}.")
        return value

    # ------------------------------------------------------------------
    # Persistence preconditions
    # ------------------------------------------------------------------

    def _check(self, failures: list[str], operation: str, strict: bool) -> bool:
        if not failures:
            return True
        if strict:
            raise ValidationError(f"UserDTO is not valid for {operation}: {failures[0]}.")
        return False

    def _missing_required_fields(self) -> list[str]:
        return [
            f"{name} value not set"
            for name, value in (
                ("username", self._username),
                ("passwordHash", self._password_hash),
                ("email", self._email),
            )
            if _is_blank(value)
        ]

    def validate_for_insertion(self, strict: bool = True) -> bool:
        failures = []
        if self._id is not None:
            failures.append("id value already set")
        failures.extend(self._missing_required_fields())
        if self._creation_date is not None:
            failures.append("creationDate value already set")
        if self._last_modification_date is not None:
            failures.append("lastModificationDate value already set")
        return self._check(failures, "insertion", strict)

    def validate_for_update(self, strict: bool = True) -> bool:
        failures = []
        if self._id is None:
            failures.append("id value not set")
        failures.extend(self._missing_required_fields())
        return self._check(failures, "update", strict)

    def validate_for_deletion(self, strict: bool = True) -> bool:
        failures = [] if self._id is not None else ["id value not set"]
        return self._check(failures, "deletion", strict)

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    async def load_permissions(
        self, db: AsyncSession, repo: "UserPermissionRepositoryProtocol"
    ) -> None:
        """Replace the cached permissions with a fresh load for this user's id."""
        if self._id is None:
            raise ValidationError("Cannot load permissions of a user without an id.")
        self._permissions = list(await repo.get_permissions_by_user_id(db, self._id))

    async def get_permissions(
        self,
        db: AsyncSession,
        repo: "UserPermissionRepositoryProtocol",
        force_reload: bool = True,
    ) -> list[Permission]:
        """Return permissions, reloading unless cached AND force_reload=False.

        The default reloads every call; pass ``force_reload=False`` to reuse
        a non-empty cache.
        """
        if force_reload or not self._permissions:
            try:
                await self.load_permissions(db, repo)
            except Exception as exc:
                raise PermissionLoadError(self._id) from exc
        return self._permissions

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self, formats: DateTimeFormats = DEFAULT_DATETIME_FORMATS) -> dict[str, Any]:
        return {
            "id": self._id,
            "username": self._username,
            "passwordHash": self._password_hash,
            "email": self._email,
            "creationDate": formats.to_html(self._creation_date),
            "lastModificationDate": formats.to_html(self._last_modification_date),
            "permissions": {p.id: p.to_dict(formats) for p in self._permissions},
        }


@dataclass(frozen=True)
class CredentialCheck:
    """Tagged result of a credential check; ``user`` is set only when VALID."""

    status: CredentialStatus
    user: UserDTO | None = None

    @classmethod
    def valid(cls, user: UserDTO) -> "CredentialCheck":
        return cls(CredentialStatus.VALID, user)

    @classmethod
    def invalid(cls) -> "CredentialCheck":
        return cls(CredentialStatus.INVALID)

    @classmethod
    def not_found(cls) -> "CredentialCheck":
        return cls(CredentialStatus.NOT_FOUND)

    @property
    def is_valid(self) -> bool:
        return self.status is CredentialStatus.VALID
