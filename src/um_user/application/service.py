"""UsersService - user CRUD, permission assignment and credential checks.

The caller passes the AsyncSession; the service owns the transaction for
every write: create, update and delete each end in exactly one
``db.commit()`` or ``db.rollback()``. Failures are re-raised as
UserOperationError chained to the original cause.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.datetime_utils import DEFAULT_DATETIME_FORMATS, DateTimeFormats
from src.um_common.errors import UserNotFoundError, UserOperationError, ValidationError
from src.um_gateway.auth.password import hash_password, verify_password
from src.um_permission.domain.models import Permission
from src.um_user.domain.models import CredentialCheck, UserDTO
from src.um_user.domain.repository import (
    UserPermissionRepositoryProtocol,
    UserRepositoryProtocol,
)
from src.um_user.infrastructure.permission_persistence import UserPermissionRepository
from src.um_user.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)


class UsersService:
    def __init__(
        self,
        repo: UserRepositoryProtocol | None = None,
        permission_repo: UserPermissionRepositoryProtocol | None = None,
        formats: DateTimeFormats = DEFAULT_DATETIME_FORMATS,
    ) -> None:
        self.formats = formats
        self._repo: UserRepositoryProtocol = repo or UserRepository(formats)
        self._permission_repo: UserPermissionRepositoryProtocol = (
            permission_repo or UserPermissionRepository()
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_all(self, db: AsyncSession) -> list[UserDTO]:
        """All users, permissions not loaded."""
        return await self._repo.get_all(db)

    async def get_by_id(self, db: AsyncSession, user_id: int) -> UserDTO | None:
        """User with permissions loaded, or None if no such row."""
        user = await self._repo.get_by_id(db, user_id)
        if user is not None:
            await user.load_permissions(db, self._permission_repo)
        return user

    async def get_permissions_by_user_id(
        self, db: AsyncSession, user_id: int
    ) -> list[Permission]:
        return await self._permission_repo.get_permissions_by_user_id(db, user_id)

    async def get_permissions(self, db: AsyncSession, user: UserDTO) -> list[Permission]:
        if user.id is None:
            raise ValidationError("Cannot query permissions of a user without an id.")
        return await self.get_permissions_by_user_id(db, user.id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self,
        db: AsyncSession,
        username: str,
        password: str,
        email: str,
        permission_ids: Sequence[int],
    ) -> UserDTO:
        try:
            user = UserDTO.from_values(username, hash_password(password), email)
            user = await self._repo.create(db, user)
            await self._permission_repo.create_many_for_user(
                db, user.id, permission_ids  # type: ignore[arg-type]
            )
            await db.commit()
        except Exception as exc:
            await db.rollback()
            logger.warning("User creation rolled back: username=%s", username)
            raise UserOperationError(
                f"Failure to create user [{username}, {email}].", exc
            ) from exc

        logger.info("User created: id=%s username=%s", user.id, username)
        return await self._reload(db, user.id)  # type: ignore[arg-type]

    async def update(
        self,
        db: AsyncSession,
        user_id: int,
        username: str,
        password: str,
        email: str,
        permission_ids: Sequence[int],
    ) -> UserDTO:
        """Replace every field and the permission set of an existing user.

        All-or-nothing: a failure at any step, including re-creating the
        permission associations, rolls back the field changes as well.
        """
        try:
            user = await self._repo.get_by_id(db, user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            user.username = username
            user.password_hash = hash_password(password)
            user.email = email
            await self._repo.update(db, user)

            await self._permission_repo.delete_all_by_user_id(db, user_id)
            if permission_ids:
                await self._permission_repo.create_many_for_user(db, user_id, permission_ids)
            await db.commit()
        except Exception as exc:
            await db.rollback()
            logger.warning("User update rolled back: id=%s", user_id)
            raise UserOperationError(f"Failure to update user id# [{user_id}].", exc) from exc

        logger.info("User updated: id=%s", user_id)
        return await self._reload(db, user_id)

    async def delete(self, db: AsyncSession, user_id: int) -> None:
        try:
            user = await self._repo.get_by_id(db, user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            # associations first: user_permissions references users
            await self._permission_repo.delete_all_by_user_id(db, user_id)
            await self._repo.delete(db, user)
            await db.commit()
        except Exception as exc:
            await db.rollback()
            logger.warning("User deletion rolled back: id=%s", user_id)
            raise UserOperationError(f"Failure to delete user id# [{user_id}].", exc) from exc

        logger.info("User deleted: id=%s", user_id)

    async def _reload(self, db: AsyncSession, user_id: int) -> UserDTO:
        user = await self.get_by_id(db, user_id)
        if user is None:
            # deleted by a concurrent request between our commit and this read
            raise UserNotFoundError(user_id)
        return user

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    async def validate_credentials(
        self, db: AsyncSession, username: str, password: str
    ) -> CredentialCheck:
        """Check a username/password pair.

        Returns NOT_FOUND when no such username exists, INVALID when the
        password does not match, VALID (with the user) otherwise.
        """
        user = await self._repo.get_by_username(db, username)
        if user is None:
            return CredentialCheck.not_found()
        if not verify_password(password, user.password_hash):  # type: ignore[arg-type]
            return CredentialCheck.invalid()
        return CredentialCheck.valid(user)
