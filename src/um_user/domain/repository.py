"""Repository Protocols - dependency inversion for testability.

Unit tests inject a mock (or the in-memory fake) that conforms to these
Protocols. Infrastructure layer provides the real implementations.
"""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_permission.domain.models import Permission
from src.um_user.domain.models import UserDTO


class UserRepositoryProtocol(Protocol):
    async def get_all(self, db: AsyncSession) -> list[UserDTO]: ...

    async def get_by_id(self, db: AsyncSession, user_id: int) -> UserDTO | None: ...

    async def get_by_username(self, db: AsyncSession, username: str) -> UserDTO | None: ...

    async def create(self, db: AsyncSession, user: UserDTO) -> UserDTO: ...

    async def update(self, db: AsyncSession, user: UserDTO) -> UserDTO: ...

    async def delete(self, db: AsyncSession, user: UserDTO) -> None: ...


class UserPermissionRepositoryProtocol(Protocol):
    async def create_many_for_user(
        self, db: AsyncSession, user_id: int, permission_ids: Sequence[int]
    ) -> None: ...

    async def delete_all_by_user_id(self, db: AsyncSession, user_id: int) -> None: ...

    async def get_permissions_by_user_id(
        self, db: AsyncSession, user_id: int
    ) -> list[Permission]: ...
