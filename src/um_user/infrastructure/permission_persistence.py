"""UserPermissionRepository - the user <-> permission association table.

Writes never commit: the caller (UsersService) owns the transaction.
"""

from collections.abc import Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_permission.domain.models import Permission
from src.um_permission.infrastructure.persistence import row_to_permission

_INSERT_USER_PERMISSION_SQL = text("""
    INSERT INTO user_permissions (user_id, permission_id)
    VALUES (:user_id, :permission_id)
""")

_DELETE_USER_PERMISSIONS_SQL = text("""
    DELETE FROM user_permissions
    WHERE user_id = :user_id
""")

_GET_PERMISSIONS_BY_USER_SQL = text("""
    SELECT p.id, p.permission_key, p.name, p.description,
           p.created_at, p.last_modified_at
    FROM permissions p
    JOIN user_permissions up ON up.permission_id = p.id
    WHERE up.user_id = :user_id
    ORDER BY p.id
""")


class UserPermissionRepository:
    async def create_many_for_user(
        self, db: AsyncSession, user_id: int, permission_ids: Sequence[int]
    ) -> None:
        # dict.fromkeys: drop duplicate ids, keep order
        params = [
            {"user_id": user_id, "permission_id": pid}
            for pid in dict.fromkeys(permission_ids)
        ]
        if not params:
            return
        await db.execute(_INSERT_USER_PERMISSION_SQL, params)

    async def delete_all_by_user_id(self, db: AsyncSession, user_id: int) -> None:
        await db.execute(_DELETE_USER_PERMISSIONS_SQL, {"user_id": user_id})

    async def get_permissions_by_user_id(
        self, db: AsyncSession, user_id: int
    ) -> list[Permission]:
        result = await db.execute(_GET_PERMISSIONS_BY_USER_SQL, {"user_id": user_id})
        return [row_to_permission(row) for row in result.fetchall()]
