"""PermissionRepository - read-only access to the permission catalog.

All queries use raw text() SQL (no ORM).
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_permission.domain.models import Permission

PERMISSION_COLUMNS = "id, permission_key, name, description, created_at, last_modified_at"

_LIST_PERMISSIONS_SQL = text(f"""
    SELECT {PERMISSION_COLUMNS}
    FROM permissions
    ORDER BY id
""")


def row_to_permission(row: object) -> Permission:
    return Permission(
        id=row.id,  # type: ignore[attr-defined]
        permission_key=row.permission_key,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        last_modified_at=row.last_modified_at,  # type: ignore[attr-defined]
    )


class PermissionRepository:
    async def list_permissions(self, db: AsyncSession) -> list[Permission]:
        result = await db.execute(_LIST_PERMISSIONS_SQL)
        return [row_to_permission(row) for row in result.fetchall()]
