"""Repository Protocol - dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_permission.domain.models import Permission


class PermissionRepositoryProtocol(Protocol):
    async def list_permissions(self, db: AsyncSession) -> list[Permission]: ...
