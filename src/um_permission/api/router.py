"""um_permission REST endpoints.

GET /permissions - the assignable permission catalog
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.um_common.database import get_db_session
from src.um_common.datetime_utils import DateTimeFormats
from src.um_common.response import ApiResponse, success_response
from src.um_gateway.auth.dependencies import get_current_user
from src.um_gateway.middleware.request_log import get_request_id
from src.um_permission.domain.repository import PermissionRepositoryProtocol
from src.um_permission.infrastructure.persistence import PermissionRepository
from src.um_user.domain.models import UserDTO

router = APIRouter(prefix="/permissions", tags=["permissions"])

_repo: PermissionRepositoryProtocol = PermissionRepository()
_formats = DateTimeFormats(db=settings.DB_DATETIME_FORMAT, html=settings.HTML_DATETIME_FORMAT)


@router.get("", response_model=ApiResponse)
async def list_permissions(
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    permissions = await _repo.list_permissions(db)
    resp = success_response([p.to_dict(_formats) for p in permissions])
    resp.request_id = get_request_id(request)
    return resp
