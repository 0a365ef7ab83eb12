"""um_user REST endpoints (bearer auth required).

GET    /users                      - list, permissions not loaded
GET    /users/{user_id}            - detail with permissions
GET    /users/{user_id}/permissions
POST   /users                      - create
PUT    /users/{user_id}            - full replace, incl. permission set
DELETE /users/{user_id}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.um_common.database import get_db_session
from src.um_common.datetime_utils import DateTimeFormats
from src.um_common.errors import UserNotFoundError
from src.um_common.response import ApiResponse, success_response
from src.um_gateway.auth.dependencies import get_current_user
from src.um_gateway.middleware.request_log import get_request_id
from src.um_user.application.schemas import UserWriteRequest
from src.um_user.application.service import UsersService
from src.um_user.domain.models import UserDTO

router = APIRouter(prefix="/users", tags=["users"])

_service = UsersService(
    formats=DateTimeFormats(db=settings.DB_DATETIME_FORMAT, html=settings.HTML_DATETIME_FORMAT)
)


def _respond(request: Request, data: object, message: str = "success") -> ApiResponse:
    resp = success_response(data)
    resp.request_id = get_request_id(request)
    resp.message = message
    return resp


@router.get("", response_model=ApiResponse)
async def list_users(
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    users = await _service.list_all(db)
    return _respond(request, [u.serialize(_service.formats) for u in users])


@router.get("/{user_id}", response_model=ApiResponse)
async def get_user(
    user_id: int,
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return _respond(request, user.serialize(_service.formats))


@router.get("/{user_id}/permissions", response_model=ApiResponse)
async def get_user_permissions(
    user_id: int,
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    permissions = await _service.get_permissions_by_user_id(db, user_id)
    return _respond(request, [p.to_dict(_service.formats) for p in permissions])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
)
async def create_user(
    body: UserWriteRequest,
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.create(
        db, body.username, body.password, str(body.email), body.permission_ids
    )
    return _respond(request, user.serialize(_service.formats), "User created")


@router.put("/{user_id}", response_model=ApiResponse)
async def update_user(
    user_id: int,
    body: UserWriteRequest,
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.update(
        db, user_id, body.username, body.password, str(body.email), body.permission_ids
    )
    return _respond(request, user.serialize(_service.formats), "User updated")


@router.delete("/{user_id}", response_model=ApiResponse)
async def delete_user(
    user_id: int,
    request: Request,
    current_user: Annotated[UserDTO, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete(db, user_id)
    return _respond(request, None, "User deleted")
