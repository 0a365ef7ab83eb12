"""Auth API router: login, logout.

Both endpoints answer with a ``navigateTo`` target that the browser
client follows on success. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.um_common.database import get_db_session
from src.um_common.enums import CredentialStatus
from src.um_common.errors import InvalidCredentialsError, UsernameNotFoundError
from src.um_common.response import ApiResponse, success_response
from src.um_gateway.auth.jwt_handler import create_access_token
from src.um_gateway.middleware.request_log import get_request_id
from src.um_gateway.schemas import LoginRequest, LoginResponse, UserInfo
from src.um_user.application.service import UsersService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UsersService()


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    check = await _service.validate_credentials(db, body.username, body.password)
    if check.status is CredentialStatus.NOT_FOUND:
        raise UsernameNotFoundError(body.username)
    if check.status is CredentialStatus.INVALID:
        raise InvalidCredentialsError()

    user = check.user  # VALID always carries the user
    data = LoginResponse(
        access_token=create_access_token(user.id),
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo(user_id=user.id, username=user.username, email=user.email),
    )
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    resp.message = "Login successful"
    resp.navigate_to = settings.LOGIN_SUCCESS_URL
    return resp


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User logout",
)
async def logout(request: Request) -> ApiResponse:
    # Tokens are stateless; the client drops its token and follows navigateTo
    resp = success_response()
    resp.request_id = get_request_id(request)
    resp.message = "Logged out"
    resp.navigate_to = settings.LOGIN_PAGE_URL
    return resp
