"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.um_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserDTO = Depends(get_current_user)):
        ...
"""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.database import get_db_session
from src.um_common.errors import AuthenticationRequiredError
from src.um_gateway.auth.jwt_handler import decode_token
from src.um_user.domain.models import UserDTO
from src.um_user.infrastructure.persistence import UserRepository

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_repo = UserRepository()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserDTO:
    """Validate the Bearer token and return the caller's UserDTO.

    Raises AuthenticationRequiredError (401) if the token is invalid,
    expired, or points to a user that no longer exists.
    """
    payload = decode_token(token)

    sub = payload.get("sub", "")
    if not sub.isdigit():
        raise AuthenticationRequiredError()

    user = await _repo.get_by_id(db, int(sub))
    if user is None:
        raise AuthenticationRequiredError("User no longer exists")
    return user
