"""UserRepository - concrete implementation of UserRepositoryProtocol.

All queries use raw text() SQL (no ORM). Writes never commit: the caller
(UsersService) owns the transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.datetime_utils import DEFAULT_DATETIME_FORMATS, DateTimeFormats
from src.um_common.errors import UserNotFoundError
from src.um_user.domain.models import UserDTO

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_USER_COLUMNS = "id, username, password_hash, email, created_at, last_modified_at"

_LIST_USERS_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    ORDER BY id
""")

_GET_USER_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE id = :user_id
""")

_GET_USER_BY_USERNAME_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE username = :username
""")

_INSERT_USER_SQL = text(f"""
    INSERT INTO users (username, password_hash, email)
    VALUES (:username, :password_hash, :email)
    RETURNING {_USER_COLUMNS}
""")

# last_modified_at is stamped by the store, never by the caller
_UPDATE_USER_SQL = text(f"""
    UPDATE users
    SET username = :username,
        password_hash = :password_hash,
        email = :email,
        last_modified_at = NOW()
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

_DELETE_USER_SQL = text("""
    DELETE FROM users
    WHERE id = :user_id
""")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class UserRepository:
    def __init__(self, formats: DateTimeFormats = DEFAULT_DATETIME_FORMATS) -> None:
        self._formats = formats

    def _to_user(self, row: object) -> UserDTO:
        return UserDTO.from_db_row(dict(row), self._formats)  # type: ignore[call-overload]

    async def get_all(self, db: AsyncSession) -> list[UserDTO]:
        result = await db.execute(_LIST_USERS_SQL)
        return [self._to_user(row) for row in result.mappings().fetchall()]

    async def get_by_id(self, db: AsyncSession, user_id: int) -> UserDTO | None:
        result = await db.execute(_GET_USER_SQL, {"user_id": user_id})
        row = result.mappings().fetchone()
        return self._to_user(row) if row else None

    async def get_by_username(self, db: AsyncSession, username: str) -> UserDTO | None:
        result = await db.execute(_GET_USER_BY_USERNAME_SQL, {"username": username})
        row = result.mappings().fetchone()
        return self._to_user(row) if row else None

    async def create(self, db: AsyncSession, user: UserDTO) -> UserDTO:
        """Insert *user* and return a new DTO carrying the store-assigned id/created_at."""
        user.validate_for_insertion()
        result = await db.execute(
            _INSERT_USER_SQL,
            {
                "username": user.username,
                "password_hash": user.password_hash,
                "email": user.email,
            },
        )
        return self._to_user(result.mappings().one())

    async def update(self, db: AsyncSession, user: UserDTO) -> UserDTO:
        user.validate_for_update()
        result = await db.execute(
            _UPDATE_USER_SQL,
            {
                "user_id": user.id,
                "username": user.username,
                "password_hash": user.password_hash,
                "email": user.email,
            },
        )
        row = result.mappings().fetchone()
        if row is None:
            raise UserNotFoundError(user.id)  # type: ignore[arg-type]
        return self._to_user(row)

    async def delete(self, db: AsyncSession, user: UserDTO) -> None:
        user.validate_for_deletion()
        result = await db.execute(_DELETE_USER_SQL, {"user_id": user.id})
        if result.rowcount == 0:
            raise UserNotFoundError(user.id)  # type: ignore[arg-type]
