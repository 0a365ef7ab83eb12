"""Unified error codes and custom exceptions.

Error code ranges:
  10xx: Auth/Session
  11xx: User/Permission
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 10xx: Auth/Session ---

class InvalidCredentialsError(AppError):
    # 403 makes the browser client redirect to its access-denied page
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 403)


class UsernameNotFoundError(AppError):
    def __init__(self, username: str) -> None:
        super().__init__(1004, f"No user found with username [{username}]", 404)


class AuthenticationRequiredError(AppError):
    def __init__(self, detail: str = "Invalid or expired token") -> None:
        super().__init__(1005, detail, 401)


# --- 11xx: User/Permission ---

class ValidationError(AppError):
    """A field or object-state precondition is violated.

    Defaults to 422; malformed store rows use 500 since they point at a
    schema problem rather than bad client input.
    """

    def __init__(self, message: str, http_status: int = 422) -> None:
        super().__init__(1101, message, http_status)


class UserOperationError(AppError):
    """Create/update/delete failure. Raise with ``from exc`` to keep the chain.

    The HTTP status follows the cause when the cause is itself an AppError,
    so a missing user still surfaces as 404 through the wrapper.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        http_status = cause.http_status if isinstance(cause, AppError) else 500
        super().__init__(1102, message, http_status)


class PermissionLoadError(AppError):
    def __init__(self, user_id: int | None) -> None:
        super().__init__(
            1103, f"Failed to load permission records for user id# [{user_id}].", 500
        )


class UserNotFoundError(AppError):
    def __init__(self, user_id: int) -> None:
        super().__init__(1104, f"User id# [{user_id}] not found in the database.", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
