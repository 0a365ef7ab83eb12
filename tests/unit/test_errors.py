"""Tests for um_common.errors and um_common.response."""

from src.um_common.errors import (
    AppError,
    AuthenticationRequiredError,
    InvalidCredentialsError,
    PermissionLoadError,
    UsernameNotFoundError,
    UserNotFoundError,
    UserOperationError,
    ValidationError,
)
from src.um_common.response import (
    ApiResponse,
    debug_error_response,
    error_response,
    exception_payload,
    success_response,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1101, message="test"), Exception)


class TestSpecificErrors:
    def test_invalid_credentials(self) -> None:
        err = InvalidCredentialsError()
        assert err.code == 1003
        assert err.http_status == 403

    def test_username_not_found(self) -> None:
        err = UsernameNotFoundError("ghost")
        assert err.code == 1004
        assert err.http_status == 404
        assert "ghost" in err.message

    def test_authentication_required(self) -> None:
        assert AuthenticationRequiredError().http_status == 401

    def test_validation_defaults_to_422(self) -> None:
        assert ValidationError("bad").http_status == 422
        assert ValidationError("bad row", http_status=500).http_status == 500

    def test_user_not_found(self) -> None:
        err = UserNotFoundError(42)
        assert err.code == 1104
        assert err.http_status == 404
        assert err.message == "User id# [42] not found in the database."

    def test_permission_load(self) -> None:
        err = PermissionLoadError(7)
        assert err.code == 1103
        assert "[7]" in err.message


class TestUserOperationError:
    def test_status_follows_app_error_cause(self) -> None:
        err = UserOperationError("Failure to update user id# [5].", UserNotFoundError(5))
        assert err.code == 1102
        assert err.http_status == 404

    def test_foreign_cause_is_500(self) -> None:
        err = UserOperationError("Failure to delete user id# [5].", RuntimeError("boom"))
        assert err.http_status == 500

    def test_no_cause_is_500(self) -> None:
        assert UserOperationError("oops").http_status == 500


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}

    def test_error(self) -> None:
        resp = error_response(1104, "User id# [1] not found in the database.")
        assert resp.code == 1104
        assert resp.data is None

    def test_payload_omits_unset_optional_keys(self) -> None:
        payload = success_response({"id": 1}).to_payload()
        assert set(payload) == {"code", "message", "data", "timestamp", "request_id"}

    def test_payload_uses_navigate_to_alias(self) -> None:
        resp = ApiResponse(navigate_to="/users")
        payload = resp.to_payload()
        assert payload["navigateTo"] == "/users"
        assert "navigate_to" not in payload


def _chained_error() -> UserOperationError:
    try:
        try:
            raise UserNotFoundError(9)
        except UserNotFoundError as inner:
            raise UserOperationError("Failure to update user id# [9].", inner) from inner
    except UserOperationError as outer:
        return outer


class TestExceptionPayload:
    def test_walks_cause_chain(self) -> None:
        payload = exception_payload(_chained_error())

        assert payload["exceptionClass"] == "UserOperationError"
        assert payload["message"] == "Failure to update user id# [9]."
        assert payload["previous"]["exceptionClass"] == "UserNotFoundError"
        assert "previous" not in payload["previous"]

    def test_plain_exception_uses_str(self) -> None:
        assert exception_payload(KeyError("x"))["message"] == "'x'"

    def test_debug_response_carries_trace(self) -> None:
        exc = _chained_error()
        payload = debug_error_response(exc.code, exc.message, exc).to_payload()

        assert payload["exception"]["previous"]["message"].startswith("User id# [9]")
        assert "UserOperationError" in payload["stacktrace"]
        assert "\r\n" not in payload["stacktrace"]
