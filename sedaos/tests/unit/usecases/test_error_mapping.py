import pytest

from sedaos.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError
from sedaos.domain.ports import UseCaseError
from sedaos.usecases.error_mapping import CONNECTION_MESSAGE, DUPLICATE_MESSAGE, map_api_error


def _map(exc):
    return map_api_error(exc, default_code="UPDATE_PROFILE_FAILED", default_message="Error updating profile")


@pytest.mark.parametrize(
    "status,backend,code,message",
    [
        (409, "ERROR: llave duplicada viola restricción", "CONFLICT", DUPLICATE_MESSAGE),
        (409, None, "CONFLICT", DUPLICATE_MESSAGE),
        (409, "Nick reserved", "CONFLICT", "Nick reserved"),
        (400, None, "INVALID_DATA", "Invalid data. Please review the fields."),
        (400, "Email malformed", "INVALID_DATA", "Email malformed"),
        (401, "whatever", "SESSION_EXPIRED", "Session expired, please log in again."),
        (403, None, "FORBIDDEN", "You are not allowed to perform this action."),
        (404, None, "NOT_FOUND", "Resource not found."),
        (418, None, "REQUEST_FAILED", "Server error (code 418)."),
    ],
)
def test_client_errors(status, backend, code, message):
    err = _map(ApiClientError("ctx", status=status, backend_message=backend))

    assert err.code == code
    assert err.message == message


def test_server_and_transport_errors():
    assert _map(ApiServerError("ctx", status=502)).message == "Server error (code 502)."
    assert _map(ApiServerError("ctx", status=500, backend_message="DB down")).message == "DB down"
    timeout = _map(ApiTimeoutError("Timeout contacting http://x"))
    assert (timeout.code, timeout.message) == ("CONNECTION_FAILED", CONNECTION_MESSAGE)
    assert _map(ApiError("bad body")).message == "Error updating profile: bad body"


def test_untyped_exceptions():
    assert _map(RuntimeError("HTTP 409 Conflict")).code == "CONFLICT"
    assert _map(OSError("Failed to connect to host")).message == CONNECTION_MESSAGE
    err = _map(RuntimeError("boom"))
    assert (err.code, err.message) == ("UPDATE_PROFILE_FAILED", "Error updating profile: boom")
    assert _map(RuntimeError("")).message == "Error updating profile"


def test_use_case_errors_pass_through():
    original = UseCaseError("WRONG_PASSWORD", "The current password is incorrect.")
    assert _map(original) is original
