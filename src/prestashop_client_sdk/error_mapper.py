from __future__ import annotations

from .exceptions import HttpStatusError, UnexpectedHttpStatusError

SUCCESS_CODES = frozenset({200, 201})

STATUS_REASONS: dict[int, str] = {
    204: "No Content",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}


def map_status(status_code: int) -> HttpStatusError | UnexpectedHttpStatusError | None:
    if status_code in SUCCESS_CODES:
        return None
    reason = STATUS_REASONS.get(status_code)
    if reason is None:
        return UnexpectedHttpStatusError(
            code="UNEXPECTED_HTTP_STATUS",
            message=f"This call to PrestaShop Web Services returned an unexpected HTTP status of: {status_code}",
            status_code=status_code,
        )
    return HttpStatusError(
        code="HTTP_STATUS",
        message=(
            f"This call to PrestaShop Web Services failed and returned an HTTP status of {status_code}. "
            f"That means: {reason}."
        ),
        status_code=status_code,
        reason=reason,
    )


def check_status_code(status_code: int) -> None:
    error = map_status(status_code)
    if error is not None:
        raise error
