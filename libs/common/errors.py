"""Failure kinds raised by the commerce services.

Every error is a ``fastapi.HTTPException`` so service functions can raise
them directly and routers need no translation layer. ``code`` is the stable,
machine-readable kind; ``extra`` is merged into the JSON error body by
``libs.common.error_handler``.
"""

from typing import Any, Optional

from fastapi import HTTPException, status


class CommerceError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    default_detail: str = "Request failed"

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        headers: Optional[dict[str, str]] = None,
        **extra: Any,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "detail": self.detail, **self.extra}


class Unauthorized(CommerceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_detail = "Could not validate credentials"

    def __init__(self, detail: Optional[str] = None, **extra: Any):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"}, **extra)


class Forbidden(CommerceError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Forbidden"


class NotFound(CommerceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Not found"


class InvalidStatus(CommerceError):
    code = "invalid_status"
    default_detail = "Invalid status"


class InvalidTransition(CommerceError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    default_detail = "Status transition not allowed"


class OrderTerminal(InvalidTransition):
    code = "order_terminal"
    default_detail = "Order is already in a terminal state"


class InvalidPackage(CommerceError):
    code = "invalid_package"
    default_detail = "Invalid package"


class InvalidDuration(CommerceError):
    code = "invalid_duration"
    default_detail = "Invalid promotion duration"


class InsufficientCredits(CommerceError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    code = "insufficient_credits"
    default_detail = "Insufficient credits"


class DuplicateMember(CommerceError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_member"
    default_detail = "Already a member of this list"


class NotEligible(CommerceError):
    code = "not_eligible"
    default_detail = "Not eligible"


class ConcurrentUpdate(CommerceError):
    status_code = status.HTTP_409_CONFLICT
    code = "concurrent_update"
    default_detail = "The resource was modified concurrently, retry"


class SlugTaken(CommerceError):
    status_code = status.HTTP_409_CONFLICT
    code = "slug_taken"
    default_detail = "Slug is already in use"
