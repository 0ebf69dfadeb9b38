"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns,
plus the mapping from core DomainError results onto them.

Usage:
    from app.utils.exceptions import NotFoundError, raise_for_domain_error
    raise NotFoundError("User not found")

    result = await attendance_service.check_in(db, user.id)
    if isinstance(result, DomainError):
        raise_for_domain_error(result)
"""

from typing import Any, NoReturn

from fastapi import HTTPException, status

from app.core.errors import DomainError, ErrorKind


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a requested resource (record, edit request, user) does not
    exist or belongs to another user.
    """

    def __init__(self, detail: Any = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    Raised when creating a resource that violates a uniqueness constraint
    (e.g. an email address that is already registered).
    """

    def __init__(self, detail: Any = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 현재 상태와 충돌하는 요청.

    Raised when a request conflicts with the current server-side state:
    an illegal attendance transition or an already decided edit request.
    The detail carries the authoritative state so clients can resync.
    """

    def __init__(self, detail: Any = "Request conflicts with current state") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Raised when the authenticated user lacks admin capability.
    """

    def __init__(self, detail: Any = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when authentication is missing, invalid, or expired.
    """

    def __init__(self, detail: Any = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Raised when request data is invalid beyond what Pydantic validation
    catches (unknown field name, blank reason, unparseable time).
    """

    def __init__(self, detail: Any = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ServiceUnavailableError(HTTPException):
    """503 Service Unavailable 예외 — 저장소 장애 시 사용.

    Raised when the attendance store cannot be reached. Transient; the
    client may retry.
    """

    def __init__(self, detail: Any = "Service temporarily unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


# 도메인 오류 → HTTP 예외 매핑 — DomainError kind to HTTP exception class
_DOMAIN_ERROR_MAP: dict[ErrorKind, type[HTTPException]] = {
    ErrorKind.VALIDATION: BadRequestError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.FORBIDDEN: ForbiddenError,
    ErrorKind.INVALID_TRANSITION: ConflictError,
    ErrorKind.ALREADY_DECIDED: ConflictError,
}


def raise_for_domain_error(error: DomainError) -> NoReturn:
    """도메인 오류를 대응하는 HTTP 예외로 변환하여 발생시킵니다.

    Raise the HTTP exception matching a DomainError. The detail is a dict
    with ``code``, ``message`` and ``current_state``.

    Args:
        error: 서비스가 반환한 도메인 오류 (DomainError returned by a service)

    Raises:
        HTTPException: 오류 분류에 대응하는 예외 (Exception matching the error kind)
    """
    exc_class: type[HTTPException] = _DOMAIN_ERROR_MAP[error.kind]
    raise exc_class(detail=error.to_detail())
