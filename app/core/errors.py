"""도메인 오류 정의 — 결과 타입으로 반환되는 오류와 저장소 장애 예외.

Domain error definitions.
Domain errors are *returned* by the core as values, never raised: callers
check ``isinstance(result, DomainError)``. Every rejection from the
attendance state machine carries the authoritative current state so the
caller can resynchronize.

The only exception the core raises is StoreUnavailableError, for
persistence failures; the HTTP layer maps it to 503.
"""

from dataclasses import dataclass
from enum import Enum

from app.core.enums import AttendanceState


class ErrorKind(str, Enum):
    """오류 분류 — Error taxonomy."""

    VALIDATION = "validation"  # 잘못된 입력 (Malformed input)
    INVALID_TRANSITION = "invalid_transition"  # 현재 상태에서 불가한 동작 (Illegal for current state)
    NOT_FOUND = "not_found"  # 대상 없음 또는 타인 소유 (Missing, or owned by another user)
    ALREADY_DECIDED = "already_decided"  # 이미 처리된 수정 요청 (Edit request no longer pending)
    FORBIDDEN = "forbidden"  # 관리자 권한 없음 (Actor lacks admin capability)


@dataclass(frozen=True)
class DomainError:
    """도메인 오류 결과.

    Recoverable domain failure returned to the caller.

    Attributes:
        kind: 오류 분류 (Error kind)
        message: 사용자용 메시지 (Human-readable message)
        current_state: 현재 근태 상태, 근태 동작 거부 시 설정
                       (Authoritative attendance state, set on attendance rejections)
    """

    kind: ErrorKind
    message: str
    current_state: AttendanceState | None = None

    def to_detail(self) -> dict[str, str | None]:
        """HTTP 응답 detail 형식 — Structured detail for HTTP responses."""
        return {
            "code": self.kind.value,
            "message": self.message,
            "current_state": self.current_state.value if self.current_state else None,
        }


def validation_error(message: str) -> DomainError:
    return DomainError(ErrorKind.VALIDATION, message)


def invalid_transition(message: str, current_state: AttendanceState) -> DomainError:
    return DomainError(ErrorKind.INVALID_TRANSITION, message, current_state)


def not_found(message: str, current_state: AttendanceState | None = None) -> DomainError:
    return DomainError(ErrorKind.NOT_FOUND, message, current_state)


def already_decided(message: str) -> DomainError:
    return DomainError(ErrorKind.ALREADY_DECIDED, message)


def forbidden(message: str) -> DomainError:
    return DomainError(ErrorKind.FORBIDDEN, message)


class StoreUnavailableError(Exception):
    """저장소 장애 — 영속 계층 실패 시 발생.

    Raised when the underlying persistence layer fails. The transaction is
    rolled back, so no half-applied state/record pairing is ever visible.
    The core does not retry; retry policy belongs to the caller.
    """

    def __init__(self, detail: str = "Attendance store is unavailable") -> None:
        super().__init__(detail)
        self.detail: str = detail
