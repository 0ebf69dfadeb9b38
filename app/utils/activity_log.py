"""근태 활동 로그 — Axiom 구조화 이벤트 전송.

Attendance activity log — Structured domain events sent to Axiom.
Each event records who did what (check-in, break, edit-request decisions,
state resets, rejected transitions) with a level and optional details.

When Axiom is not configured the logger is a pass-through, matching the
API logging middleware. Ingest failures never break the request.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from axiom_py import Client as AxiomClient

from app.config import settings


class LogLevel(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogAction(str, Enum):
    """로그 동작 분류 — Activity action vocabulary."""

    # 인증 — Authentication
    REGISTER = "REGISTER"
    LOGIN = "LOGIN"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    # 근태 동작 — Attendance actions
    CHECK_IN = "CHECK_IN"
    START_BREAK = "START_BREAK"
    END_BREAK = "END_BREAK"
    CHECK_OUT = "CHECK_OUT"
    RECHECK_IN = "RECHECK_IN"
    ABSENT = "ABSENT"
    STATE_RESET = "STATE_RESET"
    TRANSITION_REJECTED = "TRANSITION_REJECTED"
    # 수정 요청 — Edit requests
    EDIT_REQUEST = "EDIT_REQUEST"
    EDIT_REQUEST_APPROVE = "EDIT_REQUEST_APPROVE"
    EDIT_REQUEST_REJECT = "EDIT_REQUEST_REJECT"
    # 시스템 — System
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


_client: AxiomClient | None = None


def get_axiom_client() -> AxiomClient | None:
    """공유 Axiom 클라이언트 — Shared Axiom client, or None when not configured."""
    global _client
    if _client is None and settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
        _client = AxiomClient(token=settings.AXIOM_API_TOKEN)
    return _client


def log_activity(
    level: LogLevel,
    action: LogAction,
    message: str,
    user_id: UUID | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """활동 이벤트를 기록합니다.

    Build an activity event and ingest it into Axiom when configured.

    Args:
        level: 로그 레벨 (Log level)
        action: 동작 분류 (Action)
        message: 메시지 (Human-readable message)
        user_id: 행위자 사용자 ID (Acting user, if any)
        details: 추가 정보 (Extra structured details)

    Returns:
        dict: 구성된 이벤트 (The event that was built)
    """
    event: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "kind": "activity",
        "level": level.value,
        "action": action.value,
        "message": message,
        "user_id": str(user_id) if user_id is not None else None,
    }
    if details:
        event["details"] = {
            k: (v.isoformat() if isinstance(v, datetime) else str(v) if isinstance(v, UUID) else v)
            for k, v in details.items()
        }

    client: AxiomClient | None = get_axiom_client()
    if client is not None:
        try:
            client.ingest_events(settings.AXIOM_DATASET, [event])
        except Exception:
            pass  # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
    return event


def info(action: LogAction, message: str, user_id: UUID | None = None, **details: Any) -> dict[str, Any]:
    return log_activity(LogLevel.INFO, action, message, user_id, details)


def warn(action: LogAction, message: str, user_id: UUID | None = None, **details: Any) -> dict[str, Any]:
    return log_activity(LogLevel.WARN, action, message, user_id, details)


def error(action: LogAction, message: str, user_id: UUID | None = None, **details: Any) -> dict[str, Any]:
    return log_activity(LogLevel.ERROR, action, message, user_id, details)
