"""근태 수정 요청 Pydantic 스키마 정의.

Time edit request Pydantic schema definitions.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class EditRequestCreate(BaseModel):
    """수정 요청 제출 스키마.

    Edit request submission schema. Field names and times are validated by
    the service so that errors carry the domain error format.

    Attributes:
        record_id: 대상 근태 기록 UUID (Target record)
        field: 수정 필드 — checkIn | checkOut | breakStart | breakEnd
        new_value: 요청 시각 — "HH:MM" 또는 ISO 8601 (Requested time)
        reason: 수정 사유 (Reason, required)
    """

    record_id: str  # 대상 근태 기록 UUID (Target record UUID)
    field: str  # 수정 필드 — camelCase 또는 snake_case (camelCase or snake_case)
    new_value: str  # 요청 시각 — "HH:MM", "HH:MM:SS" 또는 ISO datetime
    reason: str = Field(..., max_length=1000)  # 수정 사유 (Reason)


class EditRequestDecision(BaseModel):
    """수정 요청 처리 스키마 — Decision body: approve or reject."""

    action: Literal["approve", "reject"]


class EditRequestResponse(BaseModel):
    """수정 요청 응답 스키마.

    Attributes:
        id: 요청 UUID (Request identifier)
        user_id: 요청자 UUID (Requesting user)
        user_name: 요청자 이름 (Requester name, admin listings only)
        record_id: 대상 기록 UUID (Target record)
        field: 수정 필드 (Field being amended)
        old_value: 요청 시점의 기존 값 (Snapshot at request time)
        new_value: 요청 값 (Requested value)
        reason: 수정 사유 (Reason)
        status: 상태 — pending | approved | rejected
        decided_by: 처리한 관리자 UUID (Deciding admin, nullable)
    """

    id: str
    user_id: str
    user_name: str | None = None
    record_id: str
    field: str
    old_value: datetime | None
    new_value: datetime
    reason: str
    status: str
    decided_by: str | None = None
    created_at: datetime
    updated_at: datetime
