"""앱 근태 라우터 — 내 근태 상태, 근태 동작, 기록, 수정 요청 API.

App Attendance Router — Endpoints for the user's own attendance: current
state, the six actions, record history, and time edit requests.

Rejected actions answer 409 with the authoritative current state in the
detail, so clients can resynchronize their view.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.enums import AttendanceAction
from app.core.errors import DomainError
from app.database import get_db
from app.models.attendance import TimeEditRequest
from app.models.user import User
from app.schemas.attendance import AttendanceStateResponse
from app.schemas.common import PaginatedResponse
from app.schemas.edit_request import EditRequestCreate, EditRequestResponse
from app.services.attendance_service import AttendanceOutcome, attendance_service, store_errors
from app.services.edit_request_service import RECORD_NOT_FOUND_MESSAGE, edit_request_service
from app.utils.exceptions import NotFoundError, raise_for_domain_error

router: APIRouter = APIRouter()


async def _perform(db: AsyncSession, user: User, action: AttendanceAction) -> dict:
    result: AttendanceOutcome | DomainError = await attendance_service.perform(db, user.id, action)
    # 거부되어도 상태 초기화는 커밋 — A stale-state reset persists even when the action is rejected
    with store_errors(user.id):
        await db.commit()
    if isinstance(result, DomainError):
        raise_for_domain_error(result)
    return attendance_service.build_state_response(result)


@router.get("/state", response_model=AttendanceStateResponse)
async def get_state(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """현재 근태 상태와 오늘의 기록을 조회합니다.

    Get the current (reconciled) state and today's record.
    """
    outcome: AttendanceOutcome = await attendance_service.get_state(db, current_user.id)
    with store_errors(current_user.id):
        await db.commit()
    return attendance_service.build_state_response(outcome)


@router.post("/check-in", response_model=AttendanceStateResponse)
async def check_in(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """출근 (Check in)."""
    return await _perform(db, current_user, AttendanceAction.CHECK_IN)


@router.post("/start-break", response_model=AttendanceStateResponse)
async def start_break(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """휴식 시작 (Start break)."""
    return await _perform(db, current_user, AttendanceAction.START_BREAK)


@router.post("/end-break", response_model=AttendanceStateResponse)
async def end_break(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """휴식 종료 (End break)."""
    return await _perform(db, current_user, AttendanceAction.END_BREAK)


@router.post("/check-out", response_model=AttendanceStateResponse)
async def check_out(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """퇴근 (Check out)."""
    return await _perform(db, current_user, AttendanceAction.CHECK_OUT)


@router.post("/recheck-in", response_model=AttendanceStateResponse)
async def recheck_in(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """재출근 (Check in again after checking out)."""
    return await _perform(db, current_user, AttendanceAction.RECHECK_IN)


@router.post("/absent", response_model=AttendanceStateResponse)
async def mark_absent(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """결근 처리 (Mark today absent)."""
    return await _perform(db, current_user, AttendanceAction.MARK_ABSENT)


@router.get("", response_model=PaginatedResponse)
async def list_my_records(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    date_from: Annotated[date | None, Query(description="시작 영업일 (First business date)")] = None,
    date_to: Annotated[date | None, Query(description="종료 영업일 (Last business date)")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """내 근태 기록 목록을 조회합니다.

    List my attendance records, newest business day first.
    """
    records, total = await attendance_service.get_my_records(
        db, current_user.id, date_from, date_to, page, per_page
    )
    return {
        "items": [attendance_service.build_response(r) for r in records],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/edit-requests", response_model=list[EditRequestResponse])
async def list_my_edit_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    record_id: Annotated[UUID | None, Query(description="근태 기록 필터 (Record filter)")] = None,
) -> list[dict]:
    """내 수정 요청 목록을 조회합니다 (My edit requests, newest first)."""
    requests = await edit_request_service.list_for_user(db, current_user.id, record_id)
    return [edit_request_service.build_response(r) for r in requests]


@router.post("/edit-requests", response_model=EditRequestResponse, status_code=201)
async def submit_edit_request(
    data: EditRequestCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """근태 시각 수정 요청을 제출합니다.

    Submit an edit request for one field of one of my records.
    """
    try:
        record_id: UUID = UUID(data.record_id)
    except ValueError:
        raise NotFoundError(RECORD_NOT_FOUND_MESSAGE)

    result: TimeEditRequest | DomainError = await edit_request_service.submit(
        db,
        user_id=current_user.id,
        record_id=record_id,
        field=data.field,
        new_value=data.new_value,
        reason=data.reason,
    )
    if isinstance(result, DomainError):
        raise_for_domain_error(result)
    with store_errors(current_user.id):
        await db.commit()
    return edit_request_service.build_response(result)
