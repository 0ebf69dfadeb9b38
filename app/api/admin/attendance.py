"""관리자 근태 라우터 — 기간별 전체 근태 기록 조회.

Admin Attendance Router — Records of all users within a business-date
range, with break minutes and net work hours.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import PaginatedResponse
from app.services.attendance_service import attendance_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_attendance(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    date_from: Annotated[date | None, Query(description="시작 영업일, 기본값 오늘 (First business date)")] = None,
    date_to: Annotated[date | None, Query(description="종료 영업일 (Last business date)")] = None,
    user_id: Annotated[UUID | None, Query(description="사용자 필터 (User filter)")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """기간별 근태 기록 목록을 조회합니다.

    List attendance records of all users, newest business day first,
    then by user name.
    """
    items, total = await attendance_service.get_records(
        db, date_from, date_to, user_id, page, per_page
    )
    return {"items": items, "total": total, "page": page, "per_page": per_page}
