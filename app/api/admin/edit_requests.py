"""관리자 수정 요청 라우터 — 수정 요청 목록 및 승인/반려.

Admin Edit Request Router — List time edit requests and decide them.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.core.errors import DomainError
from app.database import get_db
from app.models.attendance import TimeEditRequest
from app.models.user import User
from app.schemas.common import PaginatedResponse
from app.schemas.edit_request import EditRequestDecision, EditRequestResponse
from app.services.attendance_service import store_errors
from app.services.edit_request_service import edit_request_service
from app.utils.exceptions import raise_for_domain_error

router: APIRouter = APIRouter()


async def _decide(db: AsyncSession, request_id: UUID, actor: User, approve: bool) -> dict:
    result: TimeEditRequest | DomainError = await edit_request_service.decide(
        db, request_id, actor, approve
    )
    if isinstance(result, DomainError):
        raise_for_domain_error(result)
    with store_errors(actor.id):
        await db.commit()
    return edit_request_service.build_response(result)


@router.get("", response_model=PaginatedResponse)
async def list_edit_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    status: Annotated[
        str, Query(description="상태 필터 — pending | approved | rejected | all")
    ] = "pending",
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """수정 요청 목록을 조회합니다.

    List edit requests by status. ``all`` lists pending requests first.
    """
    result = await edit_request_service.list_requests(db, status, page, per_page)
    if isinstance(result, DomainError):
        raise_for_domain_error(result)
    items, total = result
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.post("/{request_id}/approve", response_model=EditRequestResponse)
async def approve_edit_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """수정 요청 승인 — 요청 값을 근태 기록에 반영 (Approve and apply to the record)."""
    return await _decide(db, request_id, current_user, approve=True)


@router.post("/{request_id}/reject", response_model=EditRequestResponse)
async def reject_edit_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """수정 요청 반려 (Reject; the record is unchanged)."""
    return await _decide(db, request_id, current_user, approve=False)


@router.post("/{request_id}/decision", response_model=EditRequestResponse)
async def decide_edit_request(
    request_id: UUID,
    data: EditRequestDecision,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """수정 요청 처리 — {"action": "approve" | "reject"}.

    Decide an edit request with the action given in the body.
    """
    return await _decide(db, request_id, current_user, approve=data.action == "approve")
