"""근태 수정 요청 레포지토리.

Edit Request Repository — Persistence for time edit requests.
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Row, Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import EditRequestStatus
from app.models.attendance import TimeEditRequest
from app.models.user import User
from app.repositories.base import BaseRepository


class EditRequestRepository(BaseRepository[TimeEditRequest]):
    """근태 수정 요청 레포지토리.

    Extends:
        BaseRepository[TimeEditRequest]
    """

    def __init__(self) -> None:
        super().__init__(TimeEditRequest)

    async def create_edit_request(
        self,
        db: AsyncSession,
        data: dict[str, Any],
    ) -> TimeEditRequest:
        """수정 요청을 생성합니다 — Create an edit request."""
        return await self.create(db, data)

    async def get_edit_request(
        self,
        db: AsyncSession,
        request_id: UUID,
        for_update: bool = False,
    ) -> TimeEditRequest | None:
        """수정 요청을 조회합니다 — Retrieve an edit request, optionally locked."""
        return await self.get_by_id(db, request_id, for_update=for_update)

    async def update_edit_request_status(
        self,
        db: AsyncSession,
        edit_request: TimeEditRequest,
        status: EditRequestStatus,
        decided_by: UUID | None,
        now: datetime,
    ) -> TimeEditRequest:
        """수정 요청 상태를 변경합니다.

        Set the request status and record who decided it and when.
        """
        return await self.apply(
            db,
            edit_request,
            {"status": status.value, "decided_by": decided_by, "updated_at": now},
        )

    async def get_user_requests(
        self,
        db: AsyncSession,
        user_id: UUID,
        record_id: UUID | None = None,
    ) -> Sequence[TimeEditRequest]:
        """사용자의 수정 요청 목록을 조회합니다.

        Retrieve a user's edit requests, newest first, optionally for one record.
        """
        query: Select = select(TimeEditRequest).where(TimeEditRequest.user_id == user_id)
        if record_id is not None:
            query = query.where(TimeEditRequest.record_id == record_id)
        query = query.order_by(TimeEditRequest.created_at.desc())
        result = await db.execute(query)
        return result.scalars().all()

    async def get_requests_with_users(
        self,
        db: AsyncSession,
        status: EditRequestStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Row[Any]], int]:
        """관리자용 수정 요청 목록 — (요청, 요청자 이름) 행.

        Retrieve paginated (request, requester name) rows. ``status=None``
        returns every status, pending first.
        """
        query: Select = (
            select(TimeEditRequest, User.name)
            .join(User, User.id == TimeEditRequest.user_id)
        )
        if status is not None:
            query = query.where(TimeEditRequest.status == status.value)
        # 대기 중 요청 우선 — Pending requests first
        pending_first = case((TimeEditRequest.status == EditRequestStatus.PENDING.value, 0), else_=1)
        query = query.order_by(pending_first, TimeEditRequest.created_at.desc())

        count_query: Select = select(func.count()).select_from(query.subquery())
        total: int = (await db.execute(count_query)).scalar() or 0

        offset: int = (page - 1) * per_page
        result = await db.execute(query.offset(offset).limit(per_page))
        return result.all(), total


# 싱글턴 인스턴스 — Singleton instance
edit_request_repository: EditRequestRepository = EditRequestRepository()
