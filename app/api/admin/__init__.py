"""관리자 API 라우터 패키지 — 관리자 엔드포인트 통합.

Admin API Router package — Aggregates admin-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - attendance: 전체 근태 기록 조회 (Attendance records of all users)
    - edit_requests: 수정 요청 처리 (Edit request review and decisions)
"""

from fastapi import APIRouter

from app.api.admin.attendance import router as attendance_router
from app.api.admin.edit_requests import router as edit_requests_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(attendance_router, prefix="/attendance", tags=["Admin Attendance"])
admin_router.include_router(edit_requests_router, prefix="/edit-requests", tags=["Admin Edit Requests"])
