"""앱 API 라우터 패키지 — 직원용 엔드포인트 통합.

App API Router package — Aggregates the employee-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - attendance: 내 근태 (My attendance: state, actions, history, edit requests)
"""

from fastapi import APIRouter

from app.api.app.attendance import router as attendance_router

app_router: APIRouter = APIRouter()

app_router.include_router(attendance_router, prefix="/attendance", tags=["App Attendance"])
