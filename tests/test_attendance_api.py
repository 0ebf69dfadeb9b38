"""근태 API 테스트 — 앱/관리자 엔드포인트, 오류 응답 형식.

Attendance API tests — App and admin endpoints, error detail shape,
authorization, and the store-failure response.
"""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import AttendanceState
from app.database import utcnow
from app.models.attendance import UserState
from app.models.user import User
from app.repositories.attendance_repository import user_state_repository
from tests.conftest import auth_header

ATTENDANCE = "/api/v1/app/attendance"
ADMIN_ATTENDANCE = "/api/v1/admin/attendance"
ADMIN_EDIT_REQUESTS = "/api/v1/admin/edit-requests"


class TestAttendanceState:
    """GET /app/attendance/state"""

    async def test_initial_state(self, client: AsyncClient, staff_token: str):
        """처음 조회하면 미출근 상태."""
        res = await client.get(f"{ATTENDANCE}/state", headers=auth_header(staff_token))
        assert res.status_code == 200
        body = res.json()
        assert body["state"] == "not_checked_in"
        assert body["record"] is None
        assert set(body["allowed_actions"]) == {"check_in", "mark_absent"}
        assert body["was_reset"] is False

    async def test_state_from_previous_business_day_is_reset(
        self, client: AsyncClient, db: AsyncSession, staff_user: User, staff_token: str
    ):
        """지난 영업일의 출근 상태는 조회 시 초기화되고 was_reset=True."""
        db.add(UserState(
            user_id=staff_user.id,
            current_state=AttendanceState.CHECKED_IN.value,
            last_updated=utcnow() - timedelta(days=2),
        ))
        await db.flush()

        res = await client.get(f"{ATTENDANCE}/state", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["state"] == "not_checked_in"
        assert res.json()["was_reset"] is True

        res = await client.get(f"{ATTENDANCE}/state", headers=auth_header(staff_token))
        assert res.json()["was_reset"] is False

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.get(f"{ATTENDANCE}/state")
        assert res.status_code in (401, 403)

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{ATTENDANCE}/state", headers=auth_header("not-a-token"))
        assert res.status_code == 401


class TestAttendanceActions:
    """POST /app/attendance/*"""

    async def test_check_in_and_check_out(self, client: AsyncClient, staff_token: str):
        """출근 → 퇴근."""
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        assert res.status_code == 200
        body = res.json()
        assert body["state"] == "checked_in"
        assert body["record"]["check_in"] is not None
        assert body["message"]

        res = await client.post(f"{ATTENDANCE}/check-out", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["state"] == "checked_out"
        assert res.json()["record"]["work_hours"] is not None

        res = await client.get(f"{ATTENDANCE}/state", headers=auth_header(staff_token))
        assert res.json()["state"] == "checked_out"

    async def test_break_cycle(self, client: AsyncClient, staff_token: str):
        await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        res = await client.post(f"{ATTENDANCE}/start-break", headers=auth_header(staff_token))
        assert res.json()["state"] == "on_break"
        res = await client.post(f"{ATTENDANCE}/end-break", headers=auth_header(staff_token))
        assert res.json()["state"] == "checked_in"
        assert res.json()["record"]["break_minutes"] is not None

    async def test_recheck_in(self, client: AsyncClient, staff_token: str):
        await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        await client.post(f"{ATTENDANCE}/check-out", headers=auth_header(staff_token))
        res = await client.post(f"{ATTENDANCE}/recheck-in", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["state"] == "checked_in"

    async def test_rejected_action_returns_409_with_state(self, client: AsyncClient, staff_token: str):
        """허용되지 않는 동작은 409와 현재 상태를 반환."""
        await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        assert res.status_code == 409
        detail = res.json()["detail"]
        assert detail["code"] == "invalid_transition"
        assert detail["current_state"] == "checked_in"
        assert detail["message"]

    async def test_absent_blocks_check_in(self, client: AsyncClient, staff_token: str):
        res = await client.post(f"{ATTENDANCE}/absent", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["record"]["is_absent"] is True

        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        assert res.status_code == 409
        assert res.json()["detail"]["current_state"] == "absent"

    async def test_store_unavailable(self, client: AsyncClient, staff_token: str, monkeypatch):
        """저장소 장애는 503."""
        async def _down(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(user_state_repository, "get_or_create_locked", _down)
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        assert res.status_code == 503
        assert res.json()["detail"]["code"] == "store_unavailable"

    async def test_commit_failure_is_store_unavailable(
        self, client: AsyncClient, db: AsyncSession, staff_token: str, monkeypatch
    ):
        """커밋 중 연결이 끊겨도 503."""
        async def _lost(*args, **kwargs):
            raise OperationalError("COMMIT", {}, Exception("server closed the connection"))

        monkeypatch.setattr(db, "commit", _lost)
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        assert res.status_code == 503
        assert res.json()["detail"] == {
            "code": "store_unavailable",
            "message": "Attendance store is unavailable",
            "current_state": None,
        }

    async def test_commit_failure_outside_attendance_routes(
        self, client: AsyncClient, db: AsyncSession, staff_user: User, monkeypatch
    ):
        """인증 API의 커밋 실패도 같은 503 응답."""
        async def _lost(*args, **kwargs):
            raise OperationalError("COMMIT", {}, Exception("server closed the connection"))

        monkeypatch.setattr(db, "commit", _lost)
        res = await client.post("/api/v1/auth/login", json={
            "email": "staff@test.com",
            "password": "staff123!",
        })
        assert res.status_code == 503
        assert res.json()["detail"]["code"] == "store_unavailable"


class TestAttendanceHistory:
    """GET /app/attendance"""

    async def test_my_records(self, client: AsyncClient, staff_token: str):
        await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        res = await client.get(ATTENDANCE, headers=auth_header(staff_token))
        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 1
        assert body["items"][0]["business_date"]


class TestEditRequestApi:
    """수정 요청 제출 → 관리자 승인."""

    async def test_submit_and_approve(self, client: AsyncClient, staff_token: str, admin_token: str):
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        record_id = res.json()["record"]["id"]

        res = await client.post(
            f"{ATTENDANCE}/edit-requests",
            json={"record_id": record_id, "field": "checkIn", "new_value": "09:00", "reason": "지문 인식 실패"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 201
        request_id = res.json()["id"]
        assert res.json()["status"] == "pending"

        res = await client.get(ADMIN_EDIT_REQUESTS, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["total"] == 1
        assert res.json()["items"][0]["user_name"] == "Test Staff"

        res = await client.post(f"{ADMIN_EDIT_REQUESTS}/{request_id}/approve", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["status"] == "approved"

        res = await client.post(
            f"{ADMIN_EDIT_REQUESTS}/{request_id}/decision",
            json={"action": "reject"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 409
        assert res.json()["detail"]["code"] == "already_decided"

    async def test_submit_validation_error(self, client: AsyncClient, staff_token: str):
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        record_id = res.json()["record"]["id"]
        res = await client.post(
            f"{ATTENDANCE}/edit-requests",
            json={"record_id": record_id, "field": "lunch", "new_value": "12:00", "reason": "x"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["code"] == "validation"

    async def test_submit_unknown_record(self, client: AsyncClient, staff_token: str):
        res = await client.post(
            f"{ATTENDANCE}/edit-requests",
            json={"record_id": "not-a-uuid", "field": "checkIn", "new_value": "09:00", "reason": "x"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 404

    async def test_my_edit_requests(self, client: AsyncClient, staff_token: str):
        res = await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        record_id = res.json()["record"]["id"]
        await client.post(
            f"{ATTENDANCE}/edit-requests",
            json={"record_id": record_id, "field": "check_in", "new_value": "09:00", "reason": "x"},
            headers=auth_header(staff_token),
        )
        res = await client.get(f"{ATTENDANCE}/edit-requests", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert len(res.json()) == 1

    async def test_invalid_status_filter(self, client: AsyncClient, admin_token: str):
        res = await client.get(ADMIN_EDIT_REQUESTS, params={"status": "done"}, headers=auth_header(admin_token))
        assert res.status_code == 400


class TestAdminAttendance:
    """GET /admin/attendance"""

    async def test_admin_list_today(
        self, client: AsyncClient, staff_token: str, admin_token: str, staff_user: User
    ):
        """오늘 영업일 기록에 사용자 이름이 포함된다."""
        await client.post(f"{ATTENDANCE}/check-in", headers=auth_header(staff_token))
        res = await client.get(ADMIN_ATTENDANCE, headers=auth_header(admin_token))
        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 1
        assert body["items"][0]["user_name"] == "Test Staff"
        assert body["items"][0]["user_id"] == str(staff_user.id)

    async def test_non_admin_forbidden(self, client: AsyncClient, staff_token: str):
        """일반 사용자는 관리자 API 접근 불가."""
        res = await client.get(ADMIN_ATTENDANCE, headers=auth_header(staff_token))
        assert res.status_code == 403
        res = await client.get(ADMIN_EDIT_REQUESTS, headers=auth_header(staff_token))
        assert res.status_code == 403


class TestHealth:
    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}
