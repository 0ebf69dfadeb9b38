"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
``Base.metadata.create_all``.

Modules:
    user: 사용자 (Users)
    token: 리프레시 토큰 (Refresh tokens)
    attendance: 사용자 상태, 근태 기록, 수정 요청 (User states, attendance records, edit requests)
"""

from app.models.user import User
from app.models.token import RefreshToken
from app.models.attendance import AttendanceRecord, TimeEditRequest, UserState

__all__ = [
    "User",
    "RefreshToken",
    "UserState", "AttendanceRecord", "TimeEditRequest",
]
