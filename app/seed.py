"""초기 데이터 시드 스크립트 — 테이블과 관리자 계정 생성.

Seed script — Creates the tables and the initial administrator.
Run this script once to bootstrap the database.

Usage:
    python -m app.seed

Creates:
    - 1개 관리자 계정: admin@example.com / admin123 (1 admin user)
    - 관리자의 근태 상태 행 (The admin's attendance state row)
"""

import asyncio

from app.core.enums import AttendanceState
from app.database import Base, async_session, engine, utcnow
from app.models import User
from app.repositories.attendance_repository import user_state_repository
from app.repositories.user_repository import user_repository
from app.utils.password import hash_password

ADMIN_EMAIL: str = "admin@example.com"
ADMIN_PASSWORD: str = "admin123"


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create tables if they don't exist, then insert the administrator.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        existing: User | None = await user_repository.get_by_email(db, ADMIN_EMAIL)
        if existing is not None:
            print("Already seeded. Skipping.")
            return

        admin: User = await user_repository.create(
            db,
            {
                "name": "管理者",
                "email": ADMIN_EMAIL,
                "password_hash": hash_password(ADMIN_PASSWORD),
                "is_admin": True,
            },
        )
        await user_state_repository.create_user_state(
            db, admin.id, AttendanceState.NOT_CHECKED_IN, utcnow()
        )

        await db.commit()
        print(f"Seeded: admin user={ADMIN_EMAIL}/{ADMIN_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed())
