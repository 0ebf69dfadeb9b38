"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
A single flat user table; administrators are flagged with ``is_admin``.

Tables:
    - users: 사용자 계정 (User accounts)
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UTCDateTime, utcnow


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is the login identifier and is globally unique.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 표시 이름 (Display name)
        email: 로그인 이메일 (Login email, unique)
        password_hash: bcrypt 해시 (Bcrypt password hash)
        is_admin: 관리자 여부 (Whether the user may decide edit requests)
        is_active: 활성 여부 (Inactive users cannot authenticate)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 표시 이름 — Display name
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 로그인 이메일 — Login email, unique across the system
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 비밀번호 해시 — bcrypt hash, never plain text
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 관리자 여부 — Admin capability (edit-request decisions, attendance review)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
