"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, registration, token issuance/refresh, and current user info.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        email: 로그인 이메일 (Login email)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str = Field(..., min_length=1)  # 로그인 이메일 — 대소문자 무시 (Case-insensitive)
    password: str = Field(..., min_length=1)  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema. Creates a non-admin user and their
    attendance state row. Minimum password length is checked by the
    service against PASSWORD_MIN_LENGTH.

    Attributes:
        name: 표시 이름 (Display name)
        email: 로그인 이메일 (Login email, unique)
        password: 비밀번호 (Plain text, will be bcrypt-hashed on server)
    """

    name: str = Field(..., min_length=1, max_length=100)  # 표시 이름 (Display name)
    email: str = Field(..., min_length=3, max_length=255)  # 로그인 이메일 — 전체 고유 (Unique)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해싱 (Plain text, server hashes with bcrypt)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login, registration or token refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 30분 기본 (Access token, default TTL: 30min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마 — Carries the refresh token to rotate or revoke."""

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Attributes:
        id: 사용자 UUID (User unique identifier)
        name: 표시 이름 (Display name)
        email: 로그인 이메일 (Login email)
        is_admin: 관리자 여부 (Admin capability)
        is_active: 활성 상태 (Account active status)
    """

    id: str
    name: str
    email: str
    is_admin: bool
    is_active: bool
