"""인증 서비스 — 로그인, 회원가입, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for login, registration, and token refresh.
Handles the JWT token lifecycle and user profile retrieval. Registration
also creates the user's attendance state row.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.enums import AttendanceState
from app.database import utcnow
from app.models.user import User
from app.repositories.attendance_repository import user_state_repository
from app.repositories.auth_repository import auth_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from app.utils import activity_log
from app.utils.activity_log import LogAction
from app.utils.exceptions import BadRequestError, DuplicateError, UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import hash_password, verify_password

INVALID_CREDENTIALS_MESSAGE: str = (
    "이메일 또는 비밀번호가 올바르지 않습니다 (Invalid email or password)"
)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages login, registration, token refresh, and logout.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str | bool]:
        """JWT 토큰 페이로드를 생성합니다 — Build the JWT payload from user data."""
        return {
            "sub": str(user.id),
            "email": user.email,
            "name": user.name,
            "is_admin": user.is_admin,
        }

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)
        """
        payload: dict[str, str | bool] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 기존 리프레시 토큰 정리 — Clean up old refresh tokens to prevent accumulation
        await auth_repository.delete_user_refresh_tokens(db, user.id)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Process email/password login.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            activity_log.warn(
                LogAction.LOGIN_FAILED,
                "로그인 실패 (Login failed)",
                user.id if user is not None else None,
                email=data.email,
            )
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_active:
            raise UnauthorizedError("비활성화된 계정입니다 (Account is deactivated)")

        tokens: TokenResponse = await self._generate_tokens(db, user)
        activity_log.info(LogAction.LOGIN, "로그인 (Logged in)", user.id, is_admin=user.is_admin)
        return tokens

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> TokenResponse:
        """회원가입을 처리합니다.

        Process self-registration: create a non-admin user, their attendance
        state row (not checked in) and a token pair.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            TokenResponse: 토큰 응답 (Token response)

        Raises:
            BadRequestError: 입력값이 유효하지 않을 때 (Blank name or short password)
            DuplicateError: 같은 이메일이 이미 존재할 때 (Email already registered)
        """
        name: str = data.name.strip()
        email: str = data.email.strip().lower()
        if not name or not email:
            raise BadRequestError("모든 항목을 입력해주세요 (All fields are required)")
        if len(data.password) < settings.PASSWORD_MIN_LENGTH:
            raise BadRequestError(
                f"비밀번호는 {settings.PASSWORD_MIN_LENGTH}자 이상이어야 합니다 "
                f"(Password must be at least {settings.PASSWORD_MIN_LENGTH} characters)"
            )

        existing: User | None = await user_repository.get_by_email(db, email)
        if existing is not None:
            raise DuplicateError("이미 등록된 이메일입니다 (Email already registered)")

        user: User = await user_repository.create(
            db,
            {
                "name": name,
                "email": email,
                "password_hash": hash_password(data.password),
                "is_admin": False,
            },
        )
        await user_state_repository.create_user_state(
            db, user.id, AttendanceState.NOT_CHECKED_IN, utcnow()
        )

        tokens: TokenResponse = await self._generate_tokens(db, user)
        activity_log.info(LogAction.REGISTER, "회원가입 (Registered)", user.id, email=email)
        return tokens

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a refresh token. The old token is revoked.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        db_token = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        if db_token.expires_at < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        user_id: str | None = payload.get("sub")
        if user_id is None or payload.get("type") != "refresh":
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, UUID(user_id))
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        # 기존 리프레시 토큰 삭제 후 새 토큰 발급 — Delete old token and issue new pair
        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(
        self,
        db: AsyncSession,
        user: User,
        refresh_token: str,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다.

        Revoke the given refresh token.
        """
        await auth_repository.delete_refresh_token(db, refresh_token)
        activity_log.info(LogAction.LOGOUT, "로그아웃 (Logged out)", user.id)

    def get_me(self, user: User) -> UserMeResponse:
        """현재 로그인한 사용자 프로필을 반환합니다 — Profile of the authenticated user."""
        return UserMeResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            is_admin=user.is_admin,
            is_active=user.is_active,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
