"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware and router registration.
Configures CORS, health check, the store-failure handler, and includes
the auth, app and admin routers.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError

from app.config import settings
from app.core.errors import StoreUnavailableError
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.utils.exceptions import ServiceUnavailableError

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _store_unavailable_response(message: str) -> JSONResponse:
    error: ServiceUnavailableError = ServiceUnavailableError(
        detail={"code": "store_unavailable", "message": message, "current_state": None}
    )
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """저장소 장애 → 503 (Store failure maps to 503; clients may retry)."""
    return _store_unavailable_response(exc.detail)


async def driver_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """서비스 밖에서 발생한 DB 연결 오류 → 503.

    Connectivity errors raised outside a service call (e.g. at commit in
    the auth routes) get the same 503 detail as StoreUnavailableError.
    """
    return _store_unavailable_response(StoreUnavailableError().detail)


for _driver_error in (OperationalError, InterfaceError, DisconnectionError):
    app.add_exception_handler(_driver_error, driver_error_handler)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.admin import admin_router  # noqa: E402
from app.api.app import app_router  # noqa: E402
from app.api.auth import router as auth_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(app_router, prefix="/api/v1/app")
app.include_router(admin_router, prefix="/api/v1/admin")
