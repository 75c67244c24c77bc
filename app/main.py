from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from dotenv import load_dotenv
from pathlib import Path
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

env_path = Path(__file__).resolve().parent.parent / ".env"
_ = load_dotenv(dotenv_path=env_path)

from app.config import settings
from app.database import engine, redis_client
from app.core.auth import user_id_from_token
from app.core.middleware import setup_middleware
from app.services.websocket_service import websocket_manager
from app.api import (
    auth,
    profiles,
    posts,
    exchanges,
    emergency,
    dashboard,
    verification,
    meta,
    websockets,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("🚀 Mutual Aid Network API starting up")

    if settings.DEBUG:
        logger.info("Running in debug mode - enhanced logging enabled")
    if not settings.CACHE_ENABLED:
        logger.info("Feed cache disabled - feed reads go straight to the database")

    yield

    logger.info("🛑 Mutual Aid Network API shutting down")

    try:
        await websocket_manager.shutdown()
        await redis_client.aclose()
        await engine.dispose()
        logger.info("✅ All services stopped gracefully")
    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}")


if settings.SENTRY_DSN:
    _ = sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=1.0 if settings.DEBUG else 0.1,
        profiles_sample_rate=1.0 if settings.DEBUG else 0.1,
        environment=settings.ENVIRONMENT,
        release=f"mutual-aid-network@{settings.VERSION}",
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        ignore_errors=[
            KeyboardInterrupt,
        ],
        send_default_pii=False,
        attach_stacktrace=True,
    )

    logger.info(f"✅ Sentry initialized for environment: {settings.ENVIRONMENT}")
else:
    logger.info("⚠️  Sentry DSN not configured - error tracking disabled")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    openapi_url="/api/openapi.json" if settings.docs_enabled else None,
    lifespan=lifespan,
)

setup_middleware(app)

app.include_router(auth.router, prefix="/api/auth", tags=["authentication"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
app.include_router(posts.router, prefix="/api/posts", tags=["posts"])
app.include_router(exchanges.router, prefix="/api/exchanges", tags=["exchanges"])
app.include_router(emergency.router, prefix="/api/emergency", tags=["emergency"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(
    verification.router, prefix="/api/verification", tags=["verification"]
)
app.include_router(meta.router, prefix="/api/meta", tags=["meta"])
app.include_router(websockets.router, tags=["websockets"])


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "features": {
            "authentication": True,
            "rate_limiting": settings.RATE_LIMIT_ENABLED,
            "feed_cache": settings.CACHE_ENABLED,
            "emergency_mode": True,
            "verification": True,
            "websocket_feed": True,
            "structured_logging": True,
        },
        "websocket_stats": websocket_manager.get_connection_stats(),
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    if settings.SENTRY_DSN:
        user_id = user_id_from_token(request.cookies.get("access_token"))
        if user_id is not None:
            sentry_sdk.set_user({"id": user_id})
        sentry_sdk.set_context(
            "request", {"url": str(request.url), "method": request.method}
        )
        _ = sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred",
        },
    )
