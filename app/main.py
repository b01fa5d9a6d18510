import os
import asyncio
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.staticfiles import StaticFiles
from sqlmodel import Session

# Load environment variables as early as possible
load_dotenv()

from .core.config import settings
from .database import engine, create_db_and_tables
from .dependencies import build_credential_store, build_otp_engine, get_notifier
from .exceptions import http_exception_handler, validation_exception_handler
from .middleware import SecurityMiddleware, LoggingMiddleware, ErrorHandlingMiddleware, RequestSizeLimitMiddleware
from .routers import auth_router, users_router, upload_router
from .schemas import HealthResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


def check_secret_key() -> None:
    if not settings.uses_insecure_secret:
        return
    if settings.is_production:
        raise RuntimeError("JWT_TOKEN_SECRET must be set in production")
    logger.warning("JWT_TOKEN_SECRET is not set; using an insecure development secret")


def purge_expired_otps() -> int:
    with Session(engine) as session:
        otp_engine = build_otp_engine(session, build_credential_store(session))
        return otp_engine.purge_expired()


async def purge_expired_otps_periodically(interval_seconds: int) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_in_threadpool(purge_expired_otps)
        except Exception:
            logger.exception("Purging expired OTP records failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.APP_NAME}...")
    check_secret_key()
    app.state.db_init_ok = True
    app.state.db_init_error = None
    try:
        create_db_and_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        # Do not crash the app; report via health endpoint
        app.state.db_init_ok = False
        app.state.db_init_error = str(e)
        logger.exception("Database initialization failed")

    notifier = app.dependency_overrides.get(get_notifier, get_notifier)()
    if hasattr(notifier, "start"):
        notifier.start()
    purge_task = asyncio.create_task(purge_expired_otps_periodically(settings.OTP_PURGE_INTERVAL_SECONDS))
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    purge_task.cancel()
    try:
        await purge_task
    except asyncio.CancelledError:
        pass
    if hasattr(notifier, "stop"):
        await notifier.stop()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url=("/docs" if settings.DOCS_ENABLED else None),
    redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
    openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
)

# Exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Add middleware
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)

# GZip compression
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.allowed_methods_list,
    allow_headers=settings.allowed_headers_list,
)

# Mount static files for uploaded photos
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(upload_router.router)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health():
    db_ok = getattr(app.state, "db_init_ok", True)
    return HealthResponse(
        status="ok" if db_ok else "degraded",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        database="ok" if db_ok else (getattr(app.state, "db_init_error", None) or "error"),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
