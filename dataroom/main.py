from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from dataroom.core.config import settings
from dataroom.core.database import init_db, close_db, AsyncSessionLocal
from dataroom.core.exceptions import DataroomError
from dataroom.core.logging_config import logger
from dataroom.core.middleware import RequestLoggingMiddleware
from dataroom.core.rate_limiter import limiter, rate_limit_exceeded_handler
from dataroom.api.router import api_router
from dataroom.db.seed_data import seed_database


def validate_critical_config():
    """Validate critical configuration at startup - fail fast in production"""
    errors = []

    if settings.is_production():
        if not settings.SECRET_KEY or settings.SECRET_KEY == "CHANGE_ME":
            errors.append("SECRET_KEY is not set or using default value")
        if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
            errors.append("JWT_SECRET_KEY is not set or using default value")
        if settings.DEMO_MODE:
            errors.append("DEMO_MODE must be disabled in production")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Invalid configuration: {', '.join(errors)}")

    if settings.DEMO_MODE:
        logger.warning("[Startup] DEMO_MODE enabled - any email can sign in")

    logger.info("[Startup] Configuration validated")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the in-memory database"""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")

    validate_critical_config()
    await init_db()

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_database(session)

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Investor data room: OTP login, NDA gating, documents, Q&A and admin console API",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    @app.exception_handler(DataroomError)
    async def dataroom_error_handler(request: Request, exc: DataroomError):
        if exc.status_code >= 500:
            logger.log_error_with_context(exc, context=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if settings.DEBUG else "An error occurred"
            }
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


def run():
    """Console entry point: serve the demo backend with uvicorn"""
    import uvicorn

    uvicorn.run(
        "dataroom.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
