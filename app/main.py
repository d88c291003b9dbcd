"""
Royalbird Studios API - FastAPI Application
Comics, blog and newsletter backend
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
import logging
import time

from app.core.config import settings
from app.utils.responses import error_response

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="API for Royalbird Studios comics, blog and newsletter",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(
        error=exc.detail,
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part != "body")
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])

    return error_response(
        error="Invalid Request Parameters",
        detail=messages,
        status_code=status.HTTP_400_BAD_REQUEST
    )


# Global Exception Handler so unexpected errors still use the error envelope
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")

    return error_response(
        error="Internal Server Error",
        detail=None if settings.is_production else str(exc),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_origins_list != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - health check"""
    return {
        "ok": True,
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": "1.0.0",
        "environment": settings.APP_ENV
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "environment": settings.APP_ENV
    }


@app.get("/health/db", tags=["Health"])
async def db_health_check():
    """Database connection health check"""
    from app.core.database import get_engine

    result = {"engine_created": False, "connection_test": False, "error": None}

    try:
        engine = get_engine()
        result["engine_created"] = engine is not None

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            result["connection_test"] = True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        result["error"] = str(e) if not settings.is_production else "Database unavailable"

    return result


# Import routers
from app.api import auth, users, comics, blogs, genres, tags, categories, subscribers, analytics  # noqa: E402

prefix = settings.API_PREFIX

# Include routers
app.include_router(auth.router, prefix=f"{prefix}/users", tags=["Authentication"])
app.include_router(users.router, prefix=f"{prefix}/users", tags=["Users"])
app.include_router(comics.router, prefix=f"{prefix}/comics", tags=["Comics"])
app.include_router(blogs.router, prefix=f"{prefix}/blogs", tags=["Blogs"])
app.include_router(genres.router, prefix=f"{prefix}/genres", tags=["Genres"])
app.include_router(tags.router, prefix=f"{prefix}/tags", tags=["Tags"])
app.include_router(categories.router, prefix=f"{prefix}/categories", tags=["Categories"])
app.include_router(subscribers.router, prefix=f"{prefix}/subscribers", tags=["Subscribers"])
app.include_router(analytics.router, prefix=f"{prefix}/admin/analytics", tags=["Analytics"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
