import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from jobly import __version__
from jobly.core.config import settings
from jobly.core.database import init_db, close_db
from jobly.core.exceptions import JoblyError
from jobly.core.logging_config import setup_logging
from jobly.api.endpoints import applications, auth, companies, health, jobs, users

setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up Jobly API...")
    init_db()
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Jobly API...")
    close_db()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=__version__,
    description="Job board API: companies, jobs, users and applications",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(message, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


@app.exception_handler(JoblyError)
async def jobly_exception_handler(request: Request, exc: JoblyError):
    """Domain errors: 400 bad request, 401 unauthorized, 404 not found."""
    return error_response(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query strings are bad requests, not 422s."""
    messages = []
    for error in exc.errors():
        field = ".".join(
            str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")
        )
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])

    logger.debug(f"Validation error on {request.url.path}: {messages}")
    return error_response(messages, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and methods, in the same error shape."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(message, exc.status_code)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Anything unhandled is a 500; details stay in the server log."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


# Include routers
app.include_router(health.router)
app.include_router(auth.router, prefix=settings.API_V1_STR)
app.include_router(companies.router, prefix=settings.API_V1_STR)
app.include_router(jobs.router, prefix=settings.API_V1_STR)
app.include_router(users.router, prefix=settings.API_V1_STR)
app.include_router(applications.router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "Jobly API",
        "version": __version__,
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
