"""
CMDB Service
FastAPI Application Entry Point
"""

import logging
import os
import sys
import time
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from cmdb.db.session import close_db, init_db
from cmdb.routes.api_key_routes import router as keys_router
from cmdb.routes.auth_routes import router as auth_router
from cmdb.routes.group_routes import router as group_router
from cmdb.routes.ingest_routes import router as ingest_router
from cmdb.routes.metrics_routes import router as metrics_router
from cmdb.routes.permission_routes import router as permission_router
from cmdb.routes.server_routes import router as server_router
from cmdb.routes.ssh_routes import router as ssh_router
from cmdb.routes.ssl_routes import router as ssl_router
from cmdb.routes.user_routes import router as user_router

load_dotenv()


def configure_logging() -> None:
    """Log to stdout, and to LOG_FILE when it is set"""
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = os.getenv("LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


configure_logging()
logger = logging.getLogger(__name__)


CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def cors_settings() -> dict:
    """
    CORS options from CORS_ALLOWED_ORIGINS (comma separated, default "*")

    Credentials are only allowed with an explicit origin list.
    """
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    if not origins or "*" in origins:
        return {"allow_origins": ["*"], "allow_credentials": False}
    return {"allow_origins": origins, "allow_credentials": True}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup"""
    logger.info("Starting up CMDB service...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}", exc_info=True)
        raise

    yield

    logger.info("Shutting down CMDB service...")
    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {str(e)}", exc_info=True)


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | status=%d latency=%.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


app = FastAPI(
    title="CMDB Service API",
    description="Server inventory, SSL certificates, SSH terminal and alerting",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_methods=CORS_ALLOWED_METHODS,
    allow_headers=["*"],
    **cors_settings(),
)
app.add_middleware(_RequestLogMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTPException in the {"error": ...} envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON and schema violations are both a bad request"""
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to catch unhandled exceptions
    Logs error and returns generic error message to client
    """
    logger.error(
        f"Unhandled exception: {str(exc)} - Path: {request.url.path}", exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An internal error occurred"},
    )


# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(user_router, prefix="/api/users", tags=["Users"])
app.include_router(server_router, prefix="/api/servers", tags=["Servers"])
app.include_router(group_router, prefix="/api/groups", tags=["Groups"])
app.include_router(permission_router, prefix="/api/permissions", tags=["Permissions"])
app.include_router(keys_router, prefix="/api/api-keys", tags=["API Keys"])
app.include_router(ssl_router, prefix="/api/ssl-certificates", tags=["SSL Certificates"])
app.include_router(ingest_router, prefix="/api/ingest", tags=["Ingest"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(ssh_router, prefix="/ws", tags=["SSH"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app with uvicorn"""
    if not os.getenv("DATABASE_URL"):
        logger.error("DATABASE_URL environment variable is required")
        sys.exit(1)

    port = int(os.getenv("SERVER_PORT", "8080"))
    logger.info(f"Server starting on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_config=None)


if __name__ == "__main__":
    run()
