"""FastAPI application entry point."""

import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Must run before anything reads the environment
load_dotenv()

# main.py is at <root>/src/api/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import auth, health
from utils.config import get_settings
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.indexes import ensure_all_indexes
from domain.model.errors import DomainError, InvalidTokenError, MissingTokenError

settings = get_settings()

setup_structured_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Auth API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: load configuration and prepare the users collection."""
    # Fails fast when JWT_ACCESS_TOKEN is missing
    settings.require_jwt_secret()

    client = get_mongodb_client()
    if client:
        if ensure_all_indexes(client[settings.database_name]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="User signup, signin and bearer-token protected access",
    version=VERSION,
    lifespan=lifespan,
)

# Wildcard origins cannot be combined with credentials in browsers
if settings.cors_origins == "*":
    cors_origins = ["*"]
    allow_credentials = False
else:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _is_missing(error: dict) -> bool:
    return error.get("type") == "missing" or ("input" in error and error["input"] is None)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Reject malformed request bodies with 400 instead of FastAPI's default 422."""
    # Absent and null fields both count as missing
    if any(_is_missing(error) for error in exc.errors()):
        message = "All fields are required"
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Errors raised outside route handlers (e.g. while resolving dependencies)."""
    logger.error("Unhandled domain error", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


app.add_exception_handler(MissingTokenError, auth.missing_token_handler)
app.add_exception_handler(InvalidTokenError, auth.invalid_token_handler)

app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    # Access logs are disabled; routes log through the structured logger
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        access_log=False
    )
