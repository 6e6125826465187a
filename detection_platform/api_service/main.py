"""
Detection platform API service - application assembly
"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.engine import Engine
from typing import Optional
import logging

from .config import settings
from .db import create_db_engine, create_session_factory, init_db
from .errors import CredentialAuthorityError
from .identity import CredentialAuthority, SqlCredentialAuthority
from .routes import api_router, health
from .schemas import ErrorResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release the connection pool on shutdown"""
    init_db(app.state.engine)
    yield
    app.state.engine.dispose()


async def credential_authority_error_handler(request: Request, exc: CredentialAuthorityError) -> JSONResponse:
    logger.warning(
        "Auth request rejected: path=%s, status=%s, error_type=%s",
        request.url.path, exc.status_code, exc.error_type
    )
    body = ErrorResponse(detail=exc.message, error_type=exc.error_type)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


REDACTED_FIELDS = {"password"}


def _redact_validation_error(error: dict) -> dict:
    error = dict(error)
    loc = error.get("loc") or ()
    if loc and loc[-1] in REDACTED_FIELDS:
        error.pop("input", None)
    elif isinstance(error.get("input"), dict):
        error["input"] = {
            key: value for key, value in error["input"].items() if key not in REDACTED_FIELDS
        }
    return error


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Standard 422 body with submitted passwords left out of every error entry"""
    errors = [_redact_validation_error(error) for error in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(errors)},
    )


def create_app(
    engine: Optional[Engine] = None,
    credential_authority: Optional[CredentialAuthority] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The store handle and the credential authority are constructed here, once,
    and reach handlers through app.state-backed dependencies.

    Args:
        engine: SQLAlchemy engine. Built from settings.DATABASE_URL if None.
        credential_authority: Authority to delegate sign-up/sign-in to.
            Defaults to SqlCredentialAuthority over the engine.
    """
    engine = engine if engine is not None else create_db_engine()
    session_factory = create_session_factory(engine)

    app = FastAPI(
        title="Detection Platform API",
        description="Authentication and account backend for the AI-content detection service",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.credential_authority = credential_authority or SqlCredentialAuthority(session_factory)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )

    app.add_exception_handler(CredentialAuthorityError, credential_authority_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(api_router)
    app.include_router(health.router)

    return app


app = create_app()
