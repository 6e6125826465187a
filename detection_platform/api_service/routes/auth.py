"""
Email sign-up / sign-in endpoints.

Every handler follows the same pipeline: FastAPI validates the body against
the request schema (422 on failure), the handler delegates to the auth
service, and the result is shaped into the response. Credential authority
errors propagate to the application's handler, which answers with their own
status code; anything else is logged and turned into a 500.
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..db import get_db
from ..errors import CredentialAuthorityError
from ..identity import CredentialAuthority, get_credential_authority
from ..schemas import (
    ErrorResponse,
    SessionOut,
    SessionResponse,
    SignInEmail,
    SignInResult,
    SignUpEmail,
    UserOut,
)
from ..services import resolve_session, sign_in, sign_up
from ..utils.request_info import client_info_from_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signin/email",
    response_model=SignInResult,
    responses={
        401: {"description": "Invalid email or password", "model": ErrorResponse},
        500: {"description": "Internal server error", "model": ErrorResponse},
    },
    summary="Sign in with email and password",
)
async def sign_in_email(
    payload: SignInEmail,
    request: Request,
    response: Response,
    authority: CredentialAuthority = Depends(get_credential_authority),
) -> SignInResult:
    """
    Verify credentials and open a session.

    The session token is returned in the body and in the Authorization
    response header.
    """
    try:
        result = await sign_in(authority, payload, client=client_info_from_request(request))
    except CredentialAuthorityError:
        raise
    except Exception as e:
        logger.error(f"Sign-in failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign in"
        ) from e

    response.headers["Authorization"] = result.token
    return result


@router.post(
    "/signup/email",
    response_model=UserOut,
    responses={
        409: {"description": "Email already registered", "model": ErrorResponse},
        500: {"description": "Internal server error", "model": ErrorResponse},
    },
    summary="Sign up with email and password",
)
async def sign_up_email(
    payload: SignUpEmail,
    authority: CredentialAuthority = Depends(get_credential_authority),
) -> UserOut:
    try:
        result = await sign_up(authority, payload)
    except CredentialAuthorityError:
        raise
    except Exception as e:
        logger.error(f"Sign-up failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign up"
        ) from e

    return result.user


@router.get(
    "/session",
    response_model=SessionResponse,
    responses={
        401: {"description": "Missing, invalid or expired session", "model": ErrorResponse},
        500: {"description": "Internal server error", "model": ErrorResponse},
    },
    summary="Get the current session",
)
def get_session(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> SessionResponse:
    try:
        session = resolve_session(db, authorization)
        return SessionResponse(
            user=UserOut.model_validate(session.user),
            session=SessionOut.model_validate(session),
        )
    except CredentialAuthorityError:
        raise
    except Exception as e:
        logger.error(f"Session lookup failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load session"
        ) from e
