"""
Auth delegation: hands validated payloads to the credential authority.

Nothing here retries, caches or translates errors; whatever the authority
raises reaches the caller as-is.
"""
from datetime import datetime
from typing import Optional

import jwt
from sqlalchemy.orm import Session

from .auth import decode_session_token
from .errors import InvalidSession
from .identity import CredentialAuthority
from .models import Session as UserSession
from .schemas import SignInEmail, SignInResult, SignUpEmail, SignUpResult
from .utils.request_info import ClientInfo


async def sign_up(authority: CredentialAuthority, credentials: SignUpEmail) -> SignUpResult:
    return await authority.sign_up_email(
        email=credentials.email,
        name=credentials.name,
        password=credentials.password,
    )


async def sign_in(
    authority: CredentialAuthority,
    credentials: SignInEmail,
    client: Optional[ClientInfo] = None,
) -> SignInResult:
    return await authority.sign_in_email(
        email=credentials.email,
        password=credentials.password,
        client=client,
    )


def resolve_session(db: Session, authorization: Optional[str]) -> UserSession:
    """
    Look up the live session for an Authorization header value.

    Accepts the bare token (as returned by sign-in) or "Bearer <token>".

    Raises:
        InvalidSession: header missing, token malformed or expired, or no
            matching session row
    """
    if not authorization or not authorization.strip():
        raise InvalidSession("Not authenticated")

    token = authorization.strip()
    if token.lower().startswith("bearer "):
        token = token.split(" ", 1)[1].strip()

    try:
        decode_session_token(token)
    except jwt.PyJWTError as exc:
        raise InvalidSession() from exc

    session = db.query(UserSession).filter(UserSession.token == token).first()
    if not session or session.expires_at < datetime.utcnow():
        raise InvalidSession()
    return session
