from passlib.context import CryptContext
from datetime import datetime, timedelta
import uuid
import jwt

from .config import settings

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def session_expiry(now: datetime = None) -> datetime:
    now = now or datetime.utcnow()
    return now + timedelta(days=settings.SESSION_EXPIRES_IN_DAYS)


def create_session_token(user_id: uuid.UUID, session_id: uuid.UUID, expires_at: datetime) -> str:
    """
    Mint the opaque token stored on a session row.

    The session id goes in as "jti" so two sessions for the same user never
    share a token.
    """
    payload = {"sub": str(user_id), "jti": str(session_id), "exp": expires_at}
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=settings.AUTH_TOKEN_ALGORITHM)


def decode_session_token(token: str) -> dict:
    """Raises jwt.PyJWTError on a bad signature, malformed token or expiry."""
    return jwt.decode(token, settings.AUTH_SECRET, algorithms=[settings.AUTH_TOKEN_ALGORITHM])
