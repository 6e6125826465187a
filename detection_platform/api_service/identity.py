"""
Credential authority: the component that owns password verification and
session issuance.

Routes and services only ever see the two operations on CredentialAuthority.
SqlCredentialAuthority is the implementation backed by the users, accounts
and sessions tables.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
import logging
import uuid

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .auth import hash_password, verify_password, create_session_token, session_expiry
from .errors import EmailAlreadyRegistered, InvalidCredentials
from .models import Account, Session, User
from .schemas import SignInResult, SignUpResult, UserOut
from .utils.request_info import ClientInfo

logger = logging.getLogger(__name__)

# Account.providerId for email/password credentials
CREDENTIAL_PROVIDER_ID = "credential"


class CredentialAuthority(ABC):

    @abstractmethod
    async def sign_up_email(self, email: str, name: str, password: str) -> SignUpResult:
        """Register a user with email and password."""

    @abstractmethod
    async def sign_in_email(
        self, email: str, password: str, client: Optional[ClientInfo] = None
    ) -> SignInResult:
        """Verify credentials and issue a session token."""


class SqlCredentialAuthority(CredentialAuthority):
    """
    Credential authority storing users, accounts and sessions through SQLAlchemy.

    Each operation runs in its own database session on the threadpool, so the
    calling coroutine suspends while the store is busy.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def sign_up_email(self, email: str, name: str, password: str) -> SignUpResult:
        return await run_in_threadpool(self._sign_up_email, email, name, password)

    async def sign_in_email(
        self, email: str, password: str, client: Optional[ClientInfo] = None
    ) -> SignInResult:
        return await run_in_threadpool(self._sign_in_email, email, password, client or ClientInfo())

    def _sign_up_email(self, email: str, name: str, password: str) -> SignUpResult:
        email = email.lower()
        db = self.session_factory()
        try:
            if db.query(User).filter(User.email == email).first():
                logger.info("Sign-up refused, email already registered")
                raise EmailAlreadyRegistered()

            user_id = uuid.uuid4()
            user = User(id=user_id, email=email, name=name)
            user.accounts.append(
                Account(
                    account_id=str(user_id),
                    provider_id=CREDENTIAL_PROVIDER_ID,
                    provider="email",
                    provider_account_id=str(user_id),
                    password=hash_password(password),
                )
            )
            db.add(user)
            try:
                db.commit()
            except IntegrityError as e:
                # Concurrent sign-up with the same email won the race
                db.rollback()
                logger.info("Sign-up refused, email registered concurrently")
                raise EmailAlreadyRegistered() from e

            db.refresh(user)
            logger.info("User signed up: user_id=%s", user.id)
            return SignUpResult(user=UserOut.model_validate(user))
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def _sign_in_email(self, email: str, password: str, client: ClientInfo) -> SignInResult:
        db = self.session_factory()
        try:
            user = db.query(User).filter(User.email == email.lower()).first()
            if not user:
                logger.info("Sign-in failed: unknown email")
                raise InvalidCredentials()

            account = (
                db.query(Account)
                .filter(Account.user_id == user.id, Account.provider_id == CREDENTIAL_PROVIDER_ID)
                .first()
            )
            if not account or not account.password or not verify_password(password, account.password):
                logger.info("Sign-in failed: bad credentials for user_id=%s", user.id)
                raise InvalidCredentials()

            now = datetime.utcnow()
            session_id = uuid.uuid4()
            expires_at = session_expiry(now)
            token = create_session_token(user.id, session_id, expires_at)
            db.add(
                Session(
                    id=session_id,
                    user_id=user.id,
                    token=token,
                    expires_at=expires_at,
                    ip_address=client.ip_address,
                    user_agent=client.user_agent,
                )
            )
            user.last_login_at = now
            db.commit()
            db.refresh(user)

            logger.info("User signed in: user_id=%s, session_id=%s", user.id, session_id)
            return SignInResult(user=UserOut.model_validate(user), token=token)
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()


def get_credential_authority(request: Request) -> CredentialAuthority:
    """Dependency returning the authority built at application startup."""
    return request.app.state.credential_authority
