import uuid

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from detection_platform.api_service.identity import CredentialAuthority
from detection_platform.api_service.main import create_app
from detection_platform.api_service.models import Account, Session, User
from detection_platform_tests.helpers import signup_payload

SIGNUP_URL = "/api/auth/signup/email"
SIGNIN_URL = "/api/auth/signin/email"
SESSION_URL = "/api/auth/session"


def test_signup_creates_user_and_account(client, session_factory):
    resp = client.post(SIGNUP_URL, json=signup_payload())
    assert resp.status_code == 200

    body = resp.json()
    assert body["email"] == "alice@example.com"
    assert body["name"] == "Alice"
    assert body["tier"] == "free"
    assert body["email_verified"] is False
    assert "password" not in body
    user_id = uuid.UUID(body["id"])

    with session_factory() as db:
        user = db.get(User, user_id)
        assert user is not None
        assert user.email == "alice@example.com"

        accounts = db.query(Account).filter(Account.user_id == user_id).all()
        assert len(accounts) == 1
        account = accounts[0]
        assert account.provider == "email"
        assert account.provider_id == "credential"
        assert account.account_id == str(user_id)
        # stored as a hash, never in the clear
        assert account.password and account.password != "correct-horse"


def test_signup_generates_fresh_ids(client):
    first = client.post(SIGNUP_URL, json=signup_payload(email="one@example.com"))
    second = client.post(SIGNUP_URL, json=signup_payload(email="two@example.com"))
    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["id"] != second.json()["id"]


def test_signup_duplicate_email_conflicts(client, session_factory):
    assert client.post(SIGNUP_URL, json=signup_payload()).status_code == 200

    dup = client.post(SIGNUP_URL, json=signup_payload(name="Another Alice"))
    assert dup.status_code == 409
    assert dup.json()["error_type"] == "USER_ALREADY_EXISTS"

    # differing only in case is still the same address
    upper = client.post(SIGNUP_URL, json=signup_payload(email="ALICE@example.com"))
    assert upper.status_code == 409

    with session_factory() as db:
        assert db.query(User).count() == 1
        assert db.query(Account).count() == 1


def test_signup_invalid_email_rejected_before_store(client, session_factory):
    resp = client.post(SIGNUP_URL, json=signup_payload(email="not-an-email"))
    assert resp.status_code == 422

    with session_factory() as db:
        assert db.query(User).count() == 0


def test_signup_password_length_bounds(client, session_factory):
    assert client.post(SIGNUP_URL, json=signup_payload(password="short")).status_code == 422
    assert client.post(SIGNUP_URL, json=signup_payload(password="x" * 49)).status_code == 422

    with session_factory() as db:
        assert db.query(User).count() == 0

    assert client.post(SIGNUP_URL, json=signup_payload(email="min@example.com", password="x" * 8)).status_code == 200
    assert client.post(SIGNUP_URL, json=signup_payload(email="max@example.com", password="x" * 48)).status_code == 200


def test_signup_short_name_rejected(client, session_factory):
    resp = client.post(SIGNUP_URL, json=signup_payload(name="Al"))
    assert resp.status_code == 422

    with session_factory() as db:
        assert db.query(User).count() == 0


def test_signup_missing_fields(client):
    resp = client.post(SIGNUP_URL, json={"email": "alice@example.com"})
    assert resp.status_code == 422


def test_signup_special_use_domain_rejected(client, session_factory):
    resp = client.post(SIGNUP_URL, json=signup_payload(email="bob@corp.local"))
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["loc"] == ["body", "email"]

    with session_factory() as db:
        assert db.query(User).count() == 0


def test_validation_errors_do_not_echo_password(client):
    resp = client.post(SIGNUP_URL, json=signup_payload(password="s3cr3t!"))
    assert resp.status_code == 422
    error = resp.json()["detail"][0]
    assert error["loc"] == ["body", "password"]
    assert "input" not in error
    assert "s3cr3t!" not in resp.text

    resp = client.post(SIGNUP_URL, json={"email": "alice@example.com", "password": "hunter2-hunter2"})
    assert resp.status_code == 422
    error = resp.json()["detail"][0]
    assert error["loc"] == ["body", "name"]
    assert error["input"] == {"email": "alice@example.com"}
    assert "hunter2-hunter2" not in resp.text


def test_signin_returns_token_in_body_and_header(client, session_factory):
    signup = client.post(SIGNUP_URL, json=signup_payload())
    user_id = signup.json()["id"]

    resp = client.post(
        SIGNIN_URL,
        json={"email": "alice@example.com", "password": "correct-horse"},
        headers={"User-Agent": "pytest-browser/1.0"},
    )
    assert resp.status_code == 200

    body = resp.json()
    token = body["token"]
    assert token
    assert resp.headers["Authorization"] == token
    assert body["user"]["id"] == user_id
    assert body["user"]["email"] == "alice@example.com"

    with session_factory() as db:
        sessions = db.query(Session).all()
        assert len(sessions) == 1
        session = sessions[0]
        assert str(session.user_id) == user_id
        assert session.token == token
        assert session.user_agent == "pytest-browser/1.0"
        assert session.ip_address is not None
        assert session.expires_at > session.created_at

        user = db.get(User, uuid.UUID(user_id))
        assert user.last_login_at is not None


def test_signin_issues_distinct_tokens(client, session_factory):
    client.post(SIGNUP_URL, json=signup_payload())
    creds = {"email": "alice@example.com", "password": "correct-horse"}

    first = client.post(SIGNIN_URL, json=creds).json()["token"]
    second = client.post(SIGNIN_URL, json=creds).json()["token"]
    assert first != second

    with session_factory() as db:
        assert db.query(Session).count() == 2


def test_signin_wrong_password_creates_no_session(client, session_factory):
    client.post(SIGNUP_URL, json=signup_payload())

    resp = client.post(SIGNIN_URL, json={"email": "alice@example.com", "password": "wrong-password"})
    assert resp.status_code == 401
    assert resp.json()["error_type"] == "INVALID_EMAIL_OR_PASSWORD"
    assert "Authorization" not in resp.headers

    with session_factory() as db:
        assert db.query(Session).count() == 0


def test_signin_unknown_email(client, session_factory):
    resp = client.post(SIGNIN_URL, json={"email": "nobody@example.com", "password": "whatever123"})
    assert resp.status_code == 401

    with session_factory() as db:
        assert db.query(Session).count() == 0


def test_signin_does_not_apply_password_length_rule(client):
    # A short password is a failed credential check, not a malformed payload
    client.post(SIGNUP_URL, json=signup_payload())
    resp = client.post(SIGNIN_URL, json={"email": "alice@example.com", "password": "x"})
    assert resp.status_code == 401


def test_signin_invalid_payload(client):
    assert client.post(SIGNIN_URL, json={"email": "alice@example.com"}).status_code == 422
    assert client.post(SIGNIN_URL, json={"email": "nope", "password": "correct-horse"}).status_code == 422


def test_session_lookup(client):
    client.post(SIGNUP_URL, json=signup_payload())
    token = client.post(SIGNIN_URL, json={"email": "alice@example.com", "password": "correct-horse"}).json()["token"]

    raw = client.get(SESSION_URL, headers={"Authorization": token})
    assert raw.status_code == 200
    assert raw.json()["user"]["email"] == "alice@example.com"

    bearer = client.get(SESSION_URL, headers={"Authorization": f"Bearer {token}"})
    assert bearer.status_code == 200
    assert bearer.json()["session"]["id"] == raw.json()["session"]["id"]


def test_session_lookup_rejects_missing_or_bad_token(client):
    missing = client.get(SESSION_URL)
    assert missing.status_code == 401
    assert missing.json()["error_type"] == "INVALID_SESSION"

    garbage = client.get(SESSION_URL, headers={"Authorization": "Bearer not-a-token"})
    assert garbage.status_code == 401


def test_session_gone_after_user_deleted(client, session_factory):
    user_id = client.post(SIGNUP_URL, json=signup_payload()).json()["id"]
    token = client.post(SIGNIN_URL, json={"email": "alice@example.com", "password": "correct-horse"}).json()["token"]

    with session_factory() as db:
        db.delete(db.get(User, uuid.UUID(user_id)))
        db.commit()

    assert client.get(SESSION_URL, headers={"Authorization": token}).status_code == 401


class BrokenAuthority(CredentialAuthority):
    async def sign_up_email(self, email, name, password):
        raise RuntimeError("identity store offline")

    async def sign_in_email(self, email, password, client=None):
        raise RuntimeError("identity store offline")


def test_unexpected_errors_become_500(engine):
    app = create_app(engine=engine, credential_authority=BrokenAuthority())
    with TestClient(app) as c:
        signup = c.post(SIGNUP_URL, json=signup_payload())
        assert signup.status_code == 500
        assert signup.json()["detail"] == "Failed to sign up"

        signin = c.post(SIGNIN_URL, json={"email": "alice@example.com", "password": "correct-horse"})
        assert signin.status_code == 500
        assert signin.json()["detail"] == "Failed to sign in"
        assert "Authorization" not in signin.headers


def test_session_lookup_storage_failure_becomes_500(client, monkeypatch, caplog):
    def unavailable(db, authorization):
        raise OperationalError("SELECT sessions", {}, Exception("database is locked"))

    monkeypatch.setattr("detection_platform.api_service.routes.auth.resolve_session", unavailable)

    resp = client.get(SESSION_URL, headers={"Authorization": "some-token"})
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"detail": "Failed to load session"}
    assert any(
        record.levelname == "ERROR" and record.message.startswith("Session lookup failed")
        for record in caplog.records
    )
