"""Request payload contracts for email sign-up and sign-in."""
import pytest
from pydantic import ValidationError

from detection_platform.api_service.schemas import SignInEmail, SignUpEmail


def test_signup_accepts_well_formed_payload():
    payload = SignUpEmail(email="alice@example.com", password="correct-horse", name="Alice")
    assert payload.email == "alice@example.com"
    assert payload.name == "Alice"


@pytest.mark.parametrize(
    "field, value",
    [
        ("email", "alice"),
        ("email", "alice@"),
        ("email", "@example.com"),
        ("password", "seven77"),
        ("password", "p" * 49),
        ("name", "Al"),
        ("name", ""),
    ],
)
def test_signup_rejects_constraint_violations(field, value):
    data = {"email": "alice@example.com", "password": "correct-horse", "name": "Alice"}
    data[field] = value
    with pytest.raises(ValidationError) as exc_info:
        SignUpEmail(**data)
    assert exc_info.value.errors()[0]["loc"] == (field,)


@pytest.mark.parametrize("missing", ["email", "password", "name"])
def test_signup_requires_all_fields(missing):
    data = {"email": "alice@example.com", "password": "correct-horse", "name": "Alice"}
    del data[missing]
    with pytest.raises(ValidationError):
        SignUpEmail(**data)


def test_signup_password_bounds_are_inclusive():
    SignUpEmail(email="alice@example.com", password="p" * 8, name="Bob")
    SignUpEmail(email="alice@example.com", password="p" * 48, name="Bob")


def test_signin_has_only_email_and_password():
    assert set(SignInEmail.model_fields) == {"email", "password"}


def test_signin_checks_presence_not_length():
    assert SignInEmail(email="alice@example.com", password="x").password == "x"

    with pytest.raises(ValidationError):
        SignInEmail(email="alice@example.com")
    with pytest.raises(ValidationError):
        SignInEmail(email="not-an-email", password="correct-horse")
