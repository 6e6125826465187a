"""
Errors raised by the credential authority.

Route handlers surface these unmodified, using status_code and error_type
to build the HTTP error response.
"""


class CredentialAuthorityError(Exception):
    status_code = 400
    error_type = "AUTH_ERROR"
    message = "Authentication request failed"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class EmailAlreadyRegistered(CredentialAuthorityError):
    status_code = 409
    error_type = "USER_ALREADY_EXISTS"
    message = "User already exists"


class InvalidCredentials(CredentialAuthorityError):
    status_code = 401
    error_type = "INVALID_EMAIL_OR_PASSWORD"
    message = "Invalid email or password"


class InvalidSession(CredentialAuthorityError):
    status_code = 401
    error_type = "INVALID_SESSION"
    message = "Invalid or expired session"
