from __future__ import annotations

"""Centralized, structured exception hierarchy for Tillgate.

Every error carries a machine-readable ``code`` for programmatic handling and a
human-readable ``message`` for logging. The messages of authentication failures
are generic; the API layer maps whole families of errors onto a
single wire response so that callers cannot tell the sub-cases apart.
"""

from typing import Final

__all__: Final = [
    "TillgateError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "AccountInactiveError",
    "SessionRevokedError",
    "TokenError",
    "TokenExpiredError",
    "TokenMalformedError",
    "TokenSignatureInvalidError",
    "WrongTokenKindError",
    "PasswordMismatchError",
    "IdentityNotFoundError",
    "SessionNotFoundError",
    "DuplicateIdentityError",
    "ValidationError",
    "PasswordPolicyError",
    "PersistenceError",
    "FeatureNotImplementedError",
]


class TillgateError(Exception):
    """Base exception class for all custom errors in the Tillgate application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors (map to 401 Unauthorized)
# ---------------------------------------------------------------------------


class AuthenticationError(TillgateError):
    """Raised for general authentication failures."""

    def __init__(self, message: str = "Authentication failed", code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when the identity label or the password is wrong.

    The same message is used for "no such user" and "wrong password" so the
    two cases cannot be used to enumerate accounts.
    """

    def __init__(self, message: str = "Invalid credentials", code: str = "invalid_credentials"):
        super().__init__(message, code)


class AccountInactiveError(AuthenticationError):
    """Raised when the identity (or its tenant) has been deactivated.

    Kept distinct from `InvalidCredentialsError` for logging and auditing; the
    API layer still answers with the generic credentials rejection.
    """

    def __init__(self, message: str = "Account is inactive", code: str = "account_inactive"):
        super().__init__(message, code)


class SessionRevokedError(AuthenticationError):
    """Raised when a structurally valid token belongs to a deleted or expired session."""

    def __init__(self, message: str = "Session has been revoked", code: str = "session_revoked"):
        super().__init__(message, code)


class TokenError(AuthenticationError):
    """Base class for bearer-token validation failures."""

    def __init__(self, message: str = "Invalid token", code: str = "invalid_token"):
        super().__init__(message, code)


class TokenExpiredError(TokenError):
    """Raised when the token's ``exp`` claim lies in the past."""

    def __init__(self, message: str = "Token has expired", code: str = "token_expired"):
        super().__init__(message, code)


class TokenMalformedError(TokenError):
    """Raised when a token cannot be decoded or its claims are missing or mistyped."""

    def __init__(self, message: str = "Token is malformed", code: str = "token_malformed"):
        super().__init__(message, code)


class TokenSignatureInvalidError(TokenError):
    """Raised when a token was tampered with or signed by a foreign key."""

    def __init__(
        self, message: str = "Token signature is invalid", code: str = "token_signature_invalid"
    ):
        super().__init__(message, code)


class WrongTokenKindError(TokenError):
    """Raised when an access token is presented where a refresh token is expected, or vice versa."""

    def __init__(self, message: str = "Wrong token kind", code: str = "wrong_token_kind"):
        super().__init__(message, code)


class PasswordMismatchError(TillgateError):
    """Raised by the password service when a plaintext does not match a stored hash."""

    def __init__(self, message: str = "Password does not match", code: str = "password_mismatch"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Lookup / persistence errors
# ---------------------------------------------------------------------------


class IdentityNotFoundError(TillgateError):
    """Raised when the user directory has no record for an id or identity label."""

    def __init__(self, message: str = "Identity not found", code: str = "identity_not_found"):
        super().__init__(message, code)


class SessionNotFoundError(TillgateError):
    """Raised by session stores when a session id is unknown."""

    def __init__(self, message: str = "Session not found", code: str = "session_not_found"):
        super().__init__(message, code)


class DuplicateIdentityError(TillgateError):
    """Raised when registering a username or email that is already taken.

    Maps to a `409 Conflict` HTTP status code.
    """

    def __init__(self, message: str = "Identity already exists", code: str = "duplicate_identity"):
        super().__init__(message, code)


class ValidationError(TillgateError):
    """Raised for general data validation failures."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class PasswordPolicyError(ValidationError):
    """Raised when a new password does not meet the password policy."""

    def __init__(self, message: str, code: str = "password_policy_error"):
        super().__init__(message, code)


class PersistenceError(TillgateError):
    """Wraps any failure of the user directory or the session store.

    The underlying exception is chained (``raise ... from exc``) and logged;
    the message names only the failed operation so storage details never
    reach the wire.
    """

    def __init__(self, operation: str, code: str = "persistence_failure"):
        self.operation = operation
        super().__init__(f"Persistence failure during {operation}", code)


class FeatureNotImplementedError(TillgateError):
    """Raised by operations that exist in the contract but are not available yet."""

    def __init__(self, feature: str, code: str = "not_implemented"):
        self.feature = feature
        super().__init__(f"{feature} is not implemented", code)
