import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.exceptions import (
    AccountInactiveError,
    DuplicateIdentityError,
    FeatureNotImplementedError,
    IdentityNotFoundError,
    InvalidCredentialsError,
    PasswordPolicyError,
    PersistenceError,
    SessionNotFoundError,
    SessionRevokedError,
    TillgateError,
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureInvalidError,
    ValidationError,
    WrongTokenKindError,
)
from src.core.handlers import (
    INVALID_CREDENTIALS_DETAIL,
    INVALID_TOKEN_DETAIL,
    register_exception_handlers,
)


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.post("/raise")
    async def raise_error(name: str):
        raise ERRORS[name]

    return TestClient(app, raise_server_exceptions=False)


ERRORS = {
    "invalid_credentials": InvalidCredentialsError(),
    "account_inactive": AccountInactiveError(),
    "token_expired": TokenExpiredError(),
    "token_malformed": TokenMalformedError(),
    "token_signature": TokenSignatureInvalidError(),
    "wrong_kind": WrongTokenKindError(),
    "session_revoked": SessionRevokedError(),
    "identity_not_found": IdentityNotFoundError(),
    "session_not_found": SessionNotFoundError(),
    "duplicate": DuplicateIdentityError(),
    "validation": ValidationError("Username must be between 3 and 100 characters long"),
    "policy": PasswordPolicyError("Password must be at least 8 characters long"),
    "persistence": PersistenceError("login.update_identity"),
    "not_implemented": FeatureNotImplementedError("Email verification"),
    "generic": TillgateError("Something odd", code="odd"),
}


@pytest.mark.parametrize("name", ["invalid_credentials", "account_inactive"])
def test_credential_failures_share_one_response(client, name):
    response = client.post("/raise", params={"name": name})

    assert response.status_code == 401
    assert response.json() == {"detail": INVALID_CREDENTIALS_DETAIL}


@pytest.mark.parametrize(
    "name",
    [
        "token_expired",
        "token_malformed",
        "token_signature",
        "wrong_kind",
        "session_revoked",
        "identity_not_found",
        "session_not_found",
    ],
)
def test_token_failures_share_one_response(client, name):
    response = client.post("/raise", params={"name": name})

    assert response.status_code == 401
    assert response.json() == {"detail": INVALID_TOKEN_DETAIL}
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize(
    "name, status_code",
    [
        ("duplicate", 409),
        ("validation", 422),
        ("policy", 422),
        ("not_implemented", 501),
        ("generic", 400),
    ],
)
def test_other_errors_map_to_status(client, name, status_code):
    response = client.post("/raise", params={"name": name})

    assert response.status_code == status_code
    assert response.json() == {"detail": ERRORS[name].message}


def test_persistence_error_hides_details(client):
    response = client.post("/raise", params={"name": "persistence"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
