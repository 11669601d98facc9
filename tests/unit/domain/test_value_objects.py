import pytest
from pydantic import ValidationError

from src.domain.value_objects.tokens import (
    AccessTokenClaims,
    LoginCredentials,
    RefreshTokenClaims,
    TokenPair,
)


def test_login_credentials_normalize_label():
    creds = LoginCredentials(identity_label="  Alice@Example.COM ", password="x")

    assert creds.identity_label == "alice@example.com"
    assert creds.tenant_id is None


@pytest.mark.parametrize("label", ["", "   "])
def test_login_credentials_reject_blank_label(label):
    with pytest.raises(ValidationError):
        LoginCredentials(identity_label=label, password="x")


def test_login_credentials_require_password():
    with pytest.raises(ValidationError):
        LoginCredentials(identity_label="alice", password="")


def test_token_pair_defaults_to_bearer():
    pair = TokenPair(access_token="a", refresh_token="r", expires_in=60)

    assert pair.token_type == "Bearer"


def test_access_claims_reject_unknown_keys():
    with pytest.raises(ValidationError):
        AccessTokenClaims(
            user_id=1,
            tenant_id=1,
            identity_label="alice",
            role_id=1,
            iat=0,
            exp=1,
            jti="j",
            admin=True,
        )


def test_refresh_claims_cannot_claim_access_kind():
    with pytest.raises(ValidationError):
        RefreshTokenClaims(user_id=1, tenant_id=1, iat=0, exp=1, jti="j", type="access")


def test_claims_are_frozen():
    claims = RefreshTokenClaims(user_id=1, tenant_id=1, iat=0, exp=1, jti="j")

    with pytest.raises(ValidationError):
        claims.user_id = 2
