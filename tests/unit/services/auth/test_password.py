import pytest

from src.core.exceptions import PasswordMismatchError, PasswordPolicyError
from src.domain.services.auth.password import (
    MAX_PASSWORD_BYTES,
    MIN_PASSWORD_LENGTH,
    PasswordService,
    check_password_policy,
)


def test_hash_is_salted(password_service):
    first = password_service.hash("Secret1234")
    second = password_service.hash("Secret1234")

    assert first != second
    assert first.startswith("$2b$")
    assert "Secret1234" not in first


def test_verify_accepts_matching_password(password_service):
    hashed = password_service.hash("Secret1234")

    assert password_service.verify(hashed, "Secret1234") is None


def test_verify_rejects_wrong_password(password_service):
    hashed = password_service.hash("Secret1234")

    with pytest.raises(PasswordMismatchError):
        password_service.verify(hashed, "Secret12345")


@pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash", "$2b$04$short"])
def test_verify_treats_unparseable_hash_as_mismatch(password_service, stored):
    with pytest.raises(PasswordMismatchError):
        password_service.verify(stored, "Secret1234")


def test_rounds_are_embedded_in_hash():
    service = PasswordService(rounds=5)

    assert service.hash("Secret1234").startswith("$2b$05$")


def test_hash_with_other_rounds_still_verifies(password_service):
    hashed = PasswordService(rounds=5).hash("Secret1234")

    password_service.verify(hashed, "Secret1234")


def test_dummy_verify_never_raises(password_service):
    password_service.dummy_verify("anything")
    password_service.dummy_verify("")


def test_policy_accepts_minimum_length():
    check_password_policy("x" * MIN_PASSWORD_LENGTH)


def test_policy_rejects_short_password():
    with pytest.raises(PasswordPolicyError, match="at least 8"):
        check_password_policy("x" * (MIN_PASSWORD_LENGTH - 1))


def test_policy_rejects_password_beyond_bcrypt_limit():
    with pytest.raises(PasswordPolicyError):
        check_password_policy("é" * (MAX_PASSWORD_BYTES // 2 + 1))
