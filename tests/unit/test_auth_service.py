"""
Unit Tests - AuthService, BcryptPasswordHasher, TokenSigner
"""
from datetime import datetime, timedelta, timezone

import pytest

from application.services.auth_service import AuthService
from domain.exceptions.domain_exceptions import (
    DuplicateEntityError, UnauthenticatedError, ValidationFailedError
)
from infrastructure.security import TokenSigner


@pytest.fixture
def auth(user_store, password_hasher, token_signer):
    return AuthService(user_store, password_hasher, token_signer)


class TestSignup:
    def test_signup_returns_usable_token(self, auth):
        session = auth.signup("Ada Lovelace", "Ada@Example.com", "analytical")
        assert session.user.email == "ada@example.com"
        assert auth.resolve_user_id(session.token) == session.user.user_id

    def test_password_is_not_stored_in_clear(self, auth, user_store):
        session = auth.signup("Ada", "ada@example.com", "analytical")
        stored = user_store.get_by_id(session.user.user_id)
        assert stored.password_hash != "analytical"
        assert stored.password_hash.startswith("$2")

    def test_duplicate_email(self, auth):
        auth.signup("Ada", "ada@example.com", "analytical")
        with pytest.raises(DuplicateEntityError):
            auth.signup("Other Ada", "ADA@example.com", "different")

    def test_all_field_errors_reported(self, auth):
        with pytest.raises(ValidationFailedError) as exc_info:
            auth.signup("A", "nope", "123")
        assert set(exc_info.value.errors) == {"name", "email", "password"}

    def test_password_boundary(self, auth):
        auth.signup("Ada", "ada@example.com", "123456")
        with pytest.raises(ValidationFailedError, match="password"):
            auth.signup("Bob", "bob@example.com", "12345")


class TestSignin:
    def test_signin_happy_path(self, auth):
        auth.signup("Ada", "ada@example.com", "analytical")
        session = auth.signin(" ADA@example.com ", "analytical")
        assert session.user.last_login_at is not None

    @pytest.mark.parametrize("email,password", [
        ("ada@example.com", "wrong-password"),
        ("ghost@example.com", "analytical"),
        ("ada@example.com", ""),
    ])
    def test_bad_credentials_share_one_error(self, auth, email, password):
        auth.signup("Ada", "ada@example.com", "analytical")
        with pytest.raises(UnauthenticatedError, match="Invalid credentials"):
            auth.signin(email, password)


class TestResolveUserId:
    def test_missing_token(self, auth):
        with pytest.raises(UnauthenticatedError):
            auth.resolve_user_id(None)

    def test_token_for_unknown_user(self, auth, token_signer):
        with pytest.raises(UnauthenticatedError):
            auth.resolve_user_id(token_signer.issue("deleted-user"))

    def test_get_profile(self, auth):
        session = auth.signup("Ada", "ada@example.com", "analytical")
        assert auth.get_profile(session.user.user_id).name == "Ada"


class TestTokenSigner:
    def test_round_trip(self, token_signer):
        assert token_signer.verify(token_signer.issue("user-1")) == "user-1"

    def test_tampered_payload_rejected(self, token_signer):
        forged_body = TokenSigner("other-secret").issue("admin").split(".")[0]
        signature = token_signer.issue("user-1").split(".")[1]
        with pytest.raises(UnauthenticatedError):
            token_signer.verify(f"{forged_body}.{signature}")

    def test_other_secret_rejected(self, token_signer):
        with pytest.raises(UnauthenticatedError):
            TokenSigner("other-secret").verify(token_signer.issue("user-1"))

    def test_expired_token_rejected(self, token_signer):
        issued = datetime.now(timezone.utc) - timedelta(days=2)
        token = token_signer.issue("user-1", now=issued)
        with pytest.raises(UnauthenticatedError, match="expired"):
            token_signer.verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "ü.ü"])
    def test_malformed_rejected(self, token_signer, token):
        with pytest.raises(UnauthenticatedError):
            token_signer.verify(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenSigner("")


class TestPasswordHasher:
    def test_verify(self, password_hasher):
        hashed = password_hasher.hash("correct horse")
        assert password_hasher.verify("correct horse", hashed)
        assert not password_hasher.verify("wrong horse", hashed)

    def test_malformed_hash_does_not_verify(self, password_hasher):
        assert not password_hasher.verify("anything", "not-a-bcrypt-hash")
