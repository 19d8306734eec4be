"""Passwords, tokens, sessions and the account service."""

import jwt
import pytest

from learnhub.auth.jwt import create_access_token, verify_token
from learnhub.auth.password import (
    PasswordStrengthError,
    hash_password,
    validate_password_strength,
    verify_password,
)
from learnhub.auth.service import AuthService
from learnhub.auth.session import SessionContext
from learnhub.config import get_settings
from learnhub.entities import User
from learnhub.errors import ConflictError, NotAuthenticatedError, PermissionDeniedError, ValidationError


class TestPassword:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")
        assert hashed.startswith("$argon2id$")
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_malformed_hash_does_not_raise(self):
        assert not verify_password("anything", "not-a-hash")

    def test_strength(self):
        validate_password_strength("secret")
        for bad in ("", "   ", "12345", "x" * 129):
            with pytest.raises(PasswordStrengthError):
                validate_password_strength(bad)


class TestTokens:
    def test_round_trip(self):
        payload = verify_token(create_access_token("u1", "admin"))
        assert payload["sub"] == "u1"
        assert payload["role"] == "admin"
        assert payload["iss"] == get_settings().jwt_issuer

    def test_wrong_secret_rejected(self):
        forged = jwt.encode({"sub": "u1", "type": "access", "iss": "learnhub"}, "other-secret", algorithm="HS256")
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(forged)

    def test_wrong_type_rejected(self):
        with pytest.raises(jwt.InvalidTokenError, match="Expected token type"):
            verify_token(create_access_token("u1", "user"), expected_type="refresh")


class TestSessionContext:
    def test_anonymous(self):
        session = SessionContext()
        assert not session.is_authenticated
        assert session.current_user is None
        with pytest.raises(NotAuthenticatedError):
            _ = session.user

    def test_sign_in_and_out(self):
        session = SessionContext()
        session.sign_in(User(id="u1", name="Ada", email="ada@example.com"))
        assert session.user_id == "u1"
        with pytest.raises(PermissionDeniedError):
            session.require_admin()
        session.sign_out()
        assert not session.is_authenticated

    def test_admin(self):
        admin = User(id="a1", name="Root", email="root@example.com", role="admin")
        assert SessionContext(admin).require_admin() is admin


class TestAuthService:
    @pytest.mark.asyncio
    async def test_register_and_sign_in(self, store):
        svc = AuthService(store)
        user = await svc.register(" Ada@Example.com ", "secret1", "Ada")
        assert user.role == "user"
        assert user.email == "ada@example.com"
        assert user.skills == [] and user.goals == [] and user.badges == []

        signed_in = await svc.sign_in("ADA@example.com", "secret1")
        assert signed_in.id == user.id

    @pytest.mark.asyncio
    async def test_register_rejections(self, store):
        svc = AuthService(store)
        await svc.register("ada@example.com", "secret1", "Ada")
        with pytest.raises(ConflictError):
            await svc.register("ada@example.com", "secret2", "Other Ada")
        with pytest.raises(ValidationError):
            await svc.register("bob@example.com", "123", "Bob")
        with pytest.raises(ValidationError):
            await svc.register("carol@example.com", "secret1", " ")

    @pytest.mark.asyncio
    async def test_bad_credentials(self, store):
        svc = AuthService(store)
        await svc.register("ada@example.com", "secret1", "Ada")
        with pytest.raises(NotAuthenticatedError):
            await svc.sign_in("ada@example.com", "wrong-password")
        with pytest.raises(NotAuthenticatedError):
            await svc.sign_in("nobody@example.com", "secret1")
