"""Email + password accounts stored in the credentials collection."""

from __future__ import annotations

import structlog

from learnhub.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from learnhub.entities import CREDENTIALS, Credential, User
from learnhub.errors import ConflictError, NotAuthenticatedError, ValidationError
from learnhub.store import DocumentStore, Repository
from learnhub.users.service import UserService

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.lower().strip()


class AuthService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.credentials = Repository(store, CREDENTIALS, Credential)
        self.users = UserService(store)

    async def get_credential(self, email: str) -> Credential | None:
        return await self.credentials.get(normalize_email(email))

    async def create_credential(self, email: str, password: str, user_id: str) -> None:
        try:
            validate_password_strength(password)
        except PasswordStrengthError as e:
            raise ValidationError(str(e)) from e
        email = normalize_email(email)
        credential = Credential(email=email, password_hash=hash_password(password), user_id=user_id)
        await self.credentials.put(email, credential, stamp=("createdAt",))

    async def register(self, email: str, password: str, name: str) -> User:
        """Create the credential and a profile with role ``user``.

        Raises ConflictError when the email is taken.
        """
        email = normalize_email(email)
        if not name.strip():
            raise ValidationError("Name is required")
        if await self.get_credential(email) is not None:
            raise ConflictError("Email already registered")
        try:
            validate_password_strength(password)
        except PasswordStrengthError as e:
            raise ValidationError(str(e)) from e

        user_id = await self.users.create_profile(name.strip(), email)
        await self.create_credential(email, password, user_id)
        logger.info("user_created", user_id=user_id, email=email)
        return await self.users.require(user_id)

    async def sign_in(self, email: str, password: str) -> User:
        credential = await self.get_credential(email)
        if credential is None or not verify_password(password, credential.password_hash):
            raise NotAuthenticatedError("Invalid email or password")
        user = await self.users.get_profile(credential.user_id)
        if user is None:
            raise NotAuthenticatedError("Invalid email or password")

        if check_needs_rehash(credential.password_hash):
            await self.credentials.update(credential.id, {"passwordHash": hash_password(password)})
            logger.info("password_rehashed", user_id=user.id)
        return user
