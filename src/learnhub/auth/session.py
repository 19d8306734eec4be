"""Explicit per-request session: who is signed in, if anyone."""

from __future__ import annotations

from learnhub.entities import User
from learnhub.errors import NotAuthenticatedError, PermissionDeniedError


class SessionContext:
    """Holds the signed-in user between sign_in() and sign_out()."""

    def __init__(self, user: User | None = None) -> None:
        self._user = user

    def sign_in(self, user: User) -> None:
        self._user = user

    def sign_out(self) -> None:
        self._user = None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def current_user(self) -> User | None:
        return self._user

    @property
    def user(self) -> User:
        if self._user is None:
            raise NotAuthenticatedError("Authentication required")
        return self._user

    @property
    def user_id(self) -> str:
        return self.user.id

    def require_admin(self) -> User:
        user = self.user
        if not user.is_admin:
            raise PermissionDeniedError("Administrator access required")
        return user
