"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from learnhub.auth.jwt import verify_token
from learnhub.auth.session import SessionContext
from learnhub.dependencies import get_store
from learnhub.entities import User
from learnhub.errors import NotAuthenticatedError
from learnhub.store import DocumentStore
from learnhub.users.service import UserService

_bearer = HTTPBearer(auto_error=False)


async def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    store: DocumentStore = Depends(get_store),
) -> SessionContext:
    """Session for this request; anonymous when no bearer token is sent."""
    session = SessionContext()
    if credentials is None:
        return session
    try:
        payload = verify_token(credentials.credentials, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise NotAuthenticatedError(str(e)) from e

    user = await UserService(store).get_profile(payload["sub"])
    if user is None:
        raise NotAuthenticatedError("User not found")
    session.sign_in(user)
    return session


async def get_current_user(session: SessionContext = Depends(get_session_context)) -> User:
    return session.user


async def get_current_admin(session: SessionContext = Depends(get_session_context)) -> User:
    return session.require_admin()
