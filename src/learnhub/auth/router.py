"""Authentication endpoints: register, login, logout."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from learnhub.auth.dependencies import get_session_context
from learnhub.auth.jwt import create_access_token
from learnhub.auth.schemas import AuthResponse, LoginRequest, RegisterRequest
from learnhub.auth.service import AuthService
from learnhub.auth.session import SessionContext
from learnhub.dependencies import get_store
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, store: DocumentStore = Depends(get_store)) -> AuthResponse:
    user = await AuthService(store).register(body.email, body.password, body.name)
    await store.commit()
    return AuthResponse(access_token=create_access_token(user.id, user.role), user=user)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, store: DocumentStore = Depends(get_store)) -> AuthResponse:
    user = await AuthService(store).sign_in(body.email, body.password)
    await store.commit()
    return AuthResponse(access_token=create_access_token(user.id, user.role), user=user)


@router.post("/logout")
async def logout(session: SessionContext = Depends(get_session_context)) -> dict:
    """Access tokens are stateless; the client discards its token."""
    session.sign_out()
    return {"status": "signed_out"}
