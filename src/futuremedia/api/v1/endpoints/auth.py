"""Authentication endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, status

from futuremedia.api.v1.dependencies import SessionDep
from futuremedia.schemas.user import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from futuremedia.services import users as user_service

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register_user(payload: RegisterRequest, db: SessionDep) -> RegisterResponse:
    """Create an account from name, email, username and password."""
    user = user_service.register(db, payload)
    return RegisterResponse(user_id=user.id)


@router.post(
    "/login",
    summary="Authenticate with email and password",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
)
async def login_user(payload: LoginRequest, db: SessionDep) -> LoginResponse:
    """Return a bearer token for valid credentials."""
    access_token, user = user_service.login(db, payload)
    return LoginResponse(access_token=access_token, token_type="bearer", user_id=user.id)
