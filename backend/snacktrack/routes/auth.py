"""
SnackTrack Backend - Registration and Login Routes
===================================================

What:  POST /api/register and POST /api/login.
How:   Validate the JSON body, hand it to UserService, return its result.

No session or token is issued on login; the client keeps the returned user
row as its logged-in state.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from snacktrack.database import get_db_session
from snacktrack.schemas.common import ErrorResponse
from snacktrack.schemas.user import (
    LoginRequest,
    PublicUserResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from snacktrack.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        201: {"description": "User created", "model": RegisterResponse},
        400: {"description": "Malformed body", "model": ErrorResponse},
        409: {"description": "Username already exists", "model": ErrorResponse},
        500: {"description": "Registration failed", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    logger.info("Received registration request for username=%r", payload.username)
    return await user_service.register(db, payload)


@router.post(
    "/login",
    response_model=None,
    responses={
        200: {"description": "Stored user row", "model": UserResponse},
        400: {"description": "Malformed body", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Check credentials and return the stored user row",
)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> PublicUserResponse:
    """
    Return the user row for a matching username/password.

    With LOGIN_INCLUDE_PASSWORD_HASH (default true) the row includes the
    stored bcrypt hash, as existing clients expect; otherwise it is omitted.
    """
    include_hash = request.app.state.settings.login_include_password_hash
    return await user_service.authenticate(db, payload, include_password_hash=include_hash)
