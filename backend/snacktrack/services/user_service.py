"""
SnackTrack Backend - User Service
==================================

What:  Registration and login against the `users` table.
Who:   Called by the /api/register and /api/login route handlers.

Registration Flow:
    ┌──────────────┐    ┌──────────┐    ┌──────────┐
    │ SELECT by    │───▶│ bcrypt   │───▶│ INSERT   │
    │ username     │    │ hash     │    │ users    │
    └──────────────┘    └──────────┘    └──────────┘
         │ found                             │ IntegrityError / DB error
         ▼                                   ▼
    ConflictError (409)               DatabaseError (500)

    The existence check and the insert are two statements with no lock in
    between. Two concurrent registrations of one username can both pass the
    check; the unique constraint then rejects the second insert, which is
    reported as a failed registration.

Login Flow:
    SELECT by username → bcrypt verify → stored row, or AuthenticationError
    with the same message whether the user is missing or the password wrong.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snacktrack.exceptions import AuthenticationError, ConflictError, DatabaseError
from snacktrack.models.user import User
from snacktrack.schemas.user import (
    LoginRequest,
    PublicUserResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from snacktrack.services.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for user accounts.

    Stateless: every call receives the request's session.
    """

    async def _find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> RegisterResponse:
        """
        Create a user unless the username is taken.

        Raises:
            ConflictError: username already exists (→ 409)
            DatabaseError: lookup or insert failed (→ 500)
        """
        try:
            existing = await self._find_by_username(db, payload.username)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error looking up user %r: %s", payload.username, e, exc_info=True)
            raise DatabaseError(
                message="Registration failed",
                context={"stage": "lookup", "error_type": type(e).__name__},
            )

        if existing is not None:
            logger.info("Registration rejected, username taken: %r", payload.username)
            raise ConflictError(
                message="Username already exists",
                context={"username": payload.username},
            )

        hashed = await hash_password(payload.password)

        user = User(
            username=payload.username,
            password=hashed,
            role=payload.role,
            name=payload.name,
        )
        try:
            db.add(user)
            await db.flush()  # assigns user.id
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            await db.rollback()
            logger.error("Error inserting user %r: %s", payload.username, e)
            raise DatabaseError(
                message="Registration failed",
                context={"stage": "insert", "error_type": type(e).__name__},
            )

        logger.info("User registered successfully: id=%s", user.id)
        return RegisterResponse(user_id=user.id)

    async def authenticate(
        self,
        db: AsyncSession,
        payload: LoginRequest,
        include_password_hash: bool = True,
    ) -> PublicUserResponse:
        """
        Check credentials and return the stored user row.

        Returns:
            UserResponse (hash included) or PublicUserResponse, depending on
            `include_password_hash`.

        Raises:
            AuthenticationError: unknown username or wrong password (→ 401)
            DatabaseError: lookup failed (→ 500)
        """
        try:
            user = await self._find_by_username(db, payload.username)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error looking up user for login: %s", e, exc_info=True)
            raise DatabaseError(
                message="Internal server error",
                context={"error_type": type(e).__name__},
            )

        if user is None:
            raise AuthenticationError(context={"reason": "unknown_username"})

        if not await verify_password(payload.password, user.password):
            raise AuthenticationError(context={"reason": "password_mismatch", "user_id": user.id})

        logger.info("Login succeeded: user id=%s", user.id)
        if include_password_hash:
            return UserResponse.model_validate(user)
        return PublicUserResponse.model_validate(user)


user_service = UserService()
