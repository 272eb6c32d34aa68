"""
SnackTrack Backend - Password Hashing
======================================

What:  bcrypt hashing and verification through passlib.
How:   bcrypt is deliberately slow (cost factor PASSWORD_HASH_ROUNDS, default
       10), so both calls run in Starlette's threadpool and the event loop
       keeps serving other requests meanwhile.
"""

import logging

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from snacktrack.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


async def hash_password(password: str) -> str:
    """Salted bcrypt hash of `password`."""
    return await run_in_threadpool(pwd_context.hash, password)


async def verify_password(password: str, hashed_password: str) -> bool:
    """
    Constant-time check of `password` against a stored hash.

    A stored value that is not a recognizable hash counts as a mismatch.
    """
    try:
        return await run_in_threadpool(pwd_context.verify, password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password is not a valid bcrypt hash")
        return False
