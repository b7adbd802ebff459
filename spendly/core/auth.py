# spendly/core/auth.py
"""
Auth service: registration, login, token issuance and verification.

Passwords are hashed with bcrypt (cost 12) off the event loop. Login never
reveals whether the email or the password was wrong.
"""
import uuid
import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from .errors import DuplicateError, InvalidCredentials, TokenInvalid
from .security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    pwd_context,
    verify_password,
)
from spendly.crud.category import seed_default_categories_for_user
from spendly.crud.user import DUPLICATE_EMAIL_MESSAGE, create_user, get_user_by_email, get_user_by_id
from spendly.models.user import User
from spendly.schemas.user import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

def issue_token(user_id: uuid.UUID) -> str:
    return create_access_token(str(user_id))

async def register_user(user_in: RegisterRequest, db: AsyncSession) -> Tuple[User, str]:
    if await get_user_by_email(user_in.email, db):
        raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

    hashed_password = await run_in_threadpool(get_password_hash, user_in.password)
    user = await create_user(user_in.name, user_in.email, hashed_password, db)
    logger.info(f"User {user.email} has registered")

    # Seeding is best effort; the user already exists either way
    try:
        await seed_default_categories_for_user(user.id, db)
    except Exception as e:
        logger.error(f"❌ Error creating default categories for {user.email}: {str(e)}", exc_info=True)
        await db.rollback()
        await db.refresh(user)

    return user, issue_token(user.id)

async def authenticate_user(credentials: LoginRequest, db: AsyncSession) -> Tuple[User, str]:
    user = await get_user_by_email(credentials.email, db)
    if user is None:
        # Spend the same time as a real check so response timing leaks nothing
        await run_in_threadpool(pwd_context.dummy_verify)
        raise InvalidCredentials()

    if not await run_in_threadpool(verify_password, credentials.password, user.hashed_password):
        raise InvalidCredentials()

    return user, issue_token(user.id)

async def verify_token(token: str, db: AsyncSession) -> User:
    """
    Resolve a bearer token to its user.

    Raises TokenExpired or TokenInvalid; a token whose user no longer exists
    is TokenInvalid.
    """
    user_id = decode_access_token(token)
    user = await get_user_by_id(user_id, db)
    if user is None:
        raise TokenInvalid("User not found")
    return user

__all__ = [
    "authenticate_user",
    "issue_token",
    "register_user",
    "verify_token",
]
