# spendly/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from typing import Optional
import uuid

from spendly.core.errors import DuplicateError
from spendly.models.user import User
from spendly.schemas.user import ProfileUpdate

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def create_user(name: str, email: str, hashed_password: str, db: AsyncSession) -> User:
    user = User(name=name, email=email, hashed_password=hashed_password)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)
    await db.refresh(user)
    return user

async def update_profile(user: User, profile_in: ProfileUpdate, db: AsyncSession) -> User:
    changes = profile_in.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        user.name = changes["name"]
    preferences = changes.get("preferences")
    if preferences:
        # Merge: keys the client did not send keep their stored value
        if preferences.get("currency") is not None:
            user.currency = preferences["currency"]
        if preferences.get("theme") is not None:
            user.theme = preferences["theme"]
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
