# spendly/crud/category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import List, Optional
import uuid

from spendly.core.identity import CallerIdentity
from spendly.core.errors import DuplicateError, NotFoundError
from spendly.models.category import Category
from spendly.schemas.category import CategoryCreate, CategoryUpdate

DUPLICATE_CATEGORY_MESSAGE = "Category with this name already exists"

async def get_categories_for_user(caller: CallerIdentity, db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category)
        .where(Category.user_id == caller.user_id, Category.is_active.is_(True))
        .order_by(Category.name, Category.id)
    )
    return list(result.scalars().all())

async def get_active_category(category_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(
        select(Category).where(
            Category.id == category_id,
            Category.user_id == user_id,
            Category.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()

async def get_category_by_name_for_user(
    name: str,
    user_id: uuid.UUID,
    db: AsyncSession,
    exclude_id: Optional[uuid.UUID] = None,
) -> Optional[Category]:
    """Case-insensitive lookup of an active category by name for a given user."""
    query = select(Category).where(
        Category.user_id == user_id,
        Category.is_active.is_(True),
        func.lower(Category.name) == func.lower(name),
    )
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query)
    return result.scalars().first()

async def _commit_or_duplicate(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        # The partial unique index caught a concurrent duplicate
        await db.rollback()
        raise DuplicateError(DUPLICATE_CATEGORY_MESSAGE)

async def create_category_for_user(caller: CallerIdentity, cat_in: CategoryCreate, db: AsyncSession) -> Category:
    if await get_category_by_name_for_user(cat_in.name, caller.user_id, db):
        raise DuplicateError(DUPLICATE_CATEGORY_MESSAGE)

    new_cat = Category(**cat_in.model_dump(), user_id=caller.user_id)
    db.add(new_cat)
    await _commit_or_duplicate(db)
    await db.refresh(new_cat)
    return new_cat

async def update_category(
    caller: CallerIdentity,
    category_id: uuid.UUID,
    cat_in: CategoryUpdate,
    db: AsyncSession,
) -> Category:
    category = await get_active_category(category_id, caller.user_id, db)
    if not category:
        raise NotFoundError("Category not found")

    changes = cat_in.model_dump(exclude_unset=True)
    new_name = changes.get("name")
    if new_name and new_name != category.name:
        if await get_category_by_name_for_user(new_name, caller.user_id, db, exclude_id=category.id):
            raise DuplicateError(DUPLICATE_CATEGORY_MESSAGE)

    for field, value in changes.items():
        setattr(category, field, value)
    db.add(category)
    await _commit_or_duplicate(db)
    await db.refresh(category)
    return category

async def delete_category(caller: CallerIdentity, category_id: uuid.UUID, db: AsyncSession) -> None:
    """Soft delete; expenses keep pointing at the deactivated row."""
    category = await get_active_category(category_id, caller.user_id, db)
    if not category:
        raise NotFoundError("Category not found")
    category.is_active = False
    db.add(category)
    await db.commit()


# Default categories to be created for every new user
DEFAULT_CATEGORIES: List[dict] = [
    {"name": "Food & Dining", "icon": "fas fa-utensils", "color": "#EF4444"},
    {"name": "Transportation", "icon": "fas fa-car", "color": "#3B82F6"},
    {"name": "Shopping", "icon": "fas fa-shopping-bag", "color": "#8B5CF6"},
    {"name": "Entertainment", "icon": "fas fa-film", "color": "#F59E0B"},
    {"name": "Bills & Utilities", "icon": "fas fa-file-invoice-dollar", "color": "#10B981"},
    {"name": "Healthcare", "icon": "fas fa-heartbeat", "color": "#F97316"},
    {"name": "Travel", "icon": "fas fa-plane", "color": "#06B6D4"},
    {"name": "Education", "icon": "fas fa-graduation-cap", "color": "#6366F1"},
    {"name": "Personal Care", "icon": "fas fa-spa", "color": "#EC4899"},
    {"name": "Other", "icon": "fas fa-ellipsis-h", "color": "#6B7280"},
]

async def seed_default_categories_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    """Ensure the user has the default categories; create missing ones.

    All missing defaults are inserted in a single commit. Returns the list of
    categories that were created (empty if none were needed).
    """
    result = await db.execute(
        select(Category.name).where(Category.user_id == user_id, Category.is_active.is_(True))
    )
    existing_names_lower = {row[0].lower() for row in result.all()}

    categories_to_create: List[Category] = [
        Category(user_id=user_id, is_default=True, **cat)
        for cat in DEFAULT_CATEGORIES
        if cat["name"].lower() not in existing_names_lower
    ]

    if categories_to_create:
        db.add_all(categories_to_create)
        await db.commit()

    return categories_to_create
