# spendly/api/v1/routes/categories.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from spendly.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryRead,
    CategoryResponse,
    CategoryUpdate,
    MessageResponse,
)
from spendly.crud.category import (
    create_category_for_user,
    get_categories_for_user,
    update_category,
    delete_category,
)
from spendly.core.database import get_async_session
from spendly.core.identity import CallerIdentity
from spendly.api.deps import get_caller

router = APIRouter(prefix="/categories", tags=["Categories"])

@router.get("", response_model=CategoryListResponse)
async def read_categories(
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    categories = await get_categories_for_user(caller, db)
    return CategoryListResponse(
        count=len(categories),
        categories=[CategoryRead.model_validate(c) for c in categories],
    )

@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    category = await create_category_for_user(caller, cat_in, db)
    return CategoryResponse(
        message="Category created successfully",
        category=CategoryRead.model_validate(category),
    )

@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category_endpoint(
    category_id: uuid.UUID,
    cat_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    category = await update_category(caller, category_id, cat_in, db)
    return CategoryResponse(
        message="Category updated successfully",
        category=CategoryRead.model_validate(category),
    )

@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category_endpoint(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    """Soft delete: the category disappears from listings but existing expenses keep it"""
    await delete_category(caller, category_id, db)
    return MessageResponse(message="Category deleted successfully")
