# spendly/api/v1/routes/expenses.py
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from spendly.api.deps import get_caller
from spendly.core.config import settings
from spendly.core.database import get_async_session
from spendly.core.identity import CallerIdentity
from spendly.crud.expense import (
    ExpenseFilter,
    create_expense_for_user,
    delete_expense,
    get_expense_by_id,
    get_expense_stats,
    list_expenses,
    update_expense,
)
from spendly.schemas.category import MessageResponse
from spendly.schemas.expense import (
    ExpenseCreate,
    ExpenseListResponse,
    ExpenseRead,
    ExpenseResponse,
    ExpenseStatsResponse,
    ExpenseUpdate,
)
from spendly.utils.dates import parse_date_bound

router = APIRouter(prefix="/expenses", tags=["Expenses"])

def split_tags(tags: Optional[List[str]]) -> List[str]:
    """Accept both ?tags=a,b and ?tags=a&tags=b"""
    if not tags:
        return []
    return [t.strip() for raw in tags for t in raw.split(",") if t.strip()]

@router.get("", response_model=ExpenseListResponse)
async def read_expenses(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    category: Optional[uuid.UUID] = Query(None, description="Category ID"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    tags: Optional[List[str]] = Query(None, description="Comma-separated; matches any"),
    search: Optional[str] = Query(None, max_length=100),
    sort_by: str = Query("date", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    """
    List the caller's expenses with filtering, sorting and pagination.
    """
    flt = ExpenseFilter(
        category_id=category,
        start_date=parse_date_bound(start_date, "startDate"),
        end_date=parse_date_bound(end_date, "endDate", end_of_day=True),
        tags=split_tags(tags),
        search=search.strip() if search else None,
        sort_by=sort_by,
        sort_order=sort_order.lower(),
    )
    result = await list_expenses(caller, flt, page, limit, db)
    return ExpenseListResponse(
        expenses=[ExpenseRead.model_validate(e) for e in result["expenses"]],
        pagination=result["pagination"],
    )

@router.get("/stats", response_model=ExpenseStatsResponse)
async def read_expense_stats(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    """Per-category breakdown; defaults to the current month so far"""
    stats = await get_expense_stats(
        caller,
        db,
        start_date=parse_date_bound(start_date, "startDate"),
        end_date=parse_date_bound(end_date, "endDate", end_of_day=True),
    )
    return ExpenseStatsResponse(stats=stats)

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def read_expense(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    expense = await get_expense_by_id(caller, expense_id, db)
    return ExpenseResponse(expense=ExpenseRead.model_validate(expense))

@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    ex_in: ExpenseCreate,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    expense = await create_expense_for_user(caller, ex_in, db)
    return ExpenseResponse(
        message="Expense created successfully",
        expense=ExpenseRead.model_validate(expense),
    )

@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense_endpoint(
    expense_id: uuid.UUID,
    ex_in: ExpenseUpdate,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    """Partial update: only fields present in the body are changed"""
    expense = await update_expense(caller, expense_id, ex_in, db)
    return ExpenseResponse(
        message="Expense updated successfully",
        expense=ExpenseRead.model_validate(expense),
    )

@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_expense_endpoint(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    caller: CallerIdentity = Depends(get_caller),
):
    await delete_expense(caller, expense_id, db)
    return MessageResponse(message="Expense deleted successfully")
