# spendly/crud/expense.py
"""
Expense store access and the expense query engine.

Every query is scoped by the caller's user id. Listing sorts on the
requested column with the expense id as a tiebreaker, so a fixed filter over
fixed data always yields the same page slices.
"""
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from spendly.core.errors import InvalidCategory, NotFoundError, ValidationError
from spendly.core.identity import CallerIdentity
from spendly.crud.category import get_active_category
from spendly.models.category import Category
from spendly.models.expense import Expense, ExpenseTag
from spendly.schemas.expense import ExpenseCreate, ExpenseUpdate
from spendly.utils.dates import start_of_month, to_naive_utc, utcnow
from spendly.utils.money import average_cents, from_cents, to_cents

SORT_COLUMNS = {
    "date": Expense.date,
    "amount": Expense.amount_cents,
    "description": Expense.description,
    "paymentMethod": Expense.payment_method,
    "createdAt": Expense.created_at,
    "updatedAt": Expense.updated_at,
}
SORT_ORDERS = ("asc", "desc")


@dataclass
class ExpenseFilter:
    category_id: Optional[uuid.UUID] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    search: Optional[str] = None
    sort_by: str = "date"
    sort_order: str = "desc"

    def __post_init__(self):
        if self.sort_by not in SORT_COLUMNS:
            raise ValidationError.for_field(
                "sortBy", f"sortBy must be one of: {', '.join(SORT_COLUMNS)}"
            )
        if self.sort_order not in SORT_ORDERS:
            raise ValidationError.for_field("sortOrder", "sortOrder must be 'asc' or 'desc'")


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_filter_conditions(user_id: uuid.UUID, flt: ExpenseFilter) -> list:
    conditions = [Expense.user_id == user_id]

    if flt.category_id is not None:
        conditions.append(Expense.category_id == flt.category_id)

    # Both ends inclusive
    if flt.start_date is not None:
        conditions.append(Expense.date >= flt.start_date)
    if flt.end_date is not None:
        conditions.append(Expense.date <= flt.end_date)

    # Any of the given tags
    if flt.tags:
        conditions.append(
            Expense.id.in_(select(ExpenseTag.expense_id).where(ExpenseTag.name.in_(flt.tags)))
        )

    if flt.search:
        pattern = _like_pattern(flt.search)
        conditions.append(
            or_(
                Expense.description.ilike(pattern, escape="\\"),
                Expense.notes.ilike(pattern, escape="\\"),
                Expense.location.ilike(pattern, escape="\\"),
                Expense.id.in_(
                    select(ExpenseTag.expense_id).where(ExpenseTag.name.ilike(pattern, escape="\\"))
                ),
            )
        )

    return conditions


async def list_expenses(
    caller: CallerIdentity,
    flt: ExpenseFilter,
    page: int,
    limit: int,
    db: AsyncSession,
) -> Dict[str, Any]:
    conditions = build_filter_conditions(caller.user_id, flt)

    total = await db.scalar(select(func.count()).select_from(Expense).where(*conditions)) or 0

    column = SORT_COLUMNS[flt.sort_by]
    if flt.sort_order == "desc":
        ordering = (column.desc(), Expense.id.desc())
    else:
        ordering = (column.asc(), Expense.id.asc())

    result = await db.execute(
        select(Expense)
        .where(*conditions)
        .order_by(*ordering)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    expenses = list(result.scalars().all())

    total_pages = math.ceil(total / limit)
    return {
        "expenses": expenses,
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total_expenses": total,
            "limit": limit,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


async def get_expense_by_id(caller: CallerIdentity, expense_id: uuid.UUID, db: AsyncSession) -> Expense:
    result = await db.execute(
        select(Expense)
        .where(Expense.id == expense_id, Expense.user_id == caller.user_id)
        .execution_options(populate_existing=True)
    )
    expense = result.scalar_one_or_none()
    if expense is None:
        raise NotFoundError("Expense not found")
    return expense


async def _require_category(caller: CallerIdentity, category_id: uuid.UUID, db: AsyncSession) -> Category:
    category = await get_active_category(category_id, caller.user_id, db)
    if category is None:
        raise InvalidCategory()
    return category


async def create_expense_for_user(caller: CallerIdentity, ex_in: ExpenseCreate, db: AsyncSession) -> Expense:
    await _require_category(caller, ex_in.category, db)

    receipt = ex_in.receipt
    new_ex = Expense(
        user_id=caller.user_id,
        amount_cents=to_cents(ex_in.amount),
        description=ex_in.description,
        category_id=ex_in.category,
        date=to_naive_utc(ex_in.date) if ex_in.date else utcnow(),
        notes=ex_in.notes,
        payment_method=ex_in.payment_method,
        location=ex_in.location,
        receipt_url=receipt.url if receipt else None,
        receipt_filename=receipt.filename if receipt else None,
    )
    new_ex.tags = ex_in.tags
    db.add(new_ex)
    await db.commit()
    return await get_expense_by_id(caller, new_ex.id, db)


async def update_expense(
    caller: CallerIdentity,
    expense_id: uuid.UUID,
    ex_in: ExpenseUpdate,
    db: AsyncSession,
) -> Expense:
    expense = await get_expense_by_id(caller, expense_id, db)

    changes = ex_in.model_dump(exclude_unset=True)
    if "category" in changes:
        await _require_category(caller, changes["category"], db)

    for name, value in changes.items():
        if name == "amount":
            expense.amount_cents = to_cents(value)
        elif name == "category":
            expense.category_id = value
        elif name == "date":
            expense.date = to_naive_utc(value)
        elif name == "tags":
            expense.tags = value
        elif name == "receipt":
            value = value or {}
            expense.receipt_url = value.get("url")
            expense.receipt_filename = value.get("filename")
        else:
            setattr(expense, name, value)

    db.add(expense)
    await db.commit()
    return await get_expense_by_id(caller, expense_id, db)


async def delete_expense(caller: CallerIdentity, expense_id: uuid.UUID, db: AsyncSession) -> None:
    expense = await get_expense_by_id(caller, expense_id, db)
    await db.delete(expense)
    await db.commit()


async def get_expense_stats(
    caller: CallerIdentity,
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Per-category totals, counts and averages between two inclusive bounds.

    Defaults to the first of the current month through now. Sums are done in
    integer cents by the database; groups are ordered by total descending.
    """
    now = utcnow()
    start_date = start_date or start_of_month(now)
    end_date = end_date or now

    total_cents = func.sum(Expense.amount_cents).label("total_cents")
    expense_count = func.count(Expense.id).label("expense_count")
    result = await db.execute(
        select(Category.id, Category.name, Category.color, Category.icon, total_cents, expense_count)
        .select_from(Expense)
        .join(Category, Expense.category_id == Category.id)
        .where(
            Expense.user_id == caller.user_id,
            Expense.date >= start_date,
            Expense.date <= end_date,
        )
        .group_by(Category.id, Category.name, Category.color, Category.icon)
        .order_by(total_cents.desc(), Category.name)
    )

    breakdown = []
    grand_total_cents = 0
    for row in result.all():
        cents = int(row.total_cents or 0)
        grand_total_cents += cents
        breakdown.append({
            "category_id": row.id,
            "category_name": row.name,
            "category_color": row.color,
            "category_icon": row.icon,
            "total_amount": from_cents(cents),
            "count": row.expense_count,
            "avg_amount": from_cents(average_cents(cents, row.expense_count)),
        })

    return {
        "total_spent": from_cents(grand_total_cents),
        "category_breakdown": breakdown,
        "period": {"start_date": start_date, "end_date": end_date},
    }
