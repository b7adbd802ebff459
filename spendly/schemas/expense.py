# spendly/schemas/expense.py
from decimal import Decimal
from typing import Annotated, List, Optional
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
import uuid

from spendly.models.expense import PaymentMethod
from spendly.schemas.category import CategorySummary
from spendly.utils.dates import UTCDateTime

Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]
ExpenseDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Notes = Annotated[str, StringConstraints(max_length=500)]
Location = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
Amount = Annotated[Decimal, Field(ge=Decimal("0.01"), le=Decimal("999999999.99"))]

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Receipt(BaseModel):
    url: Optional[str] = None
    filename: Optional[str] = None

class ExpenseCreate(CamelModel):
    amount: Amount = Field(..., description="Positive amount, rounded to cents on write")
    description: ExpenseDescription
    category: uuid.UUID = Field(..., description="ID of an active category owned by the caller")
    date: Optional[datetime] = None
    tags: List[Tag] = Field(default_factory=list)
    notes: Optional[Notes] = None
    payment_method: PaymentMethod = PaymentMethod.cash
    location: Optional[Location] = None
    receipt: Optional[Receipt] = None

# Fields that may be omitted on update but never cleared
NON_NULLABLE_FIELDS = ("amount", "description", "category", "date", "tags", "payment_method")

class ExpenseUpdate(CamelModel):
    """
    Patch for an existing expense.

    Omitted fields stay untouched. An explicit null clears notes, location
    or receipt and is rejected for every other field.
    """
    amount: Optional[Amount] = None
    description: Optional[ExpenseDescription] = None
    category: Optional[uuid.UUID] = None
    date: Optional[datetime] = None
    tags: Optional[List[Tag]] = None
    notes: Optional[Notes] = None
    payment_method: Optional[PaymentMethod] = None
    location: Optional[Location] = None
    receipt: Optional[Receipt] = None

    @model_validator(mode="after")
    def _required_fields_not_null(self):
        for field in NON_NULLABLE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{to_camel(field)} cannot be null")
        return self

class ExpenseRead(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: float
    description: str
    category: CategorySummary
    date: UTCDateTime
    tags: List[str]
    notes: Optional[str] = None
    payment_method: PaymentMethod
    location: Optional[str] = None
    receipt: Receipt
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

class ExpenseResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    expense: ExpenseRead

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_expenses: int
    limit: int
    has_next: bool
    has_prev: bool

class ExpenseListResponse(BaseModel):
    success: bool = True
    expenses: List[ExpenseRead]
    pagination: Pagination

class CategoryBreakdown(CamelModel):
    category_id: uuid.UUID
    category_name: str
    category_color: str
    category_icon: str
    total_amount: float
    count: int
    avg_amount: float

class Period(CamelModel):
    start_date: UTCDateTime
    end_date: UTCDateTime

class ExpenseStats(CamelModel):
    total_spent: float
    category_breakdown: List[CategoryBreakdown]
    period: Period

class ExpenseStatsResponse(BaseModel):
    success: bool = True
    stats: ExpenseStats
