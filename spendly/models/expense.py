# spendly/models/expense.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Enum, DateTime, Integer, BigInteger, Index, Uuid
from sqlalchemy.orm import relationship
from spendly.core.database import Base
from spendly.utils.dates import utcnow
from spendly.utils.money import from_cents
import enum

class PaymentMethod(str, enum.Enum):
    cash = "cash"
    credit_card = "credit_card"
    debit_card = "debit_card"
    bank_transfer = "bank_transfer"
    digital_wallet = "digital_wallet"
    other = "other"

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Rounded to 2 decimals at write time, kept in minor units
    amount_cents = Column(BigInteger, nullable=False)
    description = Column(String(length=200), nullable=False)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False)
    date = Column(DateTime, nullable=False, default=utcnow)
    notes = Column(String(length=500), nullable=True)
    payment_method = Column(
        Enum(PaymentMethod, name="payment_method"),
        nullable=False,
        default=PaymentMethod.cash,
    )
    location = Column(String(length=100), nullable=True)
    receipt_url = Column(String, nullable=True)
    receipt_filename = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="expenses")
    category = relationship("Category", back_populates="expenses", lazy="joined")
    tag_rows = relationship(
        "ExpenseTag",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseTag.position",
        lazy="selectin",
    )

    @property
    def amount(self) -> float:
        return from_cents(self.amount_cents)

    @property
    def tags(self) -> list:
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names) -> None:
        self.tag_rows = [ExpenseTag(name=name, position=i) for i, name in enumerate(names)]

    @property
    def receipt(self) -> dict:
        return {"url": self.receipt_url, "filename": self.receipt_filename}

    def __repr__(self):
        return f"<Expense description={self.description} amount={self.amount} user_id={self.user_id}>"

class ExpenseTag(Base):
    __tablename__ = "expense_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    expense_id = Column(Uuid, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(length=30), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    expense = relationship("Expense", back_populates="tag_rows")

Index("ix_expenses_user_date", Expense.user_id, Expense.date.desc())
Index("ix_expenses_user_category", Expense.user_id, Expense.category_id)
Index("ix_expenses_user_created", Expense.user_id, Expense.created_at.desc())
Index("ix_expense_tags_expense", ExpenseTag.expense_id)
Index("ix_expense_tags_name", ExpenseTag.name)
