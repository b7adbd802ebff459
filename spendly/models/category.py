# spendly/models/category.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime, Index, Uuid, func, true
from sqlalchemy.orm import relationship
from spendly.core.database import Base
from spendly.utils.dates import utcnow

class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(length=50), nullable=False)
    icon = Column(String(length=100), nullable=False, default="fas fa-tag")
    color = Column(String(length=7), nullable=False, default="#3B82F6")
    description = Column(String(length=200), nullable=True)
    is_default = Column(Boolean(), nullable=False, default=False)  # True for the seeded categories
    is_active = Column(Boolean(), nullable=False, default=True)    # False once soft-deleted

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="categories")
    expenses = relationship("Expense", back_populates="category")

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id}>"

# One active category per (user, case-insensitive name). Soft-deleted rows
# drop out of the index so the name can be reused.
Index(
    "uq_categories_user_active_name",
    Category.user_id,
    func.lower(Category.name),
    unique=True,
    postgresql_where=Category.is_active == true(),
    sqlite_where=Category.is_active == true(),
)
Index("ix_categories_user_active", Category.user_id, Category.is_active)
