# spendly/models/user.py
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship

from spendly.core.database import Base
from spendly.utils.dates import utcnow

class Theme(str, enum.Enum):
    light = "light"
    dark = "dark"

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(length=50), nullable=False)
    # Always stored trimmed and lower-cased
    email = Column(String(length=255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    avatar = Column(String, nullable=True)

    # Preferences
    currency = Column(String(length=10), nullable=False, default="USD")
    theme = Column(Enum(Theme, name="theme"), nullable=False, default=Theme.light)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    categories = relationship(
        "Category",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    expenses = relationship(
        "Expense",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def preferences(self) -> dict:
        theme = self.theme.value if isinstance(self.theme, Theme) else self.theme
        return {"currency": self.currency, "theme": theme}

    def __repr__(self):
        return f"<User email={self.email}>"
