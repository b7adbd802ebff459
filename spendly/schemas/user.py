# spendly/schemas/user.py
from typing import Annotated, Optional
import uuid
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from spendly.models.user import Theme

UserName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]

def normalize_email(email: str) -> str:
    return email.strip().lower()

class RegisterRequest(BaseModel):
    name: UserName
    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

class Preferences(BaseModel):
    currency: str = "USD"
    theme: Theme = Theme.light

class PreferencesUpdate(BaseModel):
    currency: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=10)]] = None
    theme: Optional[Theme] = None

# Fields accepted on PUT /auth/profile
class ProfileUpdate(BaseModel):
    name: Optional[UserName] = None
    preferences: Optional[PreferencesUpdate] = None

# Public fields; the password hash is never part of this model
class UserRead(BaseModel):
    id: uuid.UUID
    name: str
    email: EmailStr
    avatar: Optional[str] = None
    preferences: Preferences

    model_config = ConfigDict(from_attributes=True)

class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    user: UserRead

class UserResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserRead
