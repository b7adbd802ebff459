# spendly/schemas/category.py
from typing import Annotated, List, Optional
import uuid
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

from spendly.utils.dates import UTCDateTime

HEX_COLOR_PATTERN = r"^#([0-9A-Fa-f]{3}){1,2}$"

CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
HexColor = Annotated[str, StringConstraints(pattern=HEX_COLOR_PATTERN)]
Icon = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(max_length=200)]

class CategoryCreate(BaseModel):
    name: CategoryName
    icon: Icon = "fas fa-tag"
    color: HexColor = "#3B82F6"
    description: Optional[Description] = None

class CategoryUpdate(BaseModel):
    """Patch: only the fields sent by the client are applied."""
    name: Optional[CategoryName] = None
    icon: Optional[Icon] = None
    color: Optional[HexColor] = None
    description: Optional[Description] = None

    @model_validator(mode="after")
    def _required_fields_not_null(self):
        for field in ("name", "icon", "color"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

class CategoryRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    icon: str
    color: str
    description: Optional[str] = None
    is_default: bool
    is_active: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

# Joined into expense payloads
class CategorySummary(BaseModel):
    id: uuid.UUID
    name: str
    color: str
    icon: str

    model_config = ConfigDict(from_attributes=True)

class CategoryListResponse(BaseModel):
    success: bool = True
    count: int
    categories: List[CategoryRead]

class CategoryResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    category: CategoryRead

class MessageResponse(BaseModel):
    success: bool = True
    message: str = Field(...)
