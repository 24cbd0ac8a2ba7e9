from pydantic import Field
from typing import Optional
from datetime import datetime
from schemas.common import CamelModel

class ProductBase(CamelModel):
    name: str = Field(..., min_length=1)
    unit: str = Field("عدد", min_length=1)
    description: Optional[str] = None
    is_active: bool = True

class ProductCreate(ProductBase):
    pass

class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    unit: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class Product(ProductBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
