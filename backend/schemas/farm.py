from pydantic import Field
from typing import Optional
from datetime import datetime
from schemas.common import CamelModel

class FarmBase(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    total_birds: int = Field(0, ge=0)
    is_active: bool = True

class FarmCreate(FarmBase):
    pass

class FarmUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    total_birds: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

class Farm(FarmBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
