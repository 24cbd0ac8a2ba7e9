from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from schemas.common import CamelModel
from utils.jalali import normalize_jalali

class ProductionRecordBase(CamelModel):
    farm_id: int
    date: str = Field(..., min_length=1, description="Jalali date, YYYY/MM/DD")
    egg_count: int = Field(0, ge=0)
    broken_eggs: int = Field(0, ge=0)
    mortality: int = Field(0, ge=0)
    feed_consumption: float = Field(0, ge=0)
    water_consumption: float = Field(0, ge=0)
    notes: Optional[str] = None

class ProductionRecordCreate(ProductionRecordBase):
    created_time: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return normalize_jalali(value)

class ProductionRecordUpdate(CamelModel):
    farm_id: Optional[int] = None
    date: Optional[str] = Field(None, min_length=1)
    egg_count: Optional[int] = Field(None, ge=0)
    broken_eggs: Optional[int] = Field(None, ge=0)
    mortality: Optional[int] = Field(None, ge=0)
    feed_consumption: Optional[float] = Field(None, ge=0)
    water_consumption: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: Optional[str]) -> Optional[str]:
        return normalize_jalali(value) if value is not None else value

class ProductionRecord(ProductionRecordBase):
    id: int
    user_id: Optional[int] = None
    created_time: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
