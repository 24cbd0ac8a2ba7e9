from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from schemas.common import CamelModel
from utils.jalali import normalize_jalali

class SalesInvoiceBase(CamelModel):
    farm_id: int
    product_id: Optional[int] = None
    date: str = Field(..., min_length=1, description="Jalali date, YYYY/MM/DD")
    customer_name: str = Field(..., min_length=1)
    customer_phone: Optional[str] = None
    quantity: int = Field(..., ge=1)
    weight: Optional[float] = Field(None, ge=0)
    price_per_unit: float = Field(..., ge=0)
    is_paid: bool = False
    notes: Optional[str] = None

class SalesInvoiceCreate(SalesInvoiceBase):
    """Invoice number and total price are computed server-side, so neither is accepted here."""
    created_time: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return normalize_jalali(value)

class SalesInvoiceUpdate(CamelModel):
    farm_id: Optional[int] = None
    product_id: Optional[int] = None
    date: Optional[str] = Field(None, min_length=1)
    customer_name: Optional[str] = Field(None, min_length=1)
    customer_phone: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    weight: Optional[float] = Field(None, ge=0)
    price_per_unit: Optional[float] = Field(None, ge=0)
    is_paid: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: Optional[str]) -> Optional[str]:
        return normalize_jalali(value) if value is not None else value

class SalesInvoice(SalesInvoiceBase):
    id: int
    invoice_number: str
    total_price: float
    user_id: Optional[int] = None
    created_time: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
