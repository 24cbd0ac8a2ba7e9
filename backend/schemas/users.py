from pydantic import Field
from typing import Optional
from datetime import datetime
from models.users import UserRole
from schemas.common import CamelModel

class UserBase(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    full_name: str = Field(..., min_length=1)
    role: UserRole = UserRole.RECORDING_OFFICER
    assigned_farm_id: Optional[int] = None
    is_active: bool = True

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    password: Optional[str] = Field(None, min_length=6)
    full_name: Optional[str] = Field(None, min_length=1)
    role: Optional[UserRole] = None
    assigned_farm_id: Optional[int] = None
    is_active: Optional[bool] = None

class User(UserBase):
    """User as returned by the API. The password hash is never part of it."""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class SessionUser(CamelModel):
    id: int
    username: str
    full_name: str
    role: UserRole
    assigned_farm_id: Optional[int] = None
