from pydantic import Field
from typing import Optional
from datetime import datetime
from schemas.common import CamelModel

class NotificationCreate(CamelModel):
    user_id: int
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: str = "info"
    farm_id: Optional[int] = None

class Notification(NotificationCreate):
    id: int
    is_read: bool = False
    created_at: Optional[datetime] = None
