from typing import Optional
from datetime import datetime
from schemas.common import CamelModel

class Inventory(CamelModel):
    id: Optional[int] = None
    farm_id: int
    current_egg_stock: int = 0
    last_updated: Optional[datetime] = None
