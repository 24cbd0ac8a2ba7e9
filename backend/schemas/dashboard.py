from typing import List
from schemas.common import CamelModel

class FarmStat(CamelModel):
    farm_id: int
    farm_name: str
    eggs_today: int = 0
    current_stock: int = 0

class DashboardStats(CamelModel):
    total_eggs_today: int = 0
    total_eggs_this_week: int = 0
    total_eggs_this_month: int = 0
    total_sales_today: float = 0
    total_sales_this_month: float = 0
    mortality_this_week: int = 0
    active_farms_count: int = 0
    total_users_count: int = 0
    total_invoices_count: int = 0
    farm_stats: List[FarmStat] = []
