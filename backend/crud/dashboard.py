from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from models.farm import Farm
from models.production_records import ProductionRecord
from models.sales_invoices import SalesInvoice
from models.users import User
from schemas.dashboard import DashboardStats, FarmStat
from crud.inventory import get_all_inventory
from utils.jalali import today_jalali, jalali_days_ago

WEEK_DAYS = 7
MONTH_DAYS = 30


def get_dashboard_stats(db: Session, now: Optional[datetime] = None) -> DashboardStats:
    """
    Fold every production record and invoice into today/week/month totals.

    Windows are rolling (last 7 and last 30 days), not calendar weeks or months,
    and are evaluated on the Jalali date strings stored on the rows.
    """
    today = today_jalali(now)
    week_ago = jalali_days_ago(WEEK_DAYS, now)
    month_ago = jalali_days_ago(MONTH_DAYS, now)

    records = db.query(ProductionRecord).all()
    invoices = db.query(SalesInvoice).all()
    farms = db.query(Farm).all()
    users_count = db.query(User).count()
    inventory = get_all_inventory(db)
    active_farms = [farm for farm in farms if farm.is_active]

    today_records = [r for r in records if r.date == today]
    week_records = [r for r in records if r.date >= week_ago]
    month_records = [r for r in records if r.date >= month_ago]
    today_invoices = [i for i in invoices if i.date == today]
    month_invoices = [i for i in invoices if i.date >= month_ago]

    farm_stats = []
    for farm in active_farms:
        inv = inventory.get(farm.id)
        farm_stats.append(FarmStat(
            farm_id=farm.id,
            farm_name=farm.name,
            eggs_today=sum(r.egg_count for r in today_records if r.farm_id == farm.id),
            current_stock=inv.current_egg_stock if inv else 0,
        ))

    return DashboardStats(
        total_eggs_today=sum(r.egg_count for r in today_records),
        total_eggs_this_week=sum(r.egg_count for r in week_records),
        total_eggs_this_month=sum(r.egg_count for r in month_records),
        total_sales_today=sum(i.total_price for i in today_invoices),
        total_sales_this_month=sum(i.total_price for i in month_invoices),
        mortality_this_week=sum(r.mortality for r in week_records),
        active_farms_count=len(active_farms),
        total_users_count=users_count,
        total_invoices_count=len(invoices),
        farm_stats=farm_stats,
    )
