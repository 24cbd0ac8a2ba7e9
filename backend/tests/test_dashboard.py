from datetime import datetime

from crud.dashboard import get_dashboard_stats
from models.inventory import Inventory
from models.production_records import ProductionRecord
from models.sales_invoices import SalesInvoice
from utils.jalali import LOCAL_TZ, jalali_days_ago, today_jalali

NOW = LOCAL_TZ.localize(datetime(2024, 6, 15, 10, 30))


def add_record(db, farm_id, date, egg_count, mortality=0):
    db.add(ProductionRecord(farm_id=farm_id, date=date, egg_count=egg_count, broken_eggs=0, mortality=mortality,
                            feed_consumption=0, water_consumption=0))


def add_invoice(db, farm_id, date, seq, total):
    db.add(SalesInvoice(farm_id=farm_id, date=date, invoice_number=f"INV-0-{seq}", invoice_seq=seq,
                        customer_name="Buyer", quantity=1, price_per_unit=total, total_price=total))


def test_rolling_windows(db, farm, other_farm, inactive_farm, admin_user):
    today = today_jalali(NOW)
    add_record(db, farm.id, today, 100, mortality=2)
    add_record(db, other_farm.id, today, 40)
    add_record(db, farm.id, jalali_days_ago(3, NOW), 50, mortality=5)
    add_record(db, farm.id, jalali_days_ago(10, NOW), 30, mortality=7)
    add_record(db, farm.id, jalali_days_ago(45, NOW), 1000, mortality=100)
    add_invoice(db, farm.id, today, 1000, 500.0)
    add_invoice(db, farm.id, jalali_days_ago(20, NOW), 1001, 250.0)
    add_invoice(db, farm.id, jalali_days_ago(60, NOW), 1002, 999.0)
    db.add(Inventory(farm_id=farm.id, current_egg_stock=77))
    db.commit()

    stats = get_dashboard_stats(db, now=NOW)

    assert stats.total_eggs_today == 140
    assert stats.total_eggs_this_week == 190
    assert stats.total_eggs_this_month == 220
    assert stats.total_sales_today == 500.0
    assert stats.total_sales_this_month == 750.0
    assert stats.mortality_this_week == 7
    assert stats.active_farms_count == 2
    assert stats.total_users_count == 1
    assert stats.total_invoices_count == 3

    by_farm = {s.farm_id: s for s in stats.farm_stats}
    assert set(by_farm) == {farm.id, other_farm.id}
    assert by_farm[farm.id].eggs_today == 100
    assert by_farm[farm.id].current_stock == 77
    assert by_farm[other_farm.id].current_stock == 0


def test_window_boundary_is_inclusive(db, farm):
    add_record(db, farm.id, jalali_days_ago(7, NOW), 10)
    add_record(db, farm.id, jalali_days_ago(8, NOW), 20)
    db.commit()

    stats = get_dashboard_stats(db, now=NOW)
    assert stats.total_eggs_this_week == 10
    assert stats.total_eggs_this_month == 30


def test_dashboard_endpoint_uses_camel_case(sales_client, farm):
    response = sales_client.get("/api/stats/dashboard")
    assert response.status_code == 200
    body = response.json()
    assert body["activeFarmsCount"] == 1
    assert body["farmStats"] == [{"farmId": farm.id, "farmName": "Morvarid 1", "eggsToday": 0, "currentStock": 0}]
