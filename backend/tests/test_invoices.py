import re
import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from crud import sales_invoices as crud_invoices
from models.sales_invoices import SalesInvoice
from schemas.sales_invoices import SalesInvoiceCreate
from models.inventory import Inventory
from payloads import invoice_payload, stock
from utils.exceptions import InvoiceNumberConflictError


def test_invoice_total_and_number_are_computed(sales_client, sales_user, farm):
    response = sales_client.post("/api/invoices", json=invoice_payload(farm.id, 60, totalPrice=1, invoiceNumber="FAKE"))
    assert response.status_code == 201
    body = response.json()
    assert body["totalPrice"] == 60 * 2500
    assert re.match(r"^INV-\d{13}-1000$", body["invoiceNumber"])
    assert body["userId"] == sales_user.id
    assert body["isPaid"] is False


def test_invoice_numbers_increase(admin_client, farm):
    first = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 1)).json()
    second = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 1)).json()
    assert first["invoiceNumber"].endswith("-1000")
    assert second["invoiceNumber"].endswith("-1001")


def test_sequence_continues_after_deletion_of_older_invoice(admin_client, farm):
    first = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 1)).json()
    admin_client.post("/api/invoices", json=invoice_payload(farm.id, 1))
    admin_client.delete(f"/api/invoices/{first['id']}")

    third = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 1)).json()
    assert third["invoiceNumber"].endswith("-1002")


def test_zero_quantity_is_rejected(admin_client, farm):
    response = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 0))
    assert response.status_code == 400


def test_unknown_product_is_rejected(admin_client, farm):
    response = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 5, productId=42))
    assert response.status_code == 400
    assert "Product" in response.json()["error"]


def test_invoice_on_inactive_farm_is_rejected(admin_client, db, inactive_farm):
    farm_id = inactive_farm.id
    response = admin_client.post("/api/invoices", json=invoice_payload(farm_id, 5))
    assert response.status_code == 400

    assert stock(admin_client, farm_id) == 0
    assert db.query(Inventory).filter(Inventory.farm_id == farm_id).count() == 0
    assert db.query(SalesInvoice).count() == 0


def test_invoice_notifies_sales_officers(recorder_client, sales_client, farm):
    recorder_client.post("/api/invoices", json=invoice_payload(farm.id, 4, price=1000))

    unread = sales_client.get("/api/notifications/unread").json()
    assert len(unread) == 1
    assert unread[0]["type"] == "invoice"
    assert "تومان" in unread[0]["message"]


def test_list_limit_and_update(admin_client, farm):
    for quantity in (1, 2, 3):
        admin_client.post("/api/invoices", json=invoice_payload(farm.id, quantity))

    limited = admin_client.get("/api/invoices", params={"limit": 2}).json()
    assert len(limited) == 2

    invoice_id = limited[0]["id"]
    response = admin_client.put(f"/api/invoices/{invoice_id}", json={"pricePerUnit": 100, "isPaid": True})
    assert response.status_code == 200
    body = response.json()
    assert body["isPaid"] is True
    assert body["totalPrice"] == body["quantity"] * 100


def test_unknown_invoice(admin_client):
    assert admin_client.get("/api/invoices/999").status_code == 404
    assert admin_client.delete("/api/invoices/999").status_code == 404


def test_number_collision_becomes_conflict(db, admin_user, farm, monkeypatch):
    user = {"id": admin_user.id, "username": admin_user.username, "role": "admin", "assignedFarmId": None}
    existing = crud_invoices.create_invoice(db, _schema(farm.id), user)

    # Force the next invoice onto the sequence number that is already taken
    monkeypatch.setattr(crud_invoices, "next_invoice_seq", lambda session: existing.invoice_seq)
    try:
        crud_invoices.create_invoice(db, _schema(farm.id), user)
    except InvoiceNumberConflictError as e:
        assert isinstance(e.__cause__, IntegrityError)
    else:
        raise AssertionError("expected InvoiceNumberConflictError")
    assert db.query(SalesInvoice).count() == 1


def test_conflict_maps_to_409(admin_client, farm, monkeypatch):
    def raise_conflict(db, invoice, user):
        raise InvoiceNumberConflictError("Invoice number already taken, please retry")

    monkeypatch.setattr(crud_invoices, "create_invoice", raise_conflict)
    response = admin_client.post("/api/invoices", json=invoice_payload(farm.id, 1))
    assert response.status_code == 409
    assert response.json() == {"error": "Invoice number already taken, please retry"}


def test_other_integrity_errors_are_not_conflicts(db, admin_user, farm, monkeypatch):
    user = {"id": admin_user.id, "username": admin_user.username, "role": "admin", "assignedFarmId": None}

    def failing_adjust(session, farm_id, egg_delta):
        raise IntegrityError("INSERT INTO inventory", {}, sqlite3.IntegrityError("UNIQUE constraint failed: inventory.farm_id"))

    monkeypatch.setattr(crud_invoices, "adjust_inventory", failing_adjust)
    with pytest.raises(IntegrityError):
        crud_invoices.create_invoice(db, _schema(farm.id), user)
    assert db.query(SalesInvoice).count() == 0


def test_invoice_number_conflict_detection():
    taken = IntegrityError("INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed: sales_invoices.invoice_seq"))
    other = IntegrityError("INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed: inventory.farm_id"))
    assert crud_invoices.is_invoice_number_conflict(taken)
    assert not crud_invoices.is_invoice_number_conflict(other)


def _schema(farm_id):
    return SalesInvoiceCreate(**invoice_payload(farm_id, 3))
