from io import BytesIO

from openpyxl import load_workbook

from payloads import invoice_payload, production_payload

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def load(response):
    assert response.status_code == 200, response.text
    assert response.headers["content-type"] == XLSX
    assert response.headers["content-disposition"].startswith("attachment;")
    return load_workbook(BytesIO(response.content)).active


def test_production_export(admin_client, farm, other_farm):
    admin_client.post("/api/production", json=production_payload(farm.id, 100, date="1403/02/01"))
    admin_client.post("/api/production", json=production_payload(other_farm.id, 50, date="1403/02/05", notes="rain"))
    admin_client.post("/api/production", json=production_payload(farm.id, 70, date="1403/03/01"))

    ws = load(admin_client.get("/api/reports/production/export", params={"startDate": "1403/02/01", "endDate": "1403/02/31"}))
    assert ws.sheet_view.rightToLeft is True
    assert ws["A1"].value == "تاریخ"
    assert ws["A1"].font.bold is True
    assert ws.max_row == 3
    assert ws["A2"].value == "1403/02/05"
    assert ws["B2"].value == "Morvarid 2"
    assert ws["H2"].value == "rain"
    assert ws["H3"].value == "-"


def test_invoice_export_is_farm_scoped(admin_client, sales_client, farm, other_farm):
    admin_client.post("/api/invoices", json=invoice_payload(farm.id, 3, isPaid=True))
    admin_client.post("/api/invoices", json=invoice_payload(other_farm.id, 4))

    ws = load(sales_client.get("/api/reports/invoices/export"))
    assert ws.max_row == 2
    assert ws["C2"].value == "Morvarid 1"
    assert ws["H2"].value == 3 * 2500
    assert ws["I2"].value == "پرداخت شده"

    assert sales_client.get("/api/reports/invoices/export", params={"farmId": other_farm.id}).status_code == 403


def test_empty_export_has_headers_only(admin_client):
    ws = load(admin_client.get("/api/reports/invoices/export"))
    assert ws.max_row == 1
    assert ws["A1"].value == "شماره حواله"


def test_bad_range(admin_client):
    assert admin_client.get("/api/reports/production/export", params={"startDate": "bad"}).status_code == 400
    response = admin_client.get("/api/reports/production/export", params={"startDate": "1403/05/01", "endDate": "1403/04/01"})
    assert response.status_code == 400
