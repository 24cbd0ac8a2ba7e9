from payloads import production_payload


def test_farm_crud(admin_client):
    created = admin_client.post("/api/farms", json={"name": "Morvarid 3", "totalBirds": 5000})
    assert created.status_code == 201
    farm_id = created.json()["id"]
    assert created.json()["isActive"] is True

    updated = admin_client.put(f"/api/farms/{farm_id}", json={"isActive": False})
    assert updated.status_code == 200
    assert updated.json()["isActive"] is False
    assert updated.json()["name"] == "Morvarid 3"

    assert admin_client.get(f"/api/farms/{farm_id}").status_code == 200
    assert admin_client.delete(f"/api/farms/{farm_id}").status_code == 204
    assert admin_client.get(f"/api/farms/{farm_id}").status_code == 404


def test_duplicate_farm_name(admin_client, farm):
    response = admin_client.post("/api/farms", json={"name": "Morvarid 1"})
    assert response.status_code == 400
    assert admin_client.put(f"/api/farms/{farm.id}", json={"name": "Morvarid 1"}).status_code == 200


def test_active_farms_exclude_inactive(recorder_client, farm, inactive_farm):
    names = [f["name"] for f in recorder_client.get("/api/farms/active").json()]
    assert names == ["Morvarid 1"]
    assert len(recorder_client.get("/api/farms").json()) == 2


def test_farm_with_records_cannot_be_deleted(admin_client, farm):
    admin_client.post("/api/production", json=production_payload(farm.id, 10))
    response = admin_client.delete(f"/api/farms/{farm.id}")
    assert response.status_code == 409


def test_farm_writes_are_admin_only(recorder_client, farm):
    assert recorder_client.post("/api/farms", json={"name": "Mine"}).status_code == 403
    assert recorder_client.put(f"/api/farms/{farm.id}", json={"name": "Mine"}).status_code == 403
    assert recorder_client.delete(f"/api/farms/{farm.id}").status_code == 403


def test_unknown_farm(admin_client):
    assert admin_client.get("/api/farms/999").status_code == 404
    assert admin_client.put("/api/farms/999", json={"name": "x"}).status_code == 404
    assert admin_client.delete("/api/farms/999").status_code == 404


def test_product_crud(admin_client, sales_client):
    created = admin_client.post("/api/products", json={"name": "Egg tray"})
    assert created.status_code == 201
    product = created.json()
    assert product["unit"] == "عدد"

    assert admin_client.post("/api/products", json={"name": "Egg tray"}).status_code == 400
    assert sales_client.post("/api/products", json={"name": "Other"}).status_code == 403
    assert [p["name"] for p in sales_client.get("/api/products").json()] == ["Egg tray"]

    updated = admin_client.put(f"/api/products/{product['id']}", json={"unit": "شانه"})
    assert updated.json()["unit"] == "شانه"

    assert admin_client.delete(f"/api/products/{product['id']}").status_code == 204
    assert admin_client.get(f"/api/products/{product['id']}").status_code == 404


def test_product_used_by_invoice_cannot_be_deleted(admin_client, farm):
    product = admin_client.post("/api/products", json={"name": "Egg box"}).json()
    admin_client.post("/api/invoices", json={
        "farmId": farm.id, "productId": product["id"], "date": "1403/01/01",
        "customerName": "Buyer", "quantity": 1, "pricePerUnit": 10,
    })
    assert admin_client.delete(f"/api/products/{product['id']}").status_code == 409
