def test_admin_sends_and_owner_reads(admin_client, sales_client, sales_user):
    created = admin_client.post("/api/notifications", json={
        "userId": sales_user.id, "title": "Price change", "message": "New egg prices from tomorrow",
    })
    assert created.status_code == 201
    notification = created.json()
    assert notification["isRead"] is False
    assert notification["type"] == "info"

    assert [n["id"] for n in sales_client.get(f"/api/notifications/{sales_user.id}").json()] == [notification["id"]]
    assert len(sales_client.get("/api/notifications/unread").json()) == 1

    response = sales_client.patch(f"/api/notifications/{notification['id']}/read")
    assert response.status_code == 200
    assert sales_client.get("/api/notifications/unread").json() == []
    assert sales_client.get(f"/api/notifications/{sales_user.id}").json()[0]["isRead"] is True


def test_notification_for_unknown_user(admin_client):
    response = admin_client.post("/api/notifications", json={"userId": 999, "title": "x", "message": "y"})
    assert response.status_code == 400


def test_only_admin_sends(sales_client, sales_user):
    response = sales_client.post("/api/notifications", json={"userId": sales_user.id, "title": "x", "message": "y"})
    assert response.status_code == 403


def test_users_cannot_read_others_notifications(admin_client, recorder_client, recorder_user, sales_user):
    notification = admin_client.post("/api/notifications", json={
        "userId": sales_user.id, "title": "x", "message": "y",
    }).json()

    assert recorder_client.get(f"/api/notifications/{sales_user.id}").status_code == 403
    assert recorder_client.patch(f"/api/notifications/{notification['id']}/read").status_code == 403
    assert admin_client.get(f"/api/notifications/{sales_user.id}").status_code == 200


def test_mark_unknown_notification(admin_client):
    assert admin_client.patch("/api/notifications/999/read").status_code == 404
