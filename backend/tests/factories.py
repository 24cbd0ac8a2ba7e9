from fastapi.testclient import TestClient

from main import app
from models.farm import Farm
from models.users import User
from utils.auth_utils import hash_password

PASSWORD = "secret123"


def make_farm(db, name, is_active=True):
    farm = Farm(name=name, total_birds=1000, is_active=is_active)
    db.add(farm)
    db.commit()
    db.refresh(farm)
    return farm


def make_user(db, username, role, farm_id=None, is_active=True):
    user = User(
        username=username,
        hashed_password=hash_password(PASSWORD),
        full_name=f"{username} user",
        role=role,
        assigned_farm_id=farm_id,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(username, password=PASSWORD):
    """A fresh client holding its own session cookie."""
    client = TestClient(app)
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return client
