import os
import tempfile

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CREATE_TABLES"] = "false"
os.environ["APP_ENV"] = "test"
os.environ["SESSION_SECRET"] = "test-secret"
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "poultry-test-logs"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import Base, engine, get_db
from main import app
from models.users import UserRole
from factories import login, make_farm, make_user

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def farm(db):
    return make_farm(db, "Morvarid 1")


@pytest.fixture
def other_farm(db):
    return make_farm(db, "Morvarid 2")


@pytest.fixture
def inactive_farm(db):
    return make_farm(db, "Closed farm", is_active=False)


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin", UserRole.ADMIN)


@pytest.fixture
def recorder_user(db, farm):
    return make_user(db, "recorder", UserRole.RECORDING_OFFICER, farm_id=farm.id)


@pytest.fixture
def sales_user(db, farm):
    return make_user(db, "seller", UserRole.SALES_OFFICER, farm_id=farm.id)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def admin_client(admin_user):
    return login(admin_user.username)


@pytest.fixture
def recorder_client(recorder_user):
    return login(recorder_user.username)


@pytest.fixture
def sales_client(sales_user):
    return login(sales_user.username)
