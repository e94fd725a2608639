import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, init_db
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client():
    init_db(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def register(client):
    def _register(name="Alice", email="alice@example.com", password="secret123"):
        res = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert res.status_code == 200, res.text
        return res.json()

    return _register


@pytest.fixture()
def login(client):
    def _login(email="alice@example.com", password="secret123"):
        res = client.post("/api/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        return res.json()

    return _login


@pytest.fixture()
def auth_headers(register, login):
    register()
    token = login()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_headers(register, login):
    register(name="Bob", email="bob@example.com", password="hunter22")
    token = login(email="bob@example.com", password="hunter22")["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def category(client, auth_headers):
    res = client.post(
        "/api/categories",
        json={"name": "Food", "description": "Groceries and restaurants"},
        headers=auth_headers,
    )
    assert res.status_code == 200, res.text
    return res.json()
