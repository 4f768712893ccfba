import pytest
from fastapi.testclient import TestClient

from budget_tracker.config import Settings
from budget_tracker.main import create_app


@pytest.fixture
def app():
    return create_app(Settings(database_url="sqlite://", log_level="WARNING"))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register(client, email="asha@example.com", name="Asha", password="secret123"):
    resp = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def auth(client):
    return register(client)


@pytest.fixture
def other_auth(client):
    return register(client, email="ravi@example.com", name="Ravi")


def make_category(client, headers, name="Food", **extra):
    resp = client.post("/categories", json={"name": name, **extra}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["category"]


def make_expense(client, headers, category_id, amount, date="2024-03-10", title="Lunch", **extra):
    body = {"title": title, "amount": amount, "date": date, "category": category_id, **extra}
    resp = client.post("/expenses", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def set_budget(client, headers, category_id, limit, month=3, year=2024):
    resp = client.post(
        "/budgets",
        json={"category": category_id, "limit": limit, "month": month, "year": year},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["budget"]
