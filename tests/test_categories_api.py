import logging

from conftest import make_category


def test_category_defaults_and_listing(client, auth):
    make_category(client, auth, "Travel")
    food = make_category(client, auth, "Food", icon="🍔", color="#ff9800")

    categories = client.get("/categories", headers=auth).json()["categories"]
    assert [c["name"] for c in categories] == ["Food", "Travel"]
    assert categories[0] == food
    assert categories[1]["icon"] == "📁"
    assert categories[1]["color"] == "#6c757d"


def test_categories_are_per_user(client, auth, other_auth):
    make_category(client, auth, "Food")
    assert client.get("/categories", headers=other_auth).json()["categories"] == []


def test_update_category(client, auth):
    food = make_category(client, auth, "Food")
    resp = client.put(f"/categories/{food['id']}", json={"color": "#000000"}, headers=auth)
    assert resp.status_code == 200
    assert resp.json()["category"]["color"] == "#000000"
    assert resp.json()["category"]["name"] == "Food"


def test_other_users_category_is_not_found(client, auth, other_auth):
    food = make_category(client, auth, "Food")
    assert client.put(f"/categories/{food['id']}", json={"name": "X"}, headers=other_auth).status_code == 404
    assert client.delete(f"/categories/{food['id']}", headers=other_auth).status_code == 404


def test_delete_category(client, auth):
    food = make_category(client, auth, "Food")
    resp = client.delete(f"/categories/{food['id']}", headers=auth)
    assert resp.json() == {"message": "Category deleted successfully"}
    assert client.get("/categories", headers=auth).json()["categories"] == []


def test_category_name_required(client, auth):
    assert client.post("/categories", json={"name": "   "}, headers=auth).status_code == 400


def test_error_kind_is_logged(client, auth, caplog):
    with caplog.at_level(logging.INFO, logger="budget_tracker.main"):
        resp = client.delete("/categories/999", headers=auth)
    assert resp.status_code == 404
    assert any("not_found error on DELETE /categories/999" in r.getMessage() for r in caplog.records)
