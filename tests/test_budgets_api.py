from budget_tracker.models.budget_model import Budget
from conftest import make_category, make_expense, set_budget


def test_set_budget_returns_budget_with_category(client, auth):
    food = make_category(client, auth, "Food", icon="🍔", color="#ff0000")
    budget = set_budget(client, auth, food["id"], 1000)

    assert budget["limit"] == 1000
    assert (budget["month"], budget["year"]) == (3, 2024)
    assert budget["category"] == {"id": food["id"], "name": "Food", "icon": "🍔", "color": "#ff0000"}


def test_upsert_keeps_a_single_budget_per_scope(client, app, auth):
    food = make_category(client, auth)
    first = set_budget(client, auth, food["id"], 1000)
    second = set_budget(client, auth, food["id"], 1500)

    assert first["id"] == second["id"]
    assert second["limit"] == 1500

    db = app.state.database.session()
    try:
        rows = db.query(Budget).filter(Budget.category_id == food["id"]).all()
    finally:
        db.close()
    assert len(rows) == 1
    assert rows[0].limit == 1500


def test_budgets_in_different_months_are_separate(client, auth):
    food = make_category(client, auth)
    march = set_budget(client, auth, food["id"], 1000, month=3)
    april = set_budget(client, auth, food["id"], 800, month=4)
    assert march["id"] != april["id"]


def test_list_budgets_includes_spending(client, auth):
    food = make_category(client, auth)
    set_budget(client, auth, food["id"], 1000)
    make_expense(client, auth, food["id"], 400, date="2024-03-01")
    make_expense(client, auth, food["id"], 400, date="2024-03-31")
    # outside the month
    make_expense(client, auth, food["id"], 999, date="2024-04-01")

    resp = client.get("/budgets", params={"month": 3, "year": 2024}, headers=auth)
    assert resp.status_code == 200
    data = resp.json()
    assert (data["month"], data["year"]) == (3, 2024)
    [budget] = data["budgets"]
    assert budget["spent"] == 800
    assert budget["remaining"] == 200
    assert budget["percentage"] == 80.0
    assert budget["status"] == "warning"


def test_list_budgets_exceeded_caps_percentage(client, auth):
    rent = make_category(client, auth, "Rent")
    set_budget(client, auth, rent["id"], 500)
    make_expense(client, auth, rent["id"], 600)

    [budget] = client.get("/budgets?month=3&year=2024", headers=auth).json()["budgets"]
    assert budget["spent"] == 600
    assert budget["remaining"] == -100
    assert budget["percentage"] == 100.0
    assert budget["status"] == "exceeded"


def test_budget_with_no_expenses_is_safe(client, auth):
    food = make_category(client, auth)
    set_budget(client, auth, food["id"], 300)
    [budget] = client.get("/budgets?month=3&year=2024", headers=auth).json()["budgets"]
    assert budget["spent"] == 0
    assert budget["status"] == "safe"


def test_spending_is_scoped_to_the_owner(client, auth, other_auth):
    mine = make_category(client, auth)
    theirs = make_category(client, other_auth)
    set_budget(client, auth, mine["id"], 1000)
    make_expense(client, other_auth, theirs["id"], 900)

    [budget] = client.get("/budgets?month=3&year=2024", headers=auth).json()["budgets"]
    assert budget["spent"] == 0
    assert client.get("/budgets?month=3&year=2024", headers=other_auth).json()["budgets"] == []


def test_budget_validation(client, auth):
    food = make_category(client, auth)
    for body in (
        {"category": food["id"], "limit": 0, "month": 3, "year": 2024},
        {"category": food["id"], "limit": -5, "month": 3, "year": 2024},
        {"category": food["id"], "limit": 100, "month": 13, "year": 2024},
        {"limit": 100, "month": 3, "year": 2024},
    ):
        resp = client.post("/budgets", json=body, headers=auth)
        assert resp.status_code == 400, body
        assert "error" in resp.json()

    assert client.get("/budgets?month=0&year=2024", headers=auth).status_code == 400


def test_budget_for_someone_elses_category_is_not_found(client, auth, other_auth):
    theirs = make_category(client, other_auth)
    resp = client.post(
        "/budgets", json={"category": theirs["id"], "limit": 100, "month": 3, "year": 2024}, headers=auth
    )
    assert resp.status_code == 404
    assert resp.json() == {"error": "Category not found"}


def test_delete_budget(client, auth):
    food = make_category(client, auth)
    budget = set_budget(client, auth, food["id"], 1000)

    resp = client.delete(f"/budgets/{budget['id']}", headers=auth)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Budget deleted successfully"}
    assert client.delete(f"/budgets/{budget['id']}", headers=auth).status_code == 404


def test_delete_other_users_budget_is_not_found(client, auth, other_auth):
    food = make_category(client, auth)
    budget = set_budget(client, auth, food["id"], 1000)

    resp = client.delete(f"/budgets/{budget['id']}", headers=other_auth)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Budget not found"}
    assert len(client.get("/budgets?month=3&year=2024", headers=auth).json()["budgets"]) == 1


def test_deleted_category_shows_placeholder(client, auth):
    food = make_category(client, auth)
    set_budget(client, auth, food["id"], 1000)
    make_expense(client, auth, food["id"], 100)
    assert client.delete(f"/categories/{food['id']}", headers=auth).status_code == 200

    [budget] = client.get("/budgets?month=3&year=2024", headers=auth).json()["budgets"]
    assert budget["category"]["name"] == "Uncategorized"
    assert budget["category"]["id"] == food["id"]
    assert budget["spent"] == 100


def test_budgets_require_auth(client):
    resp = client.get("/budgets")
    assert resp.status_code == 401
    assert resp.json() == {"error": "No token provided"}
