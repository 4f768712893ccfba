from conftest import make_category


def upload(client, headers, text):
    files = {"file": ("expenses.csv", text.encode("utf-8"), "text/csv")}
    return client.post("/expenses/upload-csv", files=files, headers=headers)


def test_upload_matches_categories(client, auth):
    make_category(client, auth, "Food & Drinks")
    make_category(client, auth, "Transport")
    csv_text = (
        "title,amount,date,category,note\n"
        "Pizza,12.5,2024-03-02,food,friday\n"
        "Metro card,30,05/03/2024,Transport,\n"
        "Gift,20,2024-03-09,Presents,\n"
    )

    resp = upload(client, auth, csv_text)
    assert resp.status_code == 201, resp.text
    assert resp.json()["imported"] == 3

    expenses = client.get("/expenses?month=3&year=2024", headers=auth).json()["expenses"]
    by_title = {e["title"]: e for e in expenses}
    assert by_title["Pizza"]["category"]["name"] == "Food & Drinks"
    assert by_title["Pizza"]["note"] == "friday"
    assert by_title["Metro card"]["category"]["name"] == "Transport"
    assert by_title["Metro card"]["date"] == "2024-03-05"
    assert by_title["Gift"]["category"]["name"] == "Uncategorized"

    names = [c["name"] for c in client.get("/categories", headers=auth).json()["categories"]]
    assert names.count("Uncategorized") == 1


def test_upload_accepts_description_column(client, auth):
    resp = upload(client, auth, "description,amount,date\nCoffee,3,2024-03-01\n")
    assert resp.status_code == 201
    assert client.get("/expenses", headers=auth).json()["expenses"][0]["title"] == "Coffee"


def test_upload_rejects_missing_columns(client, auth):
    resp = upload(client, auth, "name,price\nCoffee,3\n")
    assert resp.status_code == 400
    assert "amount" in resp.json()["error"]


def test_one_bad_row_rejects_the_file(client, auth):
    csv_text = "title,amount,date\nCoffee,3,2024-03-01\nTea,-2,2024-03-02\n"
    resp = upload(client, auth, csv_text)
    assert resp.status_code == 400
    assert "row 3" in resp.json()["error"]
    assert client.get("/expenses", headers=auth).json()["expenses"] == []


def test_bad_date_is_rejected(client, auth):
    resp = upload(client, auth, "title,amount,date\nCoffee,3,March 1st\n")
    assert resp.status_code == 400
    assert "Invalid date" in resp.json()["error"]
