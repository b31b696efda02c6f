"""Integration tests for the companies API."""

from tests.fixtures.mocks import make_quote


def test_add_and_get_company(client):
    response = client.post(
        "/api/companies",
        json={
            "code": "wes",
            "products": [{"label": "Retail"}],
            "note": {"title": "First look", "date": "2024-01-01T00:00:00"},
        },
    )
    assert response.status_code == 201
    assert response.json()["code"] == "WES"

    response = client.get("/api/companies/WES")
    assert response.status_code == 200
    assert response.json()["notes"][0]["title"] == "First look"

    labels = [o["label"] for o in client.get("/api/options/products").json()]
    assert "Retail" in labels


def test_add_duplicate_company(client, company):
    response = client.post("/api/companies", json={"code": "CBA"})
    assert response.status_code == 400


def test_list_companies(client, company):
    response = client.get("/api/companies")
    assert [c["code"] for c in response.json()] == ["CBA"]


def test_get_unknown_company(client):
    assert client.get("/api/companies/NOPE").status_code == 404


def test_validate_code(client, mock_provider):
    mock_provider.quotes["WES.AX"] = make_quote("WES.AX", "65.10", "64.00")
    mock_provider.names["WES.AX"] = "Wesfarmers Limited"

    response = client.get("/api/companies/validate/wes")

    assert response.status_code == 200
    assert response.json()["status"] == "Valid"
    assert response.json()["company_name"] == "Wesfarmers Limited"


def test_validate_code_not_on_feed(client):
    response = client.get("/api/companies/validate/ZZZ")
    assert response.json()["status"] == "Company not found"


def test_validate_code_already_stored(client, company):
    response = client.get("/api/companies/validate/CBA")
    assert response.json()["status"] == "Company already exists"
