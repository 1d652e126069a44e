from fastapi.testclient import TestClient

from src.auth.jwt import create_access_token
from src.main import app


def _bearer(user_id: str = "u-7") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def test_create_organization_attaches_caller_as_admin(fake_db) -> None:
    fake_db.tables["profiles"] = [{"id": "u-7", "organization_id": None, "role": None, "permissions": None}]
    client = TestClient(app)

    response = client.post("/api/organizations/", json={"name": "  Studio Seven ", "currency": "eur"}, headers=_bearer())

    assert response.status_code == 201
    body = response.json()
    org = fake_db.tables["organizations"][-1]
    assert org["name"] == "Studio Seven"
    assert org["currency"] == "EUR"
    assert body["org_id"] == org["id"]
    assert body["role"] == "admin"
    assert all(body["capabilities"].values())
    assert fake_db.tables["profiles"][0]["organization_id"] == org["id"]

    me = client.get("/api/auth/me", headers=_bearer())
    assert me.status_code == 200
    assert me.json()["org_id"] == org["id"]


def test_onboarded_caller_cannot_create_second_organization(fake_db) -> None:
    fake_db.tables["profiles"] = [{"id": "u-7", "organization_id": "org-1", "role": "admin"}]
    client = TestClient(app)

    response = client.post("/api/organizations/", json={"name": "Another"}, headers=_bearer())

    assert response.status_code == 409
    assert fake_db.writes("organizations") == []
    assert len(fake_db.tables["organizations"]) == 1


def test_create_organization_requires_profile(fake_db) -> None:
    client = TestClient(app)

    response = client.post("/api/organizations/", json={"name": "Studio"}, headers=_bearer())

    assert response.status_code == 404
    assert fake_db.writes("organizations") == []


def test_create_organization_requires_identity_and_name(fake_db) -> None:
    fake_db.tables["profiles"] = [{"id": "u-7", "organization_id": None}]
    client = TestClient(app)

    assert client.post("/api/organizations/", json={"name": "Studio"}).status_code == 401
    assert client.post("/api/organizations/", json={"name": "   "}, headers=_bearer()).status_code == 422
    assert fake_db.writes("organizations") == []
