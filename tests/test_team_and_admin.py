from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from src.auth.jwt import create_access_token
from src.main import app
from src.observability import incr_metric


def _bearer(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def _seed_profiles(fake_db):
    fake_db.tables["profiles"] = [
        {
            "id": "u-1",
            "organization_id": "org-1",
            "full_name": "Owner",
            "role": "admin",
            "is_superadmin": False,
            "permissions": None,
            "created_at": "2026-01-01T00:00:00+00:00",
        },
        {
            "id": "u-2",
            "organization_id": "org-1",
            "full_name": "Assistant",
            "role": "user",
            "is_superadmin": False,
            "permissions": {"can_see_pricing": True},
            "created_at": "2026-01-02T00:00:00+00:00",
        },
        {
            "id": "u-9",
            "organization_id": "org-2",
            "full_name": "Elsewhere",
            "role": "user",
            "is_superadmin": None,
            "permissions": None,
            "created_at": "2026-01-03T00:00:00+00:00",
        },
    ]
    fake_db.emails.update({"u-1": "owner@gallery.com", "u-2": "assistant@gallery.com"})


def _seed_invitation(fake_db, expires_at: datetime, **overrides):
    row = {
        "id": "inv-1",
        "organization_id": "org-1",
        "email": "new@gallery.com",
        "permissions": {"can_delete": False, "can_access_settings": False, "can_see_pricing": True, "read_only": True},
        "invited_by": "u-1",
        "token": "tok-123",
        "status": "pending",
        "created_at": "2026-01-05T00:00:00+00:00",
        "expires_at": expires_at.isoformat(),
    }
    row.update(overrides)
    fake_db.tables["invitations"] = [row]
    return row


def test_members_listing_requires_admin_role(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    as_caller(make_auth("user", permissions={"can_access_settings": True}))
    client = TestClient(app)

    response = client.get("/api/team/members")

    assert response.status_code == 403
    assert response.json()["detail"]["capability"] == "admin"


def test_members_listing_resolves_roles_and_emails(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    as_caller(make_auth("admin"))
    client = TestClient(app)

    members = client.get("/api/team/members").json()

    assert [m["id"] for m in members] == ["u-1", "u-2"]
    assert members[0]["email"] == "owner@gallery.com"
    assert members[0]["permissions"]["can_delete"] is True
    assert members[1]["role"] == "user"
    assert members[1]["permissions"] == {
        "can_delete": False,
        "can_access_settings": False,
        "can_see_pricing": True,
        "read_only": False,
    }


def test_create_invitation_stores_lowercased_email_and_link(fake_db, make_auth, as_caller) -> None:
    as_caller(make_auth("admin"))
    client = TestClient(app)

    response = client.post("/api/team/invitations", json={
        "email": "  New.Person@Gallery.Com ",
        "permissions": {"can_see_pricing": True},
    })

    assert response.status_code == 201
    body = response.json()
    stored = fake_db.tables["invitations"][0]
    assert stored["email"] == "new.person@gallery.com"
    assert stored["status"] == "pending"
    assert stored["invited_by"] == "u-1"
    assert body["invite_url"] == f"http://localhost:3000/invite/{stored['token']}"
    assert body["invitation"]["permissions"]["can_see_pricing"] is True


def test_user_cannot_invite_even_with_settings_access(fake_db, make_auth, as_caller) -> None:
    as_caller(make_auth("user", permissions={"can_access_settings": True}))
    client = TestClient(app)

    response = client.post("/api/team/invitations", json={"email": "a@example.com"})

    assert response.status_code == 403
    assert fake_db.writes("invitations") == []


def test_cancel_invitation_marks_expired(fake_db, make_auth, as_caller) -> None:
    _seed_invitation(fake_db, datetime.now(timezone.utc) + timedelta(days=3))
    as_caller(make_auth("admin"))
    client = TestClient(app)

    assert client.delete("/api/team/invitations/inv-1").status_code == 204
    assert fake_db.tables["invitations"][0]["status"] == "expired"
    assert client.get("/api/team/invitations").json() == []


def test_accept_invitation_joins_org_as_user(fake_db) -> None:
    _seed_invitation(fake_db, datetime.now(timezone.utc) + timedelta(days=3))
    fake_db.tables["profiles"] = [{"id": "u-5", "organization_id": None, "role": None, "permissions": None}]
    client = TestClient(app)

    response = client.post("/api/team/invitations/tok-123/accept", headers=_bearer("u-5"))

    assert response.status_code == 200
    body = response.json()
    assert body["org_id"] == "org-1"
    assert body["role"] == "user"
    assert body["capabilities"] == {
        "mutate": False,
        "delete": False,
        "see_pricing": True,
        "access_settings": False,
    }
    assert fake_db.tables["invitations"][0]["status"] == "accepted"
    assert fake_db.tables["profiles"][0]["invited_by"] == "u-1"


def test_accept_expired_invitation_is_gone(fake_db) -> None:
    _seed_invitation(fake_db, datetime.now(timezone.utc) - timedelta(minutes=1))
    fake_db.tables["profiles"] = [{"id": "u-5", "organization_id": None}]
    client = TestClient(app)

    response = client.post("/api/team/invitations/tok-123/accept", headers=_bearer("u-5"))

    assert response.status_code == 410
    assert fake_db.tables["invitations"][0]["status"] == "expired"
    assert fake_db.tables["profiles"][0]["organization_id"] is None


def test_accept_without_profile_leaves_invitation_pending(fake_db) -> None:
    _seed_invitation(fake_db, datetime.now(timezone.utc) + timedelta(days=3))
    fake_db.tables["profiles"] = [{"id": "u-1", "organization_id": "org-1", "role": "admin"}]
    client = TestClient(app)

    response = client.post("/api/team/invitations/tok-123/accept", headers=_bearer("u-5"))

    assert response.status_code == 404
    assert fake_db.tables["invitations"][0]["status"] == "pending"
    assert fake_db.tables["profiles"] == [{"id": "u-1", "organization_id": "org-1", "role": "admin"}]


def test_accept_unknown_token_is_not_found(fake_db) -> None:
    client = TestClient(app)

    response = client.post("/api/team/invitations/nope/accept", headers=_bearer("u-5"))

    assert response.status_code == 404


def test_update_member_permissions(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    as_caller(make_auth("admin"))
    client = TestClient(app)
    new_permissions = {"can_delete": True, "can_access_settings": False, "can_see_pricing": False, "read_only": False}

    response = client.put("/api/team/members/u-2/permissions", json={"permissions": new_permissions})

    assert response.status_code == 200
    assert response.json()["permissions"] == new_permissions
    assert response.json()["email"] == "assistant@gallery.com"


def test_permissions_of_admins_and_other_orgs_cannot_be_changed(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    as_caller(make_auth("admin"))
    client = TestClient(app)
    payload = {"permissions": {"read_only": True}}

    admin_target = client.put("/api/team/members/u-1/permissions", json=payload)
    other_org = client.put("/api/team/members/u-9/permissions", json=payload)

    assert admin_target.status_code == 400
    assert other_org.status_code == 404
    assert fake_db.writes("profiles") == []


def test_remove_member_detaches_profile(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    as_caller(make_auth("admin"))
    client = TestClient(app)

    response = client.delete("/api/team/members/u-2")

    assert response.status_code == 204
    removed = fake_db.tables["profiles"][1]
    assert removed["organization_id"] is None
    assert removed["role"] == "admin"


def test_admin_endpoints_require_superadmin_flag(fake_db, make_auth, as_caller) -> None:
    as_caller(make_auth("admin"))
    client = TestClient(app)

    for path in ("/api/admin/organizations", "/api/admin/organizations/org-1/members", "/api/admin/metrics"):
        response = client.get(path)
        assert response.status_code == 403
        assert response.json()["detail"]["capability"] == "superadmin"


def test_superadmin_lists_organizations_across_tenants(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    fake_db.tables["organizations"].append(
        {"id": "org-2", "name": "Gallery Two", "subscription_status": "trialing", "created_at": "2026-02-01T00:00:00+00:00"}
    )
    as_caller(make_auth("admin", is_superadmin=True))
    client = TestClient(app)

    orgs = client.get("/api/admin/organizations").json()
    members = client.get("/api/admin/organizations/org-2/members").json()

    assert [(o["id"], o["member_count"]) for o in orgs] == [("org-2", 1), ("org-1", 2)]
    assert [(m["id"], m["role"], m["is_superadmin"]) for m in members] == [("u-9", "user", False)]


def test_superadmin_changes_roles_but_never_grants_superadmin(fake_db, make_auth, as_caller) -> None:
    _seed_profiles(fake_db)
    as_caller(make_auth("admin", is_superadmin=True))
    client = TestClient(app)

    promote = client.put("/api/admin/users/u-9/role", json={"role": "superadmin"})
    change = client.put("/api/admin/users/u-9/role", json={"role": "admin"})
    missing = client.put("/api/admin/users/nobody/role", json={"role": "user"})

    assert promote.status_code == 400
    assert change.status_code == 200
    assert change.json()["role"] == "admin"
    assert fake_db.tables["profiles"][2]["role"] == "admin"
    assert missing.status_code == 404


def test_superadmin_reads_metrics(fake_db, make_auth, as_caller) -> None:
    incr_metric("auth.role_lookup.degraded", mode="permissive")
    as_caller(make_auth("admin", is_superadmin=True))
    client = TestClient(app)

    response = client.get("/api/admin/metrics")

    assert response.json() == {"counters": {"auth.role_lookup.degraded|mode=permissive": 1}}
