from __future__ import annotations

import csv
import io

import pytest

from skillswap.database import SessionLocal
from skillswap.models.skills import Skill
from skillswap.models.user import User


def _register(client, *, email: str, name: str = "Test User", password: str = "SecretPass123", **extra) -> tuple[int, str]:
    r = client.post("/auth/register", json={"email": email, "password": password, "name": name, **extra})
    assert r.status_code == 201, r.text
    body = r.json()
    return body["user"]["id"], body["access_token"]


def _headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin(client) -> str:
    _, token = _register(client, email="admin@example.com", name="Admin")
    return token


def _swap(client, catalog, *, accept: bool = False, rating: int | None = None) -> int:
    _, alice = _register(client, email="alice@example.com", name="Alice", location="Lima, Peru")
    bob_id, bob = _register(client, email="bob@example.com", name="Bob", location="Lima")
    python_id = client.post(
        "/profile/skills", json={"skill_id": catalog["Python"], "type": "OFFERED", "level": "EXPERT"}, headers=_headers(alice)
    ).json()["id"]
    spanish_id = client.post(
        "/profile/skills", json={"skill_id": catalog["Spanish"], "type": "OFFERED", "level": "EXPERT"}, headers=_headers(bob)
    ).json()["id"]
    r = client.post(
        "/requests",
        json={"receiver_id": bob_id, "sender_skill_id": python_id, "receiver_skill_id": spanish_id},
        headers=_headers(alice),
    )
    assert r.status_code == 201, r.text
    request_id = r.json()["id"]
    if accept:
        client.put(f"/requests/{request_id}", json={"action": "ACCEPTED"}, headers=_headers(bob))
    if rating is not None:
        client.post("/ratings", json={"swap_request_id": request_id, "rating": rating}, headers=_headers(alice))
    return request_id


def test_admin_routes_require_admin(client) -> None:
    _, token = _register(client, email="user@example.com")

    for path in ("/admin/stats", "/admin/data?type=users", "/admin/reports?type=users", "/admin/metrics"):
        assert client.get(path, headers=_headers(token)).status_code == 403
        assert client.get(path).status_code == 401


def test_stats_counts(client, catalog, admin) -> None:
    _swap(client, catalog, accept=True, rating=5)
    with SessionLocal() as db:
        db.add(Skill(name="Knitting", category="Creative", is_approved=False))
        db.commit()

    r = client.get("/admin/stats", headers=_headers(admin))
    assert r.status_code == 200, r.text
    body = r.json()
    # The admin account is not counted as a member.
    assert body["total_users"] == 2
    assert body["active_users"] == 2
    assert body["total_swaps"] == 1
    assert body["completed_swaps"] == 1
    assert body["pending_swaps"] == 0
    assert body["total_skills"] == len(catalog) + 1
    assert body["pending_skills"] == 1


def test_data_pages(client, catalog, admin) -> None:
    _swap(client, catalog)

    users = client.get("/admin/data", params={"type": "users"}, headers=_headers(admin)).json()
    assert users["type"] == "users"
    assert users["total_count"] == 2
    by_name = {u["name"]: u for u in users["items"]}
    assert by_name["Alice"]["sent_requests"] == 1
    assert by_name["Bob"]["received_requests"] == 1

    skills = client.get("/admin/data", params={"type": "skills", "limit": 2}, headers=_headers(admin)).json()
    assert skills["total_count"] == len(catalog)
    assert skills["total_pages"] == 3
    assert len(skills["items"]) == 2

    swaps = client.get("/admin/data", params={"type": "swaps"}, headers=_headers(admin)).json()
    assert swaps["items"][0]["sender"]["email"] == "alice@example.com"

    invalid = client.get("/admin/data", params={"type": "ratings"}, headers=_headers(admin))
    assert invalid.status_code == 400

    detail = client.get("/admin/data/swaps", headers=_headers(admin)).json()
    assert detail[0]["requester_name"] == "Alice"
    assert detail[0]["skill_offered_name"] == "Python"
    assert detail[0]["skill_wanted_name"] == "Spanish"


def test_ban_and_unban_user(client, admin) -> None:
    user_id, token = _register(client, email="user@example.com")

    banned = client.post("/admin/actions", json={"action": "ban_user", "target_id": user_id}, headers=_headers(admin))
    assert banned.status_code == 200
    assert banned.json()["message"] == "User banned successfully"
    assert client.get("/profile", headers=_headers(token)).status_code == 403
    assert client.get(f"/users/{user_id}").status_code == 404

    unbanned = client.post("/admin/actions", json={"action": "unban_user", "target_id": user_id}, headers=_headers(admin))
    assert unbanned.status_code == 200
    assert client.get("/profile", headers=_headers(token)).status_code == 200

    again = client.post("/admin/actions/ban-user", json={"user_id": user_id}, headers=_headers(admin))
    assert again.status_code == 200
    login = client.post("/auth/login", json={"email": "user@example.com", "password": "SecretPass123"})
    assert login.status_code == 403


def test_admin_cannot_be_banned(client, admin) -> None:
    me = client.get("/profile", headers=_headers(admin)).json()

    r = client.post("/admin/actions/ban-user", json={"user_id": me["id"]}, headers=_headers(admin))
    assert r.status_code == 400

    missing = client.post("/admin/actions/ban-user", json={"user_id": 9999}, headers=_headers(admin))
    assert missing.status_code == 404


def test_skill_moderation(client, admin) -> None:
    _, token = _register(client, email="user@example.com")
    proposed = client.post("/skills", json={"name": "Woodworking", "category": "Creative"}, headers=_headers(token)).json()
    spam = client.post("/skills", json={"name": "Spam Skill", "category": "Other"}, headers=_headers(token)).json()

    approved = client.post(
        "/admin/actions/approve-skill", json={"skill_id": proposed["id"], "approved": True}, headers=_headers(admin)
    )
    assert approved.status_code == 200
    assert "Woodworking" in {s["name"] for s in client.get("/skills").json()}

    rejected = client.post(
        "/admin/actions/approve-skill", json={"skill_id": spam["id"], "approved": False}, headers=_headers(admin)
    )
    assert rejected.status_code == 200
    remaining = client.get("/admin/data", params={"type": "skills"}, headers=_headers(admin)).json()
    assert "Spam Skill" not in {s["name"] for s in remaining["items"]}

    unlisted = client.post(
        "/admin/actions", json={"action": "reject_skill", "target_id": proposed["id"]}, headers=_headers(admin)
    )
    assert unlisted.status_code == 200
    assert "Woodworking" not in {s["name"] for s in client.get("/skills").json()}


def test_invalid_action(client, admin) -> None:
    r = client.post("/admin/actions", json={"action": "delete_everything", "target_id": 1}, headers=_headers(admin))
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid action"


def test_global_messages(client, admin) -> None:
    missing_content = client.post(
        "/admin/actions", json={"action": "send_global_message", "data": {"title": "Hi"}}, headers=_headers(admin)
    )
    assert missing_content.status_code == 400

    sent = client.post(
        "/admin/actions",
        json={"action": "send_global_message", "data": {"title": "Maintenance", "content": "Down at 2am"}},
        headers=_headers(admin),
    )
    assert sent.status_code == 200

    public = client.get("/global-messages").json()
    assert [m["title"] for m in public] == ["Maintenance"]
    message_id = public[0]["id"]

    toggled = client.post(
        "/admin/actions/toggle-message", json={"message_id": message_id, "is_active": False}, headers=_headers(admin)
    )
    assert toggled.status_code == 200
    assert toggled.json()["data"]["is_active"] is False
    assert client.get("/global-messages").json() == []

    all_messages = client.get("/admin/data/messages", headers=_headers(admin)).json()
    assert [m["id"] for m in all_messages] == [message_id]

    deleted = client.delete(f"/admin/actions/delete-message/{message_id}", headers=_headers(admin))
    assert deleted.status_code == 200
    assert client.get("/admin/data/messages", headers=_headers(admin)).json() == []

    missing = client.delete(f"/admin/actions/delete-message/{message_id}", headers=_headers(admin))
    assert missing.status_code == 404


def test_user_activity_report(client, catalog, admin) -> None:
    _swap(client, catalog)

    r = client.get("/admin/reports", params={"type": "users"}, headers=_headers(admin))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total_registrations"] == 2
    assert body["registrations_this_month"] == 2
    assert body["active_users_last_week"] == 2
    assert {(loc["location"], loc["count"]) for loc in body["top_locations"]} == {("Lima, Peru", 1), ("Lima", 1)}
    assert sum(m["count"] for m in body["registrations_by_month"]) == 2


def test_swap_statistics_report(client, catalog, admin) -> None:
    _swap(client, catalog, accept=True, rating=4)

    body = client.get("/admin/reports", params={"type": "swaps", "format": "json"}, headers=_headers(admin)).json()
    assert body["total_requests"] == 1
    assert body["completion_rate"] == 100.0
    assert body["average_rating"] == 4.0
    assert {s["skill"] for s in body["popular_skills"]} == {"Python", "Spanish"}
    assert body["swaps_by_status"] == [{"status": "COMPLETED", "count": 1}]


def test_reports_as_csv(client, catalog, admin) -> None:
    _swap(client, catalog)

    users = client.get("/admin/reports", params={"type": "users", "format": "csv"}, headers=_headers(admin))
    assert users.status_code == 200
    assert users.headers["content-type"].startswith("text/csv")
    assert 'filename="user-activity-report.csv"' in users.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(users.text)))
    assert rows[0] == ["Metric", "Value"]
    assert ["Total Registrations", "2"] in rows

    swaps = client.get("/admin/reports", params={"type": "swaps", "format": "csv"}, headers=_headers(admin))
    assert 'filename="swap-statistics-report.csv"' in swaps.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(swaps.text)))
    assert ["Completion Rate", "0.0%"] in rows

    bad = client.get("/admin/reports", params={"type": "ratings"}, headers=_headers(admin))
    assert bad.status_code == 422


def test_metrics_empty_before_any_matching(client, admin) -> None:
    r = client.get("/admin/metrics", headers=_headers(admin))
    assert r.status_code == 200
    assert r.json() == {}


def _set_role(email: str, role: str) -> None:
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).first()
        user.role = role
        db.commit()


def test_allowlisted_admin_with_user_role_cannot_be_banned(client) -> None:
    # Account created before its email was allowlisted keeps the stored USER role.
    allowlisted_id, allowlisted = _register(client, email="admin@example.com", name="Listed Admin")
    _set_role("admin@example.com", "USER")
    _, boss = _register(client, email="boss@example.com", name="Boss")
    _set_role("boss@example.com", "ADMIN")

    assert client.get("/admin/stats", headers=_headers(allowlisted)).status_code == 200

    r = client.post("/admin/actions/ban-user", json={"user_id": allowlisted_id}, headers=_headers(boss))
    assert r.status_code == 400

    via_action = client.post(
        "/admin/actions", json={"action": "ban_user", "target_id": allowlisted_id}, headers=_headers(boss)
    )
    assert via_action.status_code == 400

    assert client.get("/admin/stats", headers=_headers(allowlisted)).status_code == 200
