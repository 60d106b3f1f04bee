"""
HTTP tests for the subscription endpoints.
"""


UPGRADE = {
    "plan_id": "premium",
    "payment": {"transaction_id": "pay_123", "payment_method": "upi", "gateway_order_id": "order_1"},
}


def test_plans_are_public(client):
    response = client.get("/subscription/plans")

    assert response.status_code == 200
    plans = {p["id"]: p for p in response.json()}
    assert set(plans) == {"free", "premium", "pro"}
    assert plans["free"]["limits"]["pathways_per_month"] == 1
    assert plans["pro"]["limits"]["comparisons"] == -1


def test_endpoints_require_token(client):
    assert client.get("/subscription/me").status_code == 401
    assert client.post("/subscription/quota/comparisons").status_code == 401
    assert client.get("/subscription/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_quota_then_usage_flow(client, auth_headers):
    headers = auth_headers("student-1")

    first = client.post("/subscription/quota/pathways_per_month", headers=headers)
    assert first.status_code == 200
    assert first.json()["allowed"] is True

    used = client.post("/subscription/usage/pathways_per_month", headers=headers)
    assert used.status_code == 200
    assert used.json()["usage"] == {"pathways_per_month": 1}

    second = client.post("/subscription/quota/pathways_per_month", headers=headers)
    assert second.json()["allowed"] is False
    assert second.json()["remaining"] == 0


def test_unknown_feature_is_rejected(client, auth_headers):
    response = client.post("/subscription/quota/time_travel", headers=auth_headers())

    assert response.status_code == 422


def test_usage_without_ledger_is_not_found(client, auth_headers):
    response = client.post("/subscription/usage/comparisons", headers=auth_headers("nobody"))

    assert response.status_code == 404


def test_cancel_without_ledger_is_not_found(client, auth_headers):
    assert client.post("/subscription/cancel", headers=auth_headers("nobody")).status_code == 404


def test_upgrade_and_summary(client, auth_headers):
    headers = auth_headers("student-2")

    response = client.post("/subscription/upgrade", json=UPGRADE, headers=headers)
    assert response.status_code == 200
    assert response.json()["plan_id"] == "premium"
    assert response.json()["expires_at"] is not None

    # replaying the same payment changes nothing
    replay = client.post("/subscription/upgrade", json=UPGRADE, headers=headers)
    assert replay.json()["version"] == response.json()["version"]

    summary = client.get("/subscription/me", headers=headers).json()
    assert summary["plan_id"] == "premium"
    assert summary["plan_name"] == "Premium"

    history = client.get("/subscription/transactions", headers=headers).json()
    assert [t["transaction_id"] for t in history] == ["pay_123"]
    assert history[0]["amount"] == 999


def test_upgrade_to_unknown_plan(client, auth_headers):
    response = client.post(
        "/subscription/upgrade",
        json=dict(UPGRADE, plan_id="platinum"),
        headers=auth_headers(),
    )

    assert response.status_code == 400


def test_cancel_after_upgrade(client, auth_headers):
    headers = auth_headers("student-3")
    client.post("/subscription/upgrade", json=UPGRADE, headers=headers)

    response = client.post("/subscription/cancel", headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["plan_id"] == "premium"


def test_analytics_is_admin_only(client, auth_headers):
    client.post("/subscription/quota/comparisons", headers=auth_headers("student-4"))

    assert client.get("/subscription/analytics", headers=auth_headers()).status_code == 403

    response = client.get("/subscription/analytics", headers=auth_headers("admin-1", role="admin"))
    assert response.status_code == 200
    assert response.json()["total_subscriptions"] == 1
    assert response.json()["plan_distribution"]["free"] == 1
