"""HTTP endpoint tests against the Flask test client."""

from __future__ import annotations

from datetime import date

import pytest

from budgettracker.clock import utcnow

PASSWORD = "secret123"


def _register(client, email="frank@example.com", user_name="frank"):
    return client.post(
        "/api/users",
        json={"userName": user_name, "email": email, "password": PASSWORD},
    )


def _verify(client, services, email):
    token = services.users.get_by_email(email).verification_token
    return client.post("/api/users/verify-email", json={"token": token})


def _login(client, email="frank@example.com", device_id="dev-1", **headers):
    return client.post(
        "/api/auth/login",
        json={"emailId": email, "password": PASSWORD, "deviceId": device_id},
        headers=headers,
    )


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def signed_in(client, services):
    """Register, verify and log in one account; returns (token, user payload)."""

    _register(client)
    _verify(client, services, "frank@example.com")
    response = _login(client)
    assert response.status_code == 200
    payload = response.get_json()
    return payload["token"], payload["user"]


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_unknown_route_renders_json(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_registration_flow(client, services):
    response = _register(client)

    assert response.status_code == 201
    user = response.get_json()["user"]
    assert user["isVerified"] is False
    assert "passwordHash" not in user

    assert _register(client).status_code == 409

    unverified = _login(client)
    assert unverified.status_code == 403
    assert unverified.get_json()["emailNotVerified"] is True
    assert unverified.get_json()["email"] == "frank@example.com"

    verified = _verify(client, services, "frank@example.com")
    assert verified.status_code == 200
    assert verified.get_json()["user"]["isVerified"] is True

    resend = client.post("/api/users/resend-verification", json={"email": "frank@example.com"})
    assert resend.status_code == 400


def test_registration_validation_details(client):
    response = client.post("/api/users", json={"userName": "ab", "email": "bad", "password": "1"})

    body = response.get_json()
    assert response.status_code == 400
    assert body["error"] == "validation_failed"
    assert {detail["field"] for detail in body["details"]} == {"userName", "email", "password"}


def test_login_rejects_bad_credentials(client, signed_in):
    wrong = client.post(
        "/api/auth/login", json={"email": "frank@example.com", "password": "nope-nope"}
    )
    unknown = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "nope-nope"}
    )

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()


def test_login_validates_payload(client):
    response = client.post("/api/auth/login", json={"email": "", "deviceId": "x" * 256})

    fields = {detail["field"] for detail in response.get_json()["details"]}
    assert response.status_code == 400
    assert fields == {"email", "password", "deviceId"}


def test_session_endpoints(client, signed_in):
    token, user = signed_in

    verify = client.get("/api/auth/verify", headers=_auth(token))
    assert verify.status_code == 200
    assert verify.get_json()["user"]["id"] == user["id"]
    assert verify.get_json()["deviceId"] == "dev-1"

    session = client.get("/api/auth/session", headers=_auth(token)).get_json()["session"]
    assert session["deviceId"] == "dev-1"
    assert "token" not in session

    other = _login(client, device_id="tablet", **{"User-Agent": "Mozilla/5.0 (Tablet) Firefox/120"})
    assert other.status_code == 200

    sessions = client.get("/api/auth/sessions", headers=_auth(token)).get_json()
    assert sessions["count"] == 2
    current = [row for row in sessions["sessions"] if row["current"]]
    assert [row["deviceId"] for row in current] == ["dev-1"]


def test_protected_routes_require_token(client):
    missing = client.get("/api/auth/verify")
    garbage = client.get("/api/auth/verify", headers=_auth("garbage"))

    assert missing.status_code == 401
    assert missing.get_json()["error"] == "unauthorized"
    assert garbage.status_code == 401


def test_relogin_invalidates_previous_token(client, signed_in):
    old_token, _ = signed_in
    new_token = _login(client).get_json()["token"]

    stale = client.get("/api/auth/verify", headers=_auth(old_token))
    assert stale.status_code == 401
    assert stale.get_json()["error"] == "invalid_session"
    assert client.get("/api/auth/verify", headers=_auth(new_token)).status_code == 200


def test_logout_with_header_or_body(client, signed_in):
    token, _ = signed_in

    response = client.post("/api/auth/logout", headers=_auth(token))
    assert response.status_code == 200
    assert response.get_json()["deviceId"] == "dev-1"

    again = client.post("/api/auth/logout", json={"token": token})
    assert again.status_code == 404
    assert client.post("/api/auth/logout").status_code == 400
    assert client.get("/api/auth/verify", headers=_auth(token)).get_json()["error"] == "invalid_session"


def test_logout_all(client, signed_in):
    token, _ = signed_in
    other = _login(client, device_id="laptop").get_json()["token"]

    response = client.post("/api/auth/logout-all", headers=_auth(token))

    assert response.get_json()["sessionsEnded"] == 2
    assert client.get("/api/auth/verify", headers=_auth(other)).status_code == 401


def test_user_management(client, services, signed_in):
    token, user = signed_in
    _register(client, email="grace@example.com", user_name="grace")
    grace = services.users.get_by_email("grace@example.com")

    listing = client.get("/api/users", headers=_auth(token)).get_json()["users"]
    assert {row["email"] for row in listing} == {"frank@example.com", "grace@example.com"}

    fetched = client.get(f"/api/users/{grace.id}", headers=_auth(token))
    assert fetched.get_json()["user"]["userName"] == "grace"

    forbidden = client.put(f"/api/users/{grace.id}", json={"userName": "hacked"}, headers=_auth(token))
    assert forbidden.status_code == 403
    assert client.delete(f"/api/users/{grace.id}", headers=_auth(token)).status_code == 403

    updated = client.put(f"/api/users/{user['id']}", json={"userName": "franky"}, headers=_auth(token))
    assert updated.status_code == 200
    assert updated.get_json()["user"]["userName"] == "franky"

    deleted = client.delete(f"/api/users/{user['id']}", headers=_auth(token))
    assert deleted.status_code == 200
    assert client.get("/api/auth/verify", headers=_auth(token)).status_code == 401


def test_configuration_endpoints(client, signed_in):
    token, _ = signed_in
    headers = _auth(token)

    empty = client.get("/api/configuration", headers=headers).get_json()
    assert empty == {"configuration": None, "isConfigured": False}
    assert client.get("/api/configuration/loan-summary", headers=headers).status_code == 404

    created = client.post(
        "/api/configuration",
        json={
            "income": 90000,
            "totalEmi": 15000,
            "numberOfLoans": 2,
            "loans": [
                {"id": "home", "bankName": "First Bank", "currentBalance": 300000, "interestRate": 8.5},
                {"id": "car", "bankName": "Auto Bank", "currentBalance": 100000, "interestRate": 10},
            ],
        },
        headers=headers,
    )
    assert created.status_code == 201
    assert created.get_json()["configuration"]["isConfigured"] is True

    updated = client.put("/api/configuration", json={"income": 95000}, headers=headers)
    assert updated.status_code == 200
    assert updated.get_json()["configuration"]["totalEmi"] == 15000

    status = client.get("/api/configuration/status", headers=headers).get_json()
    assert status == {"isConfigured": True}

    summary = client.get("/api/configuration/loan-summary", headers=headers).get_json()
    assert summary["totalLoanBalance"] == 400000
    assert [loan["monthlyPayment"] for loan in summary["loans"]] == pytest.approx([11250.0, 3750.0])
    assert summary["emiStatus"]["paidThisMonth"] is False


def test_configuration_validation(client, signed_in):
    token, _ = signed_in

    response = client.post(
        "/api/configuration",
        json={"income": "lots", "loans": [{"interestRate": 140}]},
        headers=_auth(token),
    )

    assert response.status_code == 400
    assert {detail["field"] for detail in response.get_json()["details"]} == {"income", "loans"}


def test_configuration_rejects_out_of_range_numbers(client, signed_in):
    token, _ = signed_in
    headers = _auth(token)

    oversized = client.post("/api/configuration", json={"income": 10**400}, headers=headers)
    assert oversized.status_code == 400
    assert oversized.get_json()["error"] == "validation_failed"

    huge_loans = client.post(
        "/api/configuration",
        json={"totalEmi": 100, "loans": [{"currentBalance": 1e308}, {"currentBalance": 1e308}]},
        headers=headers,
    )
    assert huge_loans.status_code == 400
    assert {detail["field"] for detail in huge_loans.get_json()["details"]} == {"loans"}

    fractional = client.post("/api/configuration", json={"numberOfLoans": 2.7}, headers=headers)
    assert fractional.status_code == 400
    assert {detail["field"] for detail in fractional.get_json()["details"]} == {"numberOfLoans"}

    whole = client.post("/api/configuration", json={"numberOfLoans": "3"}, headers=headers)
    assert whole.status_code == 201
    assert whole.get_json()["configuration"]["numberOfLoans"] == 3


def test_transaction_rejects_oversized_amount(client, signed_in):
    token, _ = signed_in

    response = client.post(
        "/api/transactions",
        json={"type": "INCOME", "amount": 10**400, "transactionDate": "2024-05-01"},
        headers=_auth(token),
    )

    assert response.status_code == 400
    assert {detail["field"] for detail in response.get_json()["details"]} == {"amount"}


def test_transaction_endpoints(client, signed_in):
    token, _ = signed_in
    headers = _auth(token)
    today = utcnow().date()

    created = client.post(
        "/api/transactions",
        json={
            "type": "expense",
            "amount": "12,500",
            "transactionDate": today.isoformat(),
            "category": "Loan",
            "paidEmi": True,
        },
        headers=headers,
    )
    assert created.status_code == 201
    txn = created.get_json()["transaction"]
    assert txn["type"] == "EXPENSE"
    assert txn["amount"] == 12500
    assert (txn["month"], txn["year"]) == (today.month, today.year)

    client.post(
        "/api/transactions",
        json={"type": "INCOME", "amount": 80000, "transactionDate": today.isoformat()},
        headers=headers,
    )

    listing = client.get(
        f"/api/transactions?month={today.month}&year={today.year}", headers=headers
    ).get_json()
    assert len(listing["transactions"]) == 2
    assert listing["summary"]["incomeTotal"] == 80000
    assert listing["summary"]["expenseTotal"] == 12500
    assert listing["summary"]["paidEmiTransactionId"] == txn["id"]

    client.post("/api/configuration", json={"income": 80000}, headers=headers)
    emi_status = client.get("/api/configuration/loan-summary", headers=headers).get_json()["emiStatus"]
    assert emi_status["paidThisMonth"] is True
    assert emi_status["paidTransactionId"] == txn["id"]

    moved = client.put(
        f"/api/transactions/{txn['id']}",
        json={"transactionDate": "2023-12-31", "description": "moved"},
        headers=headers,
    )
    assert moved.status_code == 200
    assert (moved.get_json()["transaction"]["month"], moved.get_json()["transaction"]["year"]) == (12, 2023)
    assert moved.get_json()["transaction"]["amount"] == 12500

    assert client.delete(f"/api/transactions/{txn['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/transactions/{txn['id']}", headers=headers).status_code == 404


def test_transaction_validation(client, signed_in):
    token, _ = signed_in
    headers = _auth(token)

    invalid = client.post(
        "/api/transactions",
        json={"type": "TRANSFER", "amount": -5, "paidEmi": "maybe"},
        headers=headers,
    )
    fields = {detail["field"] for detail in invalid.get_json()["details"]}
    assert invalid.status_code == 400
    assert fields == {"type", "amount", "transactionDate", "paidEmi"}

    bad_month = client.get("/api/transactions?month=13", headers=headers)
    assert bad_month.status_code == 400

    assert client.put("/api/transactions/999", json={"amount": 1}, headers=headers).status_code == 404


def test_transactions_are_scoped_to_owner(client, services, signed_in):
    token, _ = signed_in
    created = client.post(
        "/api/transactions",
        json={"type": "INCOME", "amount": 10, "transactionDate": date(2024, 1, 5).isoformat()},
        headers=_auth(token),
    ).get_json()["transaction"]

    _register(client, email="heidi@example.com", user_name="heidi")
    _verify(client, services, "heidi@example.com")
    other_token = _login(client, email="heidi@example.com").get_json()["token"]

    assert client.get("/api/transactions", headers=_auth(other_token)).get_json()["transactions"] == []
    response = client.delete(f"/api/transactions/{created['id']}", headers=_auth(other_token))
    assert response.status_code == 404
