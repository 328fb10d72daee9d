"""
HTTP tests for the member portal.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.models.deal import Deal, DealStatus, Report, ReportStatus

EMAIL = "ada@example.com"


@pytest.fixture
def investor(create_user, bearer):
    user_id = create_user(email=EMAIL, first_name="Ada", last_name="Lovelace")
    return user_id, bearer(user_id, email=EMAIL)


@pytest.fixture
def catalog(run_db):
    now = datetime.now(timezone.utc)

    async def _seed(session):
        deals = [
            Deal(
                title="Rural Fiber Phase 1",
                category="broadband",
                location="Hill County, TX",
                target_amount=Decimal("2500000.00"),
                raised_amount=Decimal("1200000.00"),
                minimum_investment=Decimal("50000.00"),
                expected_return="8-12%",
                risk_level="moderate",
                details={"miles": 140},
                status=DealStatus.ACTIVE,
                launch_date=now - timedelta(days=20),
            ),
            Deal(
                title="Tower Portfolio",
                status=DealStatus.ACTIVE,
                launch_date=now - timedelta(days=2),
            ),
            Deal(title="Unlaunched Draft", status=DealStatus.DRAFT),
            Deal(title="Closed Round", status=DealStatus.CLOSED, launch_date=now - timedelta(days=400)),
        ]
        reports = [
            Report(title="Q3 Update", type="quarterly", status=ReportStatus.PUBLISHED,
                   published_at=now - timedelta(days=5)),
            Report(title="Annual Letter", type="annual", status=ReportStatus.PUBLISHED,
                   published_at=now - timedelta(days=90)),
            Report(title="Work in progress", status=ReportStatus.DRAFT),
        ]
        session.add_all(deals + reports)
        await session.commit()
        return {d.title: d.id for d in deals}

    return run_db(_seed)


def test_portal_requires_token(client):
    for path in ("/deals", "/reports", "/profile", "/dashboard"):
        response = client.get(f"/api/v1/portal{path}")
        assert response.status_code == 401, path


def test_list_deals_shows_active_newest_first(client, investor, catalog):
    _, headers = investor

    response = client.get("/api/v1/portal/deals", headers=headers)

    assert response.status_code == 200
    deals = response.json()["deals"]
    assert [d["title"] for d in deals] == ["Tower Portfolio", "Rural Fiber Phase 1"]
    assert all(d["status"] == "active" for d in deals)
    assert "targetAmount" in deals[1]
    assert "riskLevel" not in deals[1]


def test_deal_detail(client, investor, catalog):
    _, headers = investor

    response = client.get(f"/api/v1/portal/deals/{catalog['Rural Fiber Phase 1']}", headers=headers)

    assert response.status_code == 200
    deal = response.json()["deal"]
    assert deal["riskLevel"] == "moderate"
    assert deal["details"] == {"miles": 140}
    assert Decimal(str(deal["minimumInvestment"])) == Decimal("50000.00")


def test_unknown_deal_is_404(client, investor):
    _, headers = investor
    response = client.get("/api/v1/portal/deals/9999", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"] == "Deal not found"


def test_reports_are_published_only(client, investor, catalog):
    _, headers = investor

    response = client.get("/api/v1/portal/reports", headers=headers)

    assert response.status_code == 200
    assert [r["title"] for r in response.json()["reports"]] == ["Q3 Update", "Annual Letter"]


def test_get_profile(client, investor):
    user_id, headers = investor

    response = client.get("/api/v1/portal/profile", headers=headers)

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["id"] == user_id
    assert profile["email"] == EMAIL
    assert profile["firstName"] == "Ada"
    assert profile["memberSince"] is not None


def test_update_profile_is_partial(client, investor):
    _, headers = investor

    response = client.put(
        "/api/v1/portal/profile",
        json={"company": "Analytical Engines LLC", "city": "London"},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Profile updated successfully"
    assert body["profile"]["company"] == "Analytical Engines LLC"
    assert body["profile"]["city"] == "London"
    assert body["profile"]["firstName"] == "Ada"

    again = client.get("/api/v1/portal/profile", headers=headers).json()["profile"]
    assert again["company"] == "Analytical Engines LLC"


def test_update_profile_ignores_email_and_role(client, investor):
    _, headers = investor

    response = client.put(
        "/api/v1/portal/profile",
        json={"email": "evil@example.com", "role": "admin", "phone": "555-0100"},
        headers=headers,
    )

    profile = response.json()["profile"]
    assert profile["email"] == EMAIL
    assert profile["role"] == "investor"
    assert profile["phone"] == "555-0100"


def test_profile_for_deleted_account(client, bearer):
    response = client.get("/api/v1/portal/profile", headers=bearer(4242))
    assert response.status_code == 404


def test_dashboard(client, investor, catalog):
    _, headers = investor

    response = client.get("/api/v1/portal/dashboard", headers=headers)

    assert response.status_code == 200
    dashboard = response.json()["dashboard"]
    assert dashboard["activeDeals"] == 2
    assert dashboard["recentReports"] == 1
    assert dashboard["userName"] == "Ada Lovelace"
