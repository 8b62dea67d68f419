"""Test API endpoints."""

from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from temple_stuart.config import Settings
from temple_stuart.core.database import get_db
from temple_stuart.main import create_app
from temple_stuart.models import LotStatus


def reverse_split_payload(**overrides) -> dict:
    payload = {
        "symbol": "XYZ",
        "action_type": "REVERSE_SPLIT",
        "effective_date": "2024-01-01",
        "ratio_from": 1,
        "ratio_to": 10,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test root endpoint returns expected data."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Temple Stuart"
    assert data["status"] == "running"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_endpoint(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_record_reverse_split_end_to_end(client: AsyncClient, user, make_lot):
    """10 shares at $20 through a 1:10 reverse split become 1 share at $200."""
    lot = await make_lot(user, symbol="XYZ", acquired_date=date(2023, 1, 1), quantity="10", cost_per_share="20")

    response = await client.post("/api/v1/corporate-actions", json=reverse_split_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["adjusted_lots"] == 1
    assert data["new_lot"] is None
    assert data["action"]["symbol"] == "XYZ"
    assert data["action"]["action_type"] == "REVERSE_SPLIT"
    assert Decimal(data["action"]["share_multiplier"]) == Decimal("0.1")

    adjustment = data["adjustments"][0]
    assert adjustment["lot_id"] == lot.id
    assert Decimal(adjustment["before"]["shares"]) == Decimal("10")
    assert Decimal(adjustment["before"]["cost_per_share"]) == Decimal("20")
    assert Decimal(adjustment["after"]["shares"]) == Decimal("1")
    assert Decimal(adjustment["after"]["remaining_shares"]) == Decimal("1")
    assert Decimal(adjustment["after"]["cost_per_share"]) == Decimal("200")

    response = await client.get(f"/api/v1/lots/{lot.id}")
    assert response.status_code == 200
    lot_data = response.json()
    assert Decimal(lot_data["original_quantity"]) == Decimal("1")
    assert Decimal(lot_data["remaining_quantity"]) == Decimal("1")
    assert Decimal(lot_data["cost_per_share"]) == Decimal("200")
    assert Decimal(lot_data["total_cost_basis"]) == Decimal("200")
    assert len(lot_data["adjustments"]) == 1
    assert lot_data["adjustments"][0]["corporate_action_id"] == data["action"]["id"]


@pytest.mark.asyncio
async def test_record_with_pre_split_lot(client: AsyncClient):
    """add_pre_split_lot returns the created lot."""
    response = await client.post(
        "/api/v1/corporate-actions",
        json={
            "symbol": "abc",
            "action_type": "SPLIT",
            "effective_date": "2024-05-01",
            "ratio_from": 1,
            "ratio_to": 2,
            "post_split_shares": 100,
            "add_pre_split_lot": True,
            "lot_cost_basis": 500,
            "source": "Broker statement",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["adjusted_lots"] == 0
    new_lot = data["new_lot"]
    assert new_lot["symbol"] == "ABC"
    assert new_lot["status"] == "OPEN"
    assert Decimal(new_lot["original_quantity"]) == Decimal("100")
    assert Decimal(new_lot["cost_per_share"]) == Decimal("5")
    assert new_lot["acquired_date"] == "2024-05-01"


@pytest.mark.asyncio
async def test_missing_required_fields(client: AsyncClient):
    """Missing required fields are reported field by field."""
    response = await client.post("/api/v1/corporate-actions", json={"symbol": "XYZ"})

    assert response.status_code == 422
    missing = {error["loc"][-1] for error in response.json()["detail"] if error["type"] == "missing"}
    assert missing == {"action_type", "effective_date", "ratio_from", "ratio_to"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"ratio_from": 0},
        {"ratio_to": -5},
        {"action_type": "MERGER"},
        {"post_split_shares": 0, "add_pre_split_lot": True},
        {"lot_cost_basis": -1},
    ],
)
async def test_invalid_fields_rejected(client: AsyncClient, overrides):
    """Invalid field values fail validation."""
    response = await client.post("/api/v1/corporate-actions", json=reverse_split_payload(**overrides))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_oversized_ratio_fails_validation(client: AsyncClient):
    """Ratio terms larger than the stored precision are a 422."""
    response = await client.post(
        "/api/v1/corporate-actions",
        json=reverse_split_payload(action_type="SPLIT", ratio_to="1e25"),
    )
    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"][-1] == "ratio_to"


@pytest.mark.asyncio
async def test_split_overflowing_lot_rejected(client: AsyncClient, user, make_lot):
    """A valid ratio that overflows an existing lot is a 400."""
    await make_lot(user)

    response = await client.post(
        "/api/v1/corporate-actions",
        json=reverse_split_payload(action_type="SPLIT", ratio_to="100000000000"),
    )
    assert response.status_code == 400
    assert "out of range" in response.json()["detail"]

    response = await client.get("/api/v1/corporate-actions")
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_equal_ratio_rejected(client: AsyncClient):
    """A ratio that changes nothing is a 400."""
    response = await client.post(
        "/api/v1/corporate-actions",
        json=reverse_split_payload(ratio_from=5, ratio_to=5),
    )
    assert response.status_code == 400
    assert "does not change" in response.json()["detail"]


@pytest.mark.asyncio
async def test_duplicate_action_rejected(client: AsyncClient):
    """The same action cannot be recorded twice."""
    first = await client.post("/api/v1/corporate-actions", json=reverse_split_payload())
    second = await client.post("/api/v1/corporate-actions", json=reverse_split_payload())

    assert first.status_code == 201
    assert second.status_code == 400
    assert "already recorded" in second.json()["detail"]


@pytest.mark.asyncio
async def test_unauthenticated_request(client: AsyncClient):
    """Requests without the identity cookie are rejected."""
    client.cookies.clear()

    response = await client.get("/api/v1/corporate-actions")
    assert response.status_code == 401

    response = await client.post("/api/v1/corporate-actions", json=reverse_split_payload())
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user(client: AsyncClient):
    """A cookie naming no user is a 404."""
    client.cookies.set("userEmail", "nobody@example.com")

    response = await client.post("/api/v1/corporate-actions", json=reverse_split_payload())
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_user_email_matched_case_insensitively(client: AsyncClient):
    """The identity cookie matches regardless of case."""
    client.cookies.set("userEmail", "TRADER@Example.com")

    response = await client.get("/api/v1/corporate-actions")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_list_corporate_actions(client: AsyncClient, user, make_lot):
    """Actions are listed newest first with their adjustments."""
    await make_lot(user, symbol="XYZ")
    await client.post("/api/v1/corporate-actions", json=reverse_split_payload(effective_date="2024-01-01"))
    await client.post(
        "/api/v1/corporate-actions",
        json=reverse_split_payload(action_type="SPLIT", effective_date="2024-06-01", ratio_to=2),
    )
    await client.post("/api/v1/corporate-actions", json=reverse_split_payload(symbol="ABC"))

    response = await client.get("/api/v1/corporate-actions")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3

    response = await client.get("/api/v1/corporate-actions", params={"symbol": "xyz"})
    data = response.json()
    assert data["total"] == 2
    assert [a["effective_date"] for a in data["actions"]] == ["2024-06-01", "2024-01-01"]
    assert all(len(a["lot_adjustments"]) == 1 for a in data["actions"])


@pytest.mark.asyncio
async def test_get_corporate_action(client: AsyncClient):
    """A recorded action can be fetched by ID."""
    created = await client.post("/api/v1/corporate-actions", json=reverse_split_payload())
    action_id = created.json()["action"]["id"]

    response = await client.get(f"/api/v1/corporate-actions/{action_id}")
    assert response.status_code == 200
    assert response.json()["id"] == action_id


@pytest.mark.asyncio
async def test_get_corporate_action_not_found(client: AsyncClient):
    """Test getting non-existent corporate action."""
    response = await client.get("/api/v1/corporate-actions/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_lots_filters(client: AsyncClient, user, other_user, make_lot):
    """Lots are scoped to the caller and filterable by symbol and status."""
    await make_lot(user, symbol="XYZ")
    await make_lot(user, symbol="XYZ", acquired_date=date(2022, 1, 1), status=LotStatus.CLOSED)
    await make_lot(user, symbol="ABC")
    await make_lot(other_user, symbol="XYZ")

    response = await client.get("/api/v1/lots")
    assert response.json()["total"] == 3

    response = await client.get("/api/v1/lots", params={"symbol": "xyz", "status": "OPEN"})
    data = response.json()
    assert data["total"] == 1
    assert data["lots"][0]["symbol"] == "XYZ"
    assert data["lots"][0]["status"] == "OPEN"


@pytest.mark.asyncio
async def test_get_other_users_lot_not_found(client: AsyncClient, other_user, make_lot):
    """Another user's lot is invisible."""
    lot = await make_lot(other_user)

    response = await client.get(f"/api/v1/lots/{lot.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_configured_cookie_name(db_session, user):
    """The identity cookie name comes from the app's settings."""
    app = create_app(Settings(database_url="sqlite+aiosqlite:///:memory:", auth_cookie_name="traderEmail"))

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as custom_client:
        custom_client.cookies.set("userEmail", user.email)
        response = await custom_client.get("/api/v1/lots")
        assert response.status_code == 401

        custom_client.cookies.set("traderEmail", user.email)
        response = await custom_client.get("/api/v1/lots")
        assert response.status_code == 200

    await app.state.database.dispose()
