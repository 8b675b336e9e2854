"""
Test deal pipeline endpoints and stage classification
"""

from types import SimpleNamespace

import pytest

from realty_crm.models import DealStage, coerce_deal_value
from realty_crm.services.performance_service import (
    WON, LOST, OPEN, classify_stage, calculate_deal_stats
)


@pytest.fixture
async def contact(client, agent, auth_headers, sample_contact_data):
    response = await client.post("/api/contacts/", json=sample_contact_data, headers=auth_headers(agent))
    return response.json()


def test_classify_stage_is_exhaustive():
    """Test every stage lands in exactly one bucket."""
    buckets = {stage: classify_stage(stage.value) for stage in DealStage}

    assert buckets[DealStage.WON] == WON
    assert buckets[DealStage.LOST] == LOST
    for stage in (DealStage.LEAD, DealStage.PROSPECTING, DealStage.PROPOSAL, DealStage.NEGOTIATION):
        assert buckets[stage] == OPEN


@pytest.mark.parametrize("raw,expected", [
    ("1500", 1500.0),
    (2500, 2500.0),
    (None, 0.0),
    ("abc", 0.0),
    ("nan", 0.0),
    (True, 0.0),
])
def test_coerce_deal_value(raw, expected):
    """Test unparseable values count as zero."""
    assert coerce_deal_value(raw) == expected


def test_calculate_deal_stats():
    """Test pipeline totals."""
    deals = [
        SimpleNamespace(stage="Won", value=100),
        SimpleNamespace(stage="Lost", value=50),
        SimpleNamespace(stage="Proposal", value="30"),
        SimpleNamespace(stage="Lead", value="junk"),
    ]

    stats = calculate_deal_stats(deals)

    assert stats["total_deals"] == 4
    assert stats["won_deals"] == 1
    assert stats["lost_deals"] == 1
    assert stats["open_deals"] == 2
    assert stats["total_value"] == 180.0
    assert stats["won_value"] == 100.0
    assert stats["open_value"] == 30.0
    assert stats["won_deals"] + stats["lost_deals"] + stats["open_deals"] == stats["total_deals"]


def test_calculate_deal_stats_empty():
    """Test no deals gives zeros."""
    stats = calculate_deal_stats([])
    assert stats["total_deals"] == 0
    assert stats["open_value"] == 0.0


async def test_create_deal_coerces_value(client, agent, auth_headers, contact):
    """Test string values are stored as numbers and omitted values as zero."""
    headers = auth_headers(agent)

    response = await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Plot 4", "value": "1500"}, headers=headers
    )
    assert response.status_code == 201
    data = response.json()
    assert data["value"] == 1500
    assert data["stage"] == "Lead"
    assert data["isOpen"] is True

    response = await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Plot 5"}, headers=headers
    )
    assert response.status_code == 201
    assert response.json()["value"] == 0


async def test_create_deal_requires_contact(client, agent, auth_headers):
    """Test missing contactId names the field."""
    response = await client.post("/api/deals/", json={"name": "Orphan"}, headers=auth_headers(agent))
    assert response.status_code == 400
    assert response.json()["field"] == "contactId"


async def test_list_deals_scoped_with_names(client, agent, other_agent, admin, auth_headers, contact):
    """Test deal listing is scoped and carries contact and owner names."""
    await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Villa 9", "stage": "Won"},
        headers=auth_headers(agent)
    )
    other_contact = (await client.post(
        "/api/contacts/", json={"name": "Meera"}, headers=auth_headers(other_agent)
    )).json()
    await client.post(
        "/api/deals/", json={"contactId": other_contact["id"], "name": "Shop 2"},
        headers=auth_headers(other_agent)
    )

    own = (await client.get("/api/deals/", headers=auth_headers(agent))).json()
    assert len(own) == 1
    assert own[0]["contactName"] == "Jane Doe"
    assert own[0]["ownerName"] == "Asha Agent"
    assert own[0]["isWon"] is True

    everything = (await client.get("/api/deals/", headers=auth_headers(admin))).json()
    assert len(everything) == 2

    won = (await client.get("/api/deals/?stage=Won", headers=auth_headers(admin))).json()
    assert [d["name"] for d in won] == ["Villa 9"]


async def test_update_deal_keeps_unsent_fields(client, agent, auth_headers, contact):
    """Test partial updates only touch the fields sent."""
    headers = auth_headers(agent)
    deal = (await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Plot 8", "value": 900}, headers=headers
    )).json()

    response = await client.put(f"/api/deals/{deal['id']}", json={"stage": "Negotiation"}, headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["stage"] == "Negotiation"
    assert data["value"] == 900
    assert data["name"] == "Plot 8"


async def test_foreign_deal_forbidden(client, agent, other_agent, auth_headers, contact):
    """Test another agent cannot update or delete a deal."""
    deal = (await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Plot 1"}, headers=auth_headers(agent)
    )).json()

    assert (await client.put(
        f"/api/deals/{deal['id']}", json={"stage": "Won"}, headers=auth_headers(other_agent)
    )).status_code == 403
    assert (await client.delete(f"/api/deals/{deal['id']}", headers=auth_headers(other_agent))).status_code == 403


async def test_update_deal_null_value_keeps_stored_value(client, agent, auth_headers, contact):
    """Test an explicit null value is ignored rather than zeroing the deal."""
    headers = auth_headers(agent)
    deal = (await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Plot 3", "value": 900}, headers=headers
    )).json()

    response = await client.put(
        f"/api/deals/{deal['id']}", json={"value": None, "stage": "Proposal"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["value"] == 900
    assert response.json()["stage"] == "Proposal"

    stats = (await client.get("/api/performance/me", headers=headers)).json()["stats"]
    assert stats["openValue"] == 900
