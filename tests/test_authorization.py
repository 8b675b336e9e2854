"""
Test the ownership rule across records
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError as SchemaError

from realty_crm.core.exceptions import ForbiddenError, NotFoundError
from realty_crm.core.security import Actor
from realty_crm.models import UserRole
from realty_crm.services.authorization import (
    Decision, authorize, can_mutate, ensure_not_self, owner_scope
)


class Record:
    def __init__(self, owner_id):
        self.id = uuid4()
        self.owner_id = owner_id


def test_can_mutate():
    """Test owner and admin are allowed, everyone else denied."""
    owner = Actor(id=uuid4(), role=UserRole.USER)
    stranger = Actor(id=uuid4(), role=UserRole.USER)
    admin = Actor(id=uuid4(), role=UserRole.ADMIN)

    assert can_mutate(owner, owner.id) is Decision.ALLOW
    assert can_mutate(stranger, owner.id) is Decision.DENY
    assert can_mutate(admin, owner.id) is Decision.ALLOW
    assert can_mutate(stranger, None) is Decision.DENY


def test_authorize_missing_before_forbidden():
    """Test a missing record is reported as not found, not forbidden."""
    stranger = Actor(id=uuid4(), role=UserRole.USER)

    with pytest.raises(NotFoundError):
        authorize(stranger, None, "Contact", "update")

    with pytest.raises(ForbiddenError) as exc:
        authorize(stranger, Record(uuid4()), "Contact", "update")
    assert exc.value.message == "Not authorized to update this contact"


def test_owner_scope_and_self_guard():
    """Test list scoping and the self-action guard."""
    agent = Actor(id=uuid4(), role=UserRole.USER)
    admin = Actor(id=uuid4(), role=UserRole.ADMIN)

    assert owner_scope(agent) == {"owner_id": agent.id}
    assert owner_scope(admin) == {}
    assert owner_scope(agent, column="user_id") == {"user_id": agent.id}

    with pytest.raises(ForbiddenError):
        ensure_not_self(admin, admin.id, "Admin cannot demote self")
    ensure_not_self(admin, agent.id, "Admin cannot demote self")


async def test_non_owner_cannot_modify_contact(client, agent, other_agent, admin, auth_headers, sample_contact_data):
    """Test non-owner update and delete are forbidden; owner and admin succeed."""
    created = await client.post("/api/contacts/", json=sample_contact_data, headers=auth_headers(agent))
    assert created.status_code == 201
    contact_id = created.json()["id"]

    response = await client.put(
        f"/api/contacts/{contact_id}", json={"remark": "hijack"}, headers=auth_headers(other_agent)
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"

    response = await client.delete(f"/api/contacts/{contact_id}", headers=auth_headers(other_agent))
    assert response.status_code == 403

    response = await client.put(
        f"/api/contacts/{contact_id}", json={"remark": "hot lead"}, headers=auth_headers(agent)
    )
    assert response.status_code == 200
    assert response.json()["remark"] == "hot lead"

    response = await client.put(
        f"/api/contacts/{contact_id}", json={"leadStage": "Contacted"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["leadStage"] == "Contacted"
    assert response.json()["ownerId"] == str(agent.id)


async def test_missing_contact_is_not_found(client, agent, auth_headers):
    """Test unknown ids give 404 rather than 403."""
    response = await client.put(
        f"/api/contacts/{uuid4()}", json={"remark": "x"}, headers=auth_headers(agent)
    )
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


async def test_malformed_id_names_field(client, agent, auth_headers):
    """Test a malformed path id is a validation error."""
    response = await client.get("/api/contacts/not-a-uuid", headers=auth_headers(agent))
    assert response.status_code == 400
    assert response.json()["field"] == "contact_id"


async def test_contact_listing_is_scoped(client, agent, other_agent, admin, auth_headers, sample_contact_data):
    """Test agents only list their own contacts."""
    await client.post("/api/contacts/", json=sample_contact_data, headers=auth_headers(agent))
    await client.post("/api/contacts/", json={"name": "Ravi"}, headers=auth_headers(other_agent))

    own = (await client.get("/api/contacts/", headers=auth_headers(agent))).json()
    assert [c["name"] for c in own] == ["Jane Doe"]

    everything = (await client.get("/api/contacts/", headers=auth_headers(admin))).json()
    assert sorted(c["name"] for c in everything) == ["Jane Doe", "Ravi"]


async def test_contact_defaults(client, agent, auth_headers):
    """Test enum fields fall back to their defaults."""
    response = await client.post(
        "/api/contacts/", json={"name": "Minimal", "leadSource": ""}, headers=auth_headers(agent)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["leadStage"] == "New"
    assert data["unitType"] == "Other"
    assert data["leadSource"] == "Other"


async def test_deal_on_foreign_contact_forbidden(client, agent, other_agent, auth_headers, sample_contact_data):
    """Test deals cannot be attached to another agent's contact."""
    contact = (await client.post("/api/contacts/", json=sample_contact_data, headers=auth_headers(agent))).json()

    response = await client.post(
        "/api/deals/",
        json={"contactId": contact["id"], "name": "Plot 7"},
        headers=auth_headers(other_agent)
    )
    assert response.status_code == 403

    response = await client.post(
        "/api/deals/",
        json={"contactId": str(uuid4()), "name": "Plot 7"},
        headers=auth_headers(agent)
    )
    assert response.status_code == 404


async def test_admin_surfaces_need_admin(client, agent, auth_headers):
    """Test non-admins are refused on team and user administration."""
    for path in ("/api/teams/", "/api/admin/users", "/api/performance/teams"):
        response = await client.get(path, headers=auth_headers(agent))
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Not an admin."


def test_actor_is_immutable():
    """Test a resolved actor cannot be escalated in place."""
    actor = Actor(id=uuid4(), role="user")
    assert actor.role is UserRole.USER
    assert actor.is_admin is False

    with pytest.raises(SchemaError):
        actor.role = UserRole.ADMIN
