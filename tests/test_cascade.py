"""
Test contact deletion with its dependent records
"""

from uuid import uuid4

from realty_crm.models import Appointment, Contact, Deal, Task
from realty_crm.services.cascade import DeletionSummary


async def _contact_with_dependents(client, headers, sample_contact_data):
    contact = (await client.post("/api/contacts/", json=sample_contact_data, headers=headers)).json()
    deal = (await client.post(
        "/api/deals/", json={"contactId": contact["id"], "name": "Plot 12", "value": 500000}, headers=headers
    )).json()
    task = (await client.post(
        f"/api/tasks/contact/{contact['id']}", json={"content": "Send brochure"}, headers=headers
    )).json()
    appointment = (await client.post("/api/appointments/", json={
        "contactId": contact["id"],
        "title": "Site visit",
        "appointmentTime": "2026-11-02T10:30:00",
    }, headers=headers)).json()
    return contact, deal, task, appointment


async def test_delete_contact_removes_dependents(client, agent, auth_headers, fetch, sample_contact_data):
    """Test deleting a contact removes its deals, tasks and appointments."""
    headers = auth_headers(agent)
    contact, deal, task, appointment = await _contact_with_dependents(client, headers, sample_contact_data)

    response = await client.delete(f"/api/contacts/{contact['id']}", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["data"]["deals_deleted"] == 1
    assert data["data"]["tasks_deleted"] == 1
    assert data["data"]["appointments_deleted"] == 1
    assert data["data"]["contact_name"] == "Jane Doe"

    assert (await client.get(f"/api/contacts/{contact['id']}", headers=headers)).status_code == 404
    assert (await client.get(f"/api/deals/{deal['id']}", headers=headers)).status_code == 404
    assert (await client.get(f"/api/tasks/{task['id']}", headers=headers)).status_code == 404
    assert (await client.get(f"/api/appointments/{appointment['id']}", headers=headers)).status_code == 404

    for model, record in ((Contact, contact), (Deal, deal), (Task, task), (Appointment, appointment)):
        assert await fetch(model, record["id"]) is None


async def test_delete_contact_leaves_other_contacts_alone(client, agent, auth_headers, fetch, sample_contact_data):
    """Test the cascade only touches records of the deleted contact."""
    headers = auth_headers(agent)
    doomed, _, _, _ = await _contact_with_dependents(client, headers, sample_contact_data)
    kept, kept_deal, kept_task, kept_appointment = await _contact_with_dependents(
        client, headers, dict(sample_contact_data, name="Kept Contact")
    )

    assert (await client.delete(f"/api/contacts/{doomed['id']}", headers=headers)).status_code == 200

    assert await fetch(Contact, kept["id"]) is not None
    assert await fetch(Deal, kept_deal["id"]) is not None
    assert await fetch(Task, kept_task["id"]) is not None
    assert await fetch(Appointment, kept_appointment["id"]) is not None


async def test_delete_contact_without_dependents(client, agent, auth_headers):
    """Test zero dependents is a normal deletion."""
    headers = auth_headers(agent)
    contact = (await client.post("/api/contacts/", json={"name": "Lonely"}, headers=headers)).json()

    response = await client.delete(f"/api/contacts/{contact['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["deals_deleted"] == 0


async def test_delete_unknown_contact(client, agent, auth_headers):
    """Test deleting a missing contact is not found."""
    response = await client.delete(f"/api/contacts/{uuid4()}", headers=auth_headers(agent))
    assert response.status_code == 404


async def test_store_failure_rolls_cascade_back(
    client, agent, auth_headers, fetch, activity_count, test_engine, sample_contact_data
):
    """Test a store failure mid-cascade is a generic 500 and nothing is deleted."""
    headers = auth_headers(agent)
    contact, deal, task, _ = await _contact_with_dependents(client, headers, sample_contact_data)

    async with test_engine.begin() as conn:
        await conn.run_sync(Appointment.__table__.drop)
    before = await activity_count(action_type="deleted_contact")

    response = await client.delete(f"/api/contacts/{contact['id']}", headers=headers)
    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "store_error"
    assert "appointments" not in data["message"].lower()

    assert await fetch(Contact, contact["id"]) is not None
    assert await fetch(Deal, deal["id"]) is not None
    assert await fetch(Task, task["id"]) is not None
    assert await activity_count(action_type="deleted_contact") == before


def test_deletion_summary_to_dict():
    """Test the summary renders every count."""
    summary = DeletionSummary(contact_id="c-1", contact_name="Jane Doe", deals_deleted=2)
    assert summary.to_dict() == {
        "contact_id": "c-1",
        "contact_name": "Jane Doe",
        "deals_deleted": 2,
        "tasks_deleted": 0,
        "appointments_deleted": 0,
    }
