"""
Realty CRM Cascade Engine
Contact deletion together with every record that references the contact
"""

from uuid import UUID
from pydantic import BaseModel
import structlog

from ..core.exceptions import NotFoundError
from ..models.contacts import Contact
from ..models.deals import Deal
from ..models.tasks import Task
from ..models.appointments import Appointment
from .record_store import RecordStore

logger = structlog.get_logger()

# Deleted in this order, contact last
DEPENDENT_MODELS = (Deal, Task, Appointment)


class DeletionSummary(BaseModel):
    """Counts of records removed with a contact"""
    contact_id: str
    contact_name: str
    deals_deleted: int = 0
    tasks_deleted: int = 0
    appointments_deleted: int = 0

    def to_dict(self) -> dict:
        return self.model_dump()


class CascadeEngine:
    """Deletes a contact and its deals, tasks and appointments.

    Callers must already have authorized the actor on the contact.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def delete_contact_cascade(self, contact_id: UUID) -> DeletionSummary:
        contact = await self.store.find_by_id(Contact, contact_id)
        if contact is None:
            raise NotFoundError("Contact not found")

        summary = DeletionSummary(contact_id=str(contact_id), contact_name=contact.name)
        counts = {}

        # One transaction: nothing is committed until the contact row is gone
        for model in DEPENDENT_MODELS:
            counts[model] = await self.store.delete_many(
                model, {"contact_id": contact_id}, commit=False
            )
        await self.store.delete_many(Contact, {"id": contact_id}, commit=False)
        await self.store.commit()

        summary.deals_deleted = counts[Deal]
        summary.tasks_deleted = counts[Task]
        summary.appointments_deleted = counts[Appointment]

        logger.info("Contact deleted with dependents", **summary.to_dict())
        return summary
