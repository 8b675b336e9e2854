"""
Realty CRM Contact Service
Contact lifecycle: creation, scoped listing, updates and cascading deletion
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import NotFoundError
from ..core.security import Actor
from ..models.contacts import Contact
from ..models.users import User
from .record_store import RecordStore
from .authorization import authorize, owner_scope
from .activity_logger import ActivityLogger
from .cascade import CascadeEngine, DeletionSummary

logger = structlog.get_logger()

# Field changes worth naming in the audit entry, most significant first
TRACKED_CHANGES = ("lead_source", "name")


class ContactService:
    """Service for contact management"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)
        self.activity = ActivityLogger(db)

    async def _check_team_lead(self, team_lead_id: Optional[UUID]):
        if team_lead_id and await self.store.find_by_id(User, team_lead_id) is None:
            raise NotFoundError("Team lead not found")

    async def create_contact(self, actor: Actor, fields: Dict[str, Any]) -> Contact:
        await self._check_team_lead(fields.get("team_lead_id"))

        contact = await self.store.insert(Contact(owner_id=actor.id, **fields))

        await self.activity.record(
            actor.id,
            "created_contact",
            "Contact",
            contact.id,
            {"name": contact.name, "source": contact.lead_source}
        )

        logger.info("Contact created", contact_id=str(contact.id), owner_id=str(actor.id))
        return contact

    async def list_contacts(self, actor: Actor) -> List[Tuple[Contact, Optional[str]]]:
        """Contacts visible to the actor, newest first, with team lead names"""
        contacts = await self.store.find_many(
            Contact,
            owner_scope(actor),
            order_by=[Contact.created_at.desc()]
        )
        lead_ids = {c.team_lead_id for c in contacts if c.team_lead_id}
        names = {}
        if lead_ids:
            users = await self.store.find_many(User, {"id": lead_ids})
            names = {u.id: u.name for u in users}
        return [(c, names.get(c.team_lead_id)) for c in contacts]

    async def get_contact(self, actor: Actor, contact_id: UUID, action: str = "view") -> Contact:
        contact = await self.store.find_by_id(Contact, contact_id)
        return authorize(actor, contact, "Contact", action)

    async def update_contact(self, actor: Actor, contact_id: UUID, patch: Dict[str, Any]) -> Contact:
        contact = await self.get_contact(actor, contact_id, "update")
        if "team_lead_id" in patch:
            await self._check_team_lead(patch["team_lead_id"])

        before = {name: getattr(contact, name) for name in TRACKED_CHANGES}

        contact = await self.store.update_by_id(Contact, contact_id, patch)
        if contact is None:
            raise NotFoundError("Contact not found")

        details = {"name": contact.name}
        for name in TRACKED_CHANGES:
            if name in patch and patch[name] != before[name]:
                details.update({"changed": name, "from": before[name], "to": patch[name]})
                break

        await self.activity.record(actor.id, "updated_contact", "Contact", contact.id, details)
        return contact

    async def delete_contact(self, actor: Actor, contact_id: UUID) -> DeletionSummary:
        """Delete a contact together with its deals, tasks and appointments"""
        await self.get_contact(actor, contact_id, "delete")

        summary = await CascadeEngine(self.store).delete_contact_cascade(contact_id)

        await self.activity.record(
            actor.id,
            "deleted_contact",
            "Contact",
            contact_id,
            {
                "name": summary.contact_name,
                "deals": summary.deals_deleted,
                "tasks": summary.tasks_deleted,
                "appointments": summary.appointments_deleted,
            }
        )
        return summary
