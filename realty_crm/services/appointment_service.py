"""
Realty CRM Appointment Service
Site visits and meetings booked against contacts
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import aliased
import structlog

from ..core.exceptions import NotFoundError
from ..core.security import Actor
from ..models.appointments import Appointment
from ..models.contacts import Contact
from ..models.users import User
from .record_store import RecordStore
from .authorization import authorize, owner_scope
from .activity_logger import ActivityLogger

logger = structlog.get_logger()

AppointmentRow = Tuple[Appointment, Optional[str], Optional[str]]


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


class AppointmentService:
    """Service for appointment scheduling"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)
        self.activity = ActivityLogger(db)

    async def _contact(self, actor: Actor, contact_id: UUID, action: str) -> Contact:
        contact = await self.store.find_by_id(Contact, contact_id)
        if contact is None:
            raise NotFoundError("Associated contact not found")
        return authorize(actor, contact, "Contact", action)

    async def _contact_name(self, contact_id: UUID) -> str:
        contact = await self.store.find_by_id(Contact, contact_id)
        return contact.name if contact else "N/A"

    def _listing(self):
        owner = aliased(User)
        return (
            select(Appointment, Contact.name, owner.name)
            .outerjoin(Contact, Contact.id == Appointment.contact_id)
            .outerjoin(owner, owner.id == Appointment.owner_id)
        )

    async def create_appointment(self, actor: Actor, fields: Dict[str, Any]) -> Appointment:
        contact = await self._contact(actor, fields["contact_id"], "create appointments for")
        appointment = await self.store.insert(Appointment(owner_id=actor.id, **fields))

        await self.activity.record(
            actor.id,
            "created_appointment",
            "Appointment",
            appointment.id,
            {
                "contactName": contact.name,
                "title": appointment.title,
                "time": _iso(appointment.appointment_time),
            }
        )
        return appointment

    async def list_appointments(self, actor: Actor) -> List[AppointmentRow]:
        """Actor's appointments (all for admins), soonest first"""
        query = self._listing().order_by(Appointment.appointment_time.asc())
        for name, value in owner_scope(actor).items():
            query = query.where(getattr(Appointment, name) == value)
        rows = await self.store.execute(Appointment, query)
        return [(row[0], row[1], row[2]) for row in rows]

    async def list_for_contact(self, actor: Actor, contact_id: UUID) -> List[AppointmentRow]:
        """Appointment history of one contact, most recent first"""
        await self._contact(actor, contact_id, "view appointments for")
        query = (
            self._listing()
            .where(Appointment.contact_id == contact_id)
            .order_by(Appointment.appointment_time.desc())
        )
        rows = await self.store.execute(Appointment, query)
        return [(row[0], row[1], row[2]) for row in rows]

    async def get_appointment(self, actor: Actor, appointment_id: UUID, action: str = "view") -> Appointment:
        appointment = await self.store.find_by_id(Appointment, appointment_id)
        return authorize(actor, appointment, "Appointment", action)

    async def update_appointment(self, actor: Actor, appointment_id: UUID, patch: Dict[str, Any]) -> Appointment:
        appointment = await self.get_appointment(actor, appointment_id, "update")
        old_status = appointment.status

        appointment = await self.store.update_by_id(Appointment, appointment_id, patch)
        if appointment is None:
            raise NotFoundError("Appointment not found")

        details = {
            "contactName": await self._contact_name(appointment.contact_id),
            "title": appointment.title,
        }
        if "status" in patch and patch["status"] != old_status:
            details.update({"from": old_status, "to": patch["status"]})
            await self.activity.record(
                actor.id, "updated_appointment_status", "Appointment", appointment.id, details
            )
        else:
            await self.activity.record(actor.id, "updated_appointment", "Appointment", appointment.id, details)

        return appointment

    async def delete_appointment(self, actor: Actor, appointment_id: UUID) -> Dict[str, Any]:
        appointment = await self.get_appointment(actor, appointment_id, "delete")
        details = {
            "contactName": await self._contact_name(appointment.contact_id),
            "title": appointment.title,
            "time": _iso(appointment.appointment_time),
        }

        if not await self.store.delete_by_id(Appointment, appointment_id):
            raise NotFoundError("Appointment not found")

        await self.activity.record(actor.id, "deleted_appointment", "Appointment", appointment_id, details)
        return {"appointment_id": str(appointment_id)}
