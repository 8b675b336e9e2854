"""
Realty CRM Deal Service
Deal pipeline management
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import aliased
import structlog

from ..core.exceptions import NotFoundError
from ..core.security import Actor
from ..models.deals import Deal, coerce_deal_value
from ..models.contacts import Contact
from ..models.users import User
from .record_store import RecordStore
from .authorization import authorize, owner_scope
from .activity_logger import ActivityLogger

logger = structlog.get_logger()

DealRow = Tuple[Deal, Optional[str], Optional[str]]


class DealService:
    """Service for deal pipeline management"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)
        self.activity = ActivityLogger(db)

    async def _contact_name(self, contact_id: UUID) -> str:
        contact = await self.store.find_by_id(Contact, contact_id)
        return contact.name if contact else "N/A"

    async def create_deal(self, actor: Actor, fields: Dict[str, Any]) -> Deal:
        """Create a deal; the actor must have rights over the contact"""
        contact = await self.store.find_by_id(Contact, fields["contact_id"])
        if contact is None:
            raise NotFoundError("Associated contact not found")
        authorize(actor, contact, "Contact", "add deals to")

        fields = dict(fields, value=coerce_deal_value(fields.get("value")))
        deal = await self.store.insert(Deal(owner_id=actor.id, **fields))

        await self.activity.record(
            actor.id,
            "created_deal",
            "Deal",
            deal.id,
            {"name": deal.name, "contactName": contact.name, "value": deal.numeric_value}
        )

        logger.info(
            "Deal created",
            deal_id=str(deal.id),
            contact_id=str(contact.id),
            value=deal.numeric_value,
            stage=deal.stage
        )
        return deal

    async def list_deals(self, actor: Actor, stage: Optional[str] = None) -> List[DealRow]:
        """Deals visible to the actor with contact and owner names, newest first"""
        owner = aliased(User)
        query = (
            select(Deal, Contact.name, owner.name)
            .outerjoin(Contact, Contact.id == Deal.contact_id)
            .outerjoin(owner, owner.id == Deal.owner_id)
            .order_by(Deal.created_at.desc())
        )
        for name, value in owner_scope(actor).items():
            query = query.where(getattr(Deal, name) == value)
        if stage:
            query = query.where(Deal.stage == stage)

        rows = await self.store.execute(Deal, query)
        return [(row[0], row[1], row[2]) for row in rows]

    async def get_deal(self, actor: Actor, deal_id: UUID, action: str = "view") -> Deal:
        deal = await self.store.find_by_id(Deal, deal_id)
        return authorize(actor, deal, "Deal", action)

    async def update_deal(self, actor: Actor, deal_id: UUID, patch: Dict[str, Any]) -> Deal:
        deal = await self.get_deal(actor, deal_id, "update")
        old_stage = deal.stage

        if "value" in patch:
            patch["value"] = coerce_deal_value(patch["value"])

        deal = await self.store.update_by_id(Deal, deal_id, patch)
        if deal is None:
            raise NotFoundError("Deal not found")

        details = {"name": deal.name, "contactName": await self._contact_name(deal.contact_id)}
        if "stage" in patch and patch["stage"] != old_stage:
            details.update({"from": old_stage, "to": patch["stage"]})
            await self.activity.record(actor.id, "updated_deal_stage", "Deal", deal.id, details)
            logger.info("Deal stage changed", deal_id=str(deal.id), old_stage=old_stage, new_stage=deal.stage)
        else:
            await self.activity.record(actor.id, "updated_deal", "Deal", deal.id, details)

        return deal

    async def delete_deal(self, actor: Actor, deal_id: UUID) -> Dict[str, Any]:
        deal = await self.get_deal(actor, deal_id, "delete")
        details = {"name": deal.name, "contactName": await self._contact_name(deal.contact_id)}

        if not await self.store.delete_by_id(Deal, deal_id):
            raise NotFoundError("Deal not found")

        await self.activity.record(actor.id, "deleted_deal", "Deal", deal_id, details)
        return {"deal_id": str(deal_id), "name": details["name"]}
