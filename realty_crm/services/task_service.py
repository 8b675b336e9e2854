"""
Realty CRM Task Service
"""

from typing import Any, Dict, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import NotFoundError
from ..core.security import Actor
from ..models.contacts import Contact
from ..models.tasks import Task
from .record_store import RecordStore
from .authorization import authorize
from .activity_logger import ActivityLogger

logger = structlog.get_logger()


class TaskService:
    """Follow-up tasks hanging off a contact"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)
        self.activity = ActivityLogger(db)

    async def _contact(self, actor: Actor, contact_id: UUID, action: str) -> Contact:
        contact = await self.store.find_by_id(Contact, contact_id)
        if contact is None:
            raise NotFoundError("Associated contact not found")
        return authorize(actor, contact, "Contact", action)

    async def list_for_contact(self, actor: Actor, contact_id: UUID) -> List[Task]:
        await self._contact(actor, contact_id, "view tasks for")
        return await self.store.find_many(
            Task,
            {"contact_id": contact_id},
            order_by=[Task.created_at.desc()]
        )

    async def create_task(self, actor: Actor, contact_id: UUID, fields: Dict[str, Any]) -> Task:
        contact = await self._contact(actor, contact_id, "add tasks to")
        task = await self.store.insert(Task(owner_id=actor.id, contact_id=contact_id, **fields))

        await self.activity.record(
            actor.id,
            "created_task",
            "Task",
            task.id,
            {"content": task.content, "contactName": contact.name}
        )
        return task

    async def get_task(self, actor: Actor, task_id: UUID, action: str = "view") -> Task:
        task = await self.store.find_by_id(Task, task_id)
        return authorize(actor, task, "Task", action)

    async def update_task(self, actor: Actor, task_id: UUID, patch: Dict[str, Any]) -> Task:
        task = await self.get_task(actor, task_id, "update")
        was_completed = task.is_completed

        task = await self.store.update_by_id(Task, task_id, patch)
        if task is None:
            raise NotFoundError("Task not found")

        details = {"content": task.content}
        if "is_completed" in patch and patch["is_completed"] != was_completed:
            details.update({"changed": "isCompleted", "from": was_completed, "to": task.is_completed})

        await self.activity.record(actor.id, "updated_task", "Task", task.id, details)
        return task

    async def delete_task(self, actor: Actor, task_id: UUID) -> Dict[str, Any]:
        task = await self.get_task(actor, task_id, "delete")
        content = task.content

        if not await self.store.delete_by_id(Task, task_id):
            raise NotFoundError("Task not found")

        await self.activity.record(actor.id, "deleted_task", "Task", task_id, {"content": content})
        return {"task_id": str(task_id)}
