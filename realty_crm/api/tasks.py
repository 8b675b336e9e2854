"""
Realty CRM Task Endpoints
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Actor, get_current_actor
from ..models.requests import TaskCreateRequest, TaskUpdateRequest
from ..models.responses import TaskResponse, DeletionResponse
from ..services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/contact/{contact_id}", response_model=List[TaskResponse])
async def list_contact_tasks(
    contact_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Get all tasks for a specific contact"""
    return await TaskService(db).list_for_contact(actor, contact_id)


@router.post("/contact/{contact_id}", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    contact_id: UUID,
    request: TaskCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Create a task for a contact"""
    return await TaskService(db).create_task(actor, contact_id, request.to_fields())


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    return await TaskService(db).get_task(actor, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    request: TaskUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Update a task (e.g. mark as complete)"""
    return await TaskService(db).update_task(actor, task_id, request.to_patch())


@router.delete("/{task_id}", response_model=DeletionResponse)
async def delete_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    result = await TaskService(db).delete_task(actor, task_id)
    return DeletionResponse(message="Task removed", data=result)
