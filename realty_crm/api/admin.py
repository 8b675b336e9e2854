"""
Realty CRM Admin Endpoints
User administration
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Actor, require_admin
from ..models.requests import RoleUpdateRequest
from ..models.responses import UserResponse, DeletionResponse
from ..services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Get all users"""
    return await UserService(db).list_users()


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user_role(
    user_id: UUID,
    request: RoleUpdateRequest,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Change a user's role"""
    return await UserService(db).change_role(actor, user_id, request.role)


@router.delete("/users/{user_id}", response_model=DeletionResponse)
async def delete_user(
    user_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a user"""
    result = await UserService(db).delete_user(actor, user_id)
    return DeletionResponse(message="User deleted successfully", data=result)
