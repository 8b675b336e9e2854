"""
Realty CRM Team Endpoints
Admin-only team and membership management
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Actor, require_admin
from ..models.requests import TeamCreateRequest
from ..models.responses import (
    TeamResponse, TeamDetailResponse, UserSummary, DeletionResponse, with_extras
)
from ..services.team_service import TeamService, TeamView

router = APIRouter(prefix="/teams", tags=["teams"])


def _detail(view: TeamView) -> TeamDetailResponse:
    team, members, leader = view
    return with_extras(
        TeamDetailResponse,
        team,
        members=[UserSummary.model_validate(m) for m in members],
        leader=UserSummary.model_validate(leader) if leader else None,
    )


@router.post("/", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    request: TeamCreateRequest,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a new team"""
    return await TeamService(db).create_team(actor, request.name)


@router.get("/", response_model=List[TeamDetailResponse])
async def list_teams(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All teams with member names"""
    return [_detail(view) for view in await TeamService(db).list_teams()]


@router.get("/{team_id}", response_model=TeamDetailResponse)
async def get_team(
    team_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return _detail(await TeamService(db).get_team(team_id))


@router.delete("/{team_id}", response_model=DeletionResponse)
async def delete_team(
    team_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await TeamService(db).delete_team(actor, team_id)
    return DeletionResponse(message="Team deleted successfully", data=result)


@router.put("/{team_id}/members/{user_id}", response_model=TeamResponse)
async def add_member(
    team_id: UUID,
    user_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Add a user to a team"""
    return await TeamService(db).add_member(actor, team_id, user_id)


@router.delete("/{team_id}/members/{user_id}", response_model=TeamResponse)
async def remove_member(
    team_id: UUID,
    user_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Remove a user from a team"""
    return await TeamService(db).remove_member(actor, team_id, user_id)


@router.put("/{team_id}/leader/{user_id}", response_model=TeamResponse)
async def set_leader(
    team_id: UUID,
    user_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Designate a member as team leader"""
    return await TeamService(db).set_leader(actor, team_id, user_id)
