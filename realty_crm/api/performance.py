"""
Realty CRM Performance Endpoints
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Actor, get_current_actor, require_admin
from ..models.responses import (
    DealStats,
    LeadSourceCount,
    TeamPerformanceResponse,
    UserPerformanceResponse,
    UserResponse,
    UserSummary,
)
from ..services.performance_service import PerformanceService
from ..services.user_service import UserService

router = APIRouter(prefix="/performance", tags=["performance"])


def _team_response(result: dict) -> TeamPerformanceResponse:
    members = result.get("members")
    return TeamPerformanceResponse(
        team_id=result["team_id"],
        team_name=result["team_name"],
        member_count=result["member_count"],
        members=[UserSummary.model_validate(m) for m in members] if members is not None else None,
        stats=DealStats(**result["stats"]),
    )


@router.get("/me", response_model=UserPerformanceResponse)
async def my_performance(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Stats for the logged-in user's own deals"""
    user = await UserService(db).get_user(actor.id)
    stats = await PerformanceService(db).stats_for(actor.id)
    return UserPerformanceResponse(user=UserResponse.model_validate(user), stats=DealStats(**stats))


@router.get("/users/{user_id}", response_model=UserPerformanceResponse)
async def user_performance(
    user_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await PerformanceService(db).user_performance(user_id)
    return UserPerformanceResponse(
        user=UserResponse.model_validate(result["user"]),
        stats=DealStats(**result["stats"])
    )


@router.get("/teams", response_model=List[TeamPerformanceResponse])
async def all_teams_performance(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Stats aggregated per team"""
    return [_team_response(r) for r in await PerformanceService(db).all_teams_performance()]


@router.get("/teams/{team_id}", response_model=TeamPerformanceResponse)
async def team_performance(
    team_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return _team_response(await PerformanceService(db).team_performance(team_id))


@router.get("/lead-source-summary", response_model=List[LeadSourceCount])
async def lead_source_summary(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Contact counts per lead source"""
    return [LeadSourceCount(**item) for item in await PerformanceService(db).lead_source_summary()]
