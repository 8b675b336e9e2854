"""
Realty CRM Activity Feed Endpoints
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..core.security import Actor, get_current_actor
from ..models.responses import ActivityResponse, with_extras
from ..services.activity_logger import ActivityFeed

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("/", response_model=List[ActivityResponse])
async def list_activities(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Recent activities, newest first"""
    rows = await ActivityFeed(db).recent(actor, limit=settings.activity_feed_limit)
    return [with_extras(ActivityResponse, activity, user_name=name) for activity, name in rows]
