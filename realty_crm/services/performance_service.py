"""
Realty CRM Performance Service
Deal statistics per user and per team, and the lead-source summary
"""

from typing import Any, Dict, Iterable, List, Union
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import NotFoundError
from ..models.contacts import Contact, LeadSource
from ..models.deals import Deal, DealStage, coerce_deal_value
from ..models.teams import Team
from ..models.users import User
from .record_store import RecordStore

logger = structlog.get_logger()

WON = "won"
LOST = "lost"
OPEN = "open"


def classify_stage(stage) -> str:
    """Won and Lost are terminal; every other stage counts as open"""
    if stage == DealStage.WON.value:
        return WON
    if stage == DealStage.LOST.value:
        return LOST
    return OPEN


def calculate_deal_stats(deals: Iterable) -> Dict[str, Any]:
    """Fold a set of deals into pipeline totals"""
    stats = {
        "total_deals": 0,
        "won_deals": 0,
        "lost_deals": 0,
        "open_deals": 0,
        "total_value": 0.0,
        "won_value": 0.0,
        "open_value": 0.0,
    }

    for deal in deals:
        value = coerce_deal_value(deal.value)
        stats["total_deals"] += 1
        stats["total_value"] += value

        bucket = classify_stage(deal.stage)
        if bucket == WON:
            stats["won_deals"] += 1
            stats["won_value"] += value
        elif bucket == LOST:
            stats["lost_deals"] += 1
        else:
            stats["open_deals"] += 1
            stats["open_value"] += value

    return stats


class PerformanceService:
    """Read-only aggregation across the store"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)

    async def stats_for(self, owners: Union[UUID, Iterable[UUID]]) -> Dict[str, Any]:
        """Stats over the deals owned by one user or a set of users"""
        owner_ids = [owners] if isinstance(owners, UUID) else list(owners)
        if not owner_ids:
            return calculate_deal_stats([])
        deals = await self.store.find_many(Deal, {"owner_id": owner_ids})
        return calculate_deal_stats(deals)

    async def user_performance(self, user_id: UUID) -> Dict[str, Any]:
        user = await self.store.find_by_id(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return {"user": user, "stats": await self.stats_for(user.id)}

    async def _team_performance(self, team: Team, include_members: bool) -> Dict[str, Any]:
        member_ids = team.member_uuids
        result = {
            "team_id": team.id,
            "team_name": team.name,
            "member_count": len(member_ids),
            "stats": await self.stats_for(member_ids),
        }
        if include_members:
            result["members"] = await self.store.find_many(
                User, {"id": member_ids}, order_by=[User.name.asc()]
            ) if member_ids else []
        return result

    async def team_performance(self, team_id: UUID) -> Dict[str, Any]:
        team = await self.store.find_by_id(Team, team_id)
        if team is None:
            raise NotFoundError("Team not found")
        return await self._team_performance(team, include_members=True)

    async def all_teams_performance(self) -> List[Dict[str, Any]]:
        teams = await self.store.find_many(Team, order_by=[Team.name.asc()])
        return [await self._team_performance(team, include_members=False) for team in teams]

    async def lead_source_summary(self) -> List[Dict[str, Any]]:
        """Owned contacts per lead source, largest bucket first.

        Contacts stored without a source fall into the ``Other`` bucket.
        """
        rows = await self.store.group_count(Contact, "lead_source", exclude_null=("owner_id",))

        counts: Dict[str, int] = {}
        for source, count in rows:
            key = source or LeadSource.OTHER.value
            counts[key] = counts.get(key, 0) + count

        summary = [{"source": source, "count": count} for source, count in counts.items()]
        summary.sort(key=lambda item: (-item["count"], item["source"]))
        return summary
