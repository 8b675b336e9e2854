"""
Realty CRM Team Service
Team records and the two-sided membership relation (Team.member_ids / User.team_id)
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import NotFoundError, ValidationError
from ..core.security import Actor
from ..models.teams import Team
from ..models.users import User
from .record_store import RecordStore
from .activity_logger import ActivityLogger

logger = structlog.get_logger()

TeamView = Tuple[Team, List[User], Optional[User]]


class TeamService:
    """Admin-only team management.

    Membership changes write the Team row and the User row separately; an
    interruption between the two leaves the sides out of step until the
    operation is repeated.
    """

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)
        self.activity = ActivityLogger(db)

    async def _team_and_user(self, team_id: UUID, user_id: UUID) -> Tuple[Team, User]:
        team = await self.store.find_by_id(Team, team_id)
        user = await self.store.find_by_id(User, user_id)
        if team is None or user is None:
            raise NotFoundError("Team or User not found")
        return team, user

    async def _view(self, team: Team) -> TeamView:
        members = []
        if team.member_ids:
            members = await self.store.find_many(
                User, {"id": team.member_uuids}, order_by=[User.name.asc()]
            )
        leader = next((m for m in members if m.id == team.leader_id), None)
        if leader is None and team.leader_id:
            leader = await self.store.find_by_id(User, team.leader_id)
        return team, members, leader

    async def create_team(self, actor: Actor, name: str) -> Team:
        if await self.store.find_one(Team, name=name):
            raise ValidationError("Team with this name already exists", field="name")

        team = await self.store.insert(Team(name=name, member_ids=[]))
        await self.activity.record(actor.id, "created_team", "Team", team.id, {"name": team.name})

        logger.info("Team created", team_id=str(team.id), name=team.name)
        return team

    async def list_teams(self) -> List[TeamView]:
        teams = await self.store.find_many(Team, order_by=[Team.name.asc()])
        return [await self._view(team) for team in teams]

    async def get_team(self, team_id: UUID) -> TeamView:
        team = await self.store.find_by_id(Team, team_id)
        if team is None:
            raise NotFoundError("Team not found")
        return await self._view(team)

    async def add_member(self, actor: Actor, team_id: UUID, user_id: UUID) -> Team:
        """Put a user on a team, moving them off any previous team"""
        team, user = await self._team_and_user(team_id, user_id)

        previous_team_id = user.team_id
        if previous_team_id and previous_team_id != team.id:
            previous = await self.store.find_by_id(Team, previous_team_id)
            if previous is not None:
                await self._drop_member(previous, user.id)

        if not team.has_member(user.id):
            team = await self.store.update_by_id(
                Team, team.id, {"member_ids": list(team.member_ids or []) + [str(user.id)]}
            )
        await self.store.update_by_id(User, user.id, {"team_id": team.id})

        await self.activity.record(
            actor.id,
            "added_team_member",
            "Team",
            team.id,
            {"team": team.name, "member": user.name, "memberId": str(user.id)}
        )
        return team

    async def _drop_member(self, team: Team, user_id: UUID) -> Team:
        patch: Dict[str, Any] = {
            "member_ids": [m for m in (team.member_ids or []) if m != str(user_id)]
        }
        if team.leader_id == user_id:
            patch["leader_id"] = None
        return await self.store.update_by_id(Team, team.id, patch)

    async def remove_member(self, actor: Actor, team_id: UUID, user_id: UUID) -> Team:
        team, user = await self._team_and_user(team_id, user_id)

        team = await self._drop_member(team, user.id)
        if user.team_id is None or user.team_id == team.id:
            await self.store.update_by_id(User, user.id, {"team_id": None})

        await self.activity.record(
            actor.id,
            "removed_team_member",
            "Team",
            team.id,
            {"team": team.name, "member": user.name, "memberId": str(user.id)}
        )
        return team

    async def set_leader(self, actor: Actor, team_id: UUID, user_id: UUID) -> Team:
        team, user = await self._team_and_user(team_id, user_id)
        if not team.has_member(user.id):
            raise ValidationError("Team leader must be a member of the team", field="userId")

        previous = team.leader_id
        team = await self.store.update_by_id(Team, team.id, {"leader_id": user.id})

        await self.activity.record(
            actor.id,
            "set_team_leader",
            "Team",
            team.id,
            {"team": team.name, "from": str(previous) if previous else None, "to": str(user.id)}
        )
        return team

    async def delete_team(self, actor: Actor, team_id: UUID) -> Dict[str, Any]:
        """Delete a team and clear the back-reference on each member"""
        team = await self.store.find_by_id(Team, team_id)
        if team is None:
            raise NotFoundError("Team not found")
        name = team.name

        members = await self.store.find_many(User, {"team_id": team.id})
        for member in members:
            await self.store.update_by_id(User, member.id, {"team_id": None})
        await self.store.delete_by_id(Team, team.id)

        await self.activity.record(
            actor.id, "deleted_team", "Team", team_id, {"name": name, "members": len(members)}
        )
        return {"team_id": str(team_id), "name": name, "members_released": len(members)}
