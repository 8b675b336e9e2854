"""
Realty CRM User Service
Registration, login and admin user administration
"""

from typing import Any, Dict, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import NotFoundError, UnauthenticatedError, ValidationError
from ..core.security import Actor, get_password_hash, verify_password
from ..models.teams import Team
from ..models.users import User, UserRole
from .record_store import RecordStore
from .authorization import ensure_not_self
from .activity_logger import ActivityLogger

logger = structlog.get_logger()


class UserService:
    """Service for user accounts"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)
        self.activity = ActivityLogger(db)

    async def register(self, name: str, email: str, password: str) -> User:
        """Create a regular user account"""
        email = email.lower()
        if await self.store.find_one(User, email=email):
            raise ValidationError("User already exists", field="email")

        user = await self.store.insert(User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole.USER.value,
        ))
        await self.activity.record(user.id, "registered_user", "User", user.id, {"name": user.name})

        logger.info("User registered", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.store.find_one(User, email=email.lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Authentication failed", email=email)
            raise UnauthenticatedError("Invalid credentials")
        return user

    async def get_user(self, user_id: UUID) -> User:
        user = await self.store.find_by_id(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> List[User]:
        return await self.store.find_many(User, order_by=[User.created_at.asc()])

    async def change_role(self, actor: Actor, user_id: UUID, role: UserRole) -> User:
        user = await self.get_user(user_id)
        if role == UserRole.USER:
            ensure_not_self(actor, user.id, "Admin cannot demote self")

        old_role = user.role
        user = await self.store.update_by_id(User, user.id, {"role": role.value})

        await self.activity.record(
            actor.id,
            "updated_user_role",
            "User",
            user.id,
            {"name": user.name, "from": old_role, "to": user.role}
        )
        return user

    async def delete_user(self, actor: Actor, user_id: UUID) -> Dict[str, Any]:
        """Remove an account; records the user owned are left in place"""
        user = await self.get_user(user_id)
        ensure_not_self(actor, user.id, "You cannot delete your own admin account")
        name = user.name

        # Keep the team's member list in step with the vanishing back-reference
        if user.team_id:
            team = await self.store.find_by_id(Team, user.team_id)
            if team is not None and team.has_member(user.id):
                patch = {"member_ids": [m for m in team.member_ids if m != str(user.id)]}
                if team.leader_id == user.id:
                    patch["leader_id"] = None
                await self.store.update_by_id(Team, team.id, patch)

        await self.store.delete_by_id(User, user.id)
        await self.activity.record(actor.id, "deleted_user", "User", user_id, {"name": name})
        return {"user_id": str(user_id), "name": name}
