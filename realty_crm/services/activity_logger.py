"""
Realty CRM Activity Logger
Append-only audit trail written after each successful mutation
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select
from prometheus_client import Counter
import structlog

from ..core.security import Actor
from ..models.activities import Activity
from ..models.users import User
from .record_store import RecordStore
from .authorization import owner_scope

logger = structlog.get_logger()

ACTIVITY_LOG_FAILURES = Counter(
    'activity_log_failures_total',
    'Activity entries that could not be written',
    ['reason']
)


class ActivityLogger:
    """Records who did what to which record.

    The triggering mutation has already been committed when ``record`` runs.
    Entries are written through a session of their own on the same engine, so
    a failed write never expires the caller's records. Failures are reported
    on the diagnostic channel and never raised.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        user_id: Optional[UUID],
        action_type: Optional[str],
        related_model: Optional[str] = None,
        related_id: Optional[UUID] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not user_id or not action_type:
            ACTIVITY_LOG_FAILURES.labels(reason="missing_fields").inc()
            logger.error(
                "Activity not logged: user_id and action_type are required",
                user_id=str(user_id) if user_id else None,
                action_type=action_type
            )
            return

        activity = Activity(
            user_id=user_id,
            action_type=action_type,
            related_model=related_model,
            related_id=related_id,
            details=details or {},
        )

        session_factory = async_sessionmaker(
            bind=self.db.bind, class_=AsyncSession, expire_on_commit=False
        )
        try:
            async with session_factory() as session:
                session.add(activity)
                await session.commit()
        except Exception as e:
            ACTIVITY_LOG_FAILURES.labels(reason="store_error").inc()
            logger.error(
                "Failed to save activity",
                action_type=action_type,
                user_id=str(user_id),
                error=str(e)
            )


class ActivityFeed:
    """Most recent audit entries with the acting user's name"""

    def __init__(self, db: AsyncSession):
        self.store = RecordStore(db)

    async def recent(self, actor: Actor, limit: int = 50) -> List[Tuple[Activity, Optional[str]]]:
        query = (
            select(Activity, User.name)
            .outerjoin(User, User.id == Activity.user_id)
            .order_by(Activity.timestamp.desc())
            .limit(limit)
        )
        for name, value in owner_scope(actor, column="user_id").items():
            query = query.where(getattr(Activity, name) == value)

        rows = await self.store.execute(Activity, query)
        return [(row[0], row[1]) for row in rows]
