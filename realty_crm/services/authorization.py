"""
Realty CRM Authorization Policy
Single ownership rule applied by every mutating operation
"""

from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID
import structlog

from ..core.exceptions import ForbiddenError, NotFoundError
from ..core.security import Actor

logger = structlog.get_logger()


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def can_mutate(actor: Actor, owner_id: Optional[UUID]) -> Decision:
    """Admins bypass ownership; everyone else must own the record"""
    if actor.is_admin:
        return Decision.ALLOW
    if owner_id is not None and owner_id == actor.id:
        return Decision.ALLOW
    return Decision.DENY


def ensure_found(record, kind: str):
    if record is None:
        raise NotFoundError(f"{kind} not found")
    return record


def authorize(actor: Actor, record, kind: str, action: str = "modify"):
    """Gate an operation on an existing record.

    Missing records raise NotFoundError before ownership is considered, so
    callers can tell the two apart.
    """
    ensure_found(record, kind)
    if can_mutate(actor, record.owner_id) is Decision.DENY:
        logger.warning(
            "Authorization denied",
            actor_id=str(actor.id),
            kind=kind,
            record_id=str(record.id),
            action=action
        )
        raise ForbiddenError(f"Not authorized to {action} this {kind.lower()}")
    return record


def owner_scope(actor: Actor, column: str = "owner_id") -> Dict[str, Any]:
    """Filter that confines list queries to the actor's own records"""
    if actor.is_admin:
        return {}
    return {column: actor.id}


def ensure_not_self(actor: Actor, target_id: UUID, message: str):
    """Admins may not demote or delete their own account"""
    if target_id == actor.id:
        raise ForbiddenError(message)
