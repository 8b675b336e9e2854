"""
Realty CRM Security
JWT credentials, password hashing and actor resolution
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from uuid import UUID
from jose import JWTError, jwt
from pydantic import BaseModel
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials, APIKeyHeader
import structlog

from .config import settings
from .exceptions import UnauthenticatedError, ForbiddenError
from ..models.users import UserRole

logger = structlog.get_logger()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Credentials arrive as a bearer token or in the dashboard's x-auth-token header
bearer_scheme = HTTPBearer(auto_error=False)
header_scheme = APIKeyHeader(name="x-auth-token", auto_error=False)


class Actor(BaseModel):
    """Authenticated identity performing a request"""
    id: UUID
    role: UserRole

    class Config:
        frozen = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    logger.info("Access token created", user_id=data.get("sub"), expires_at=expire.isoformat())
    return encoded_jwt


def token_for_user(user) -> str:
    """Issue a credential carrying the user's id and role"""
    return create_access_token({"sub": str(user.id), "role": user.role})


def verify_token(token: str) -> Actor:
    """Verify a JWT and resolve it to an actor"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.warning("JWT verification failed", error=str(e))
        raise UnauthenticatedError("Token is not valid")

    try:
        return Actor(id=UUID(str(payload.get("sub"))), role=UserRole(payload.get("role")))
    except ValueError:
        logger.warning("JWT carried malformed identity claims")
        raise UnauthenticatedError("Token is not valid")


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_token: Optional[str] = Depends(header_scheme),
) -> Actor:
    """Resolve the request's credential to an actor"""
    token = credentials.credentials if credentials else auth_token
    if not token:
        raise UnauthenticatedError("No token, authorization denied")
    return verify_token(token)


async def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Admin-only surfaces"""
    if not actor.is_admin:
        raise ForbiddenError("Access denied. Not an admin.")
    return actor


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)
