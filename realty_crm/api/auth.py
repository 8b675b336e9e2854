"""
Realty CRM Authentication Endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.database import get_db
from ..core.security import Actor, get_current_actor, token_for_user
from ..models.requests import RegisterRequest, LoginRequest
from ..models.responses import TokenResponse, UserResponse
from ..services.user_service import UserService

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user and return a token"""
    user = await UserService(db).register(request.name, request.email, request.password)
    return TokenResponse(token=token_for_user(user))


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate user and return a token"""
    user = await UserService(db).authenticate(request.email, request.password)
    logger.info("User authenticated successfully", user_id=str(user.id))
    return TokenResponse(token=token_for_user(user))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Get current authenticated user information"""
    return await UserService(db).get_user(actor.id)
