"""
Users API Endpoints

Staff accounts. Passwords are accepted on write and never returned.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field
import structlog

from bizmanage.database.repository import Storage
from bizmanage.exceptions import ConflictError, NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import ApiModel, MessageResponse, UserOut

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class UserCreate(ApiModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=3, max_length=255)
    role: str = "user"
    branch_id: Optional[int] = None
    active: bool = True


class UserUpdate(ApiModel):
    password: Optional[str] = Field(default=None, min_length=6)
    full_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    role: Optional[str] = None
    branch_id: Optional[int] = None
    active: Optional[bool] = None


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[UserOut])
async def list_users(storage: Storage = Depends(get_storage)):
    """List all users."""
    return await storage.list_users()


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int, storage: Storage = Depends(get_storage)):
    user = await storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    """Create a user; usernames are unique."""
    if await storage.get_user_by_username(body.username):
        raise ConflictError("Username already exists", details={"username": body.username})

    user = await storage.create_user(body.model_dump())
    await storage.log_activity("User created", "user", user.id, actor_id)
    logger.info("User created", user_id=user.id, username=user.username)
    return user


@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: int,
    body: UserUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    user = await storage.update_user(user_id, body.model_dump(exclude_unset=True, exclude_none=True))
    if user is None:
        raise NotFoundError("User not found")
    await storage.log_activity("User updated", "user", user.id, actor_id)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if not await storage.delete_user(user_id):
        raise NotFoundError("User not found")
    await storage.log_activity("User deleted", "user", user_id, actor_id)
    return MessageResponse(message="User deleted")
