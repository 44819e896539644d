"""
Branches API Endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from bizmanage.database.repository import Storage
from bizmanage.exceptions import ConflictError, NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import ApiModel, BranchOut, MessageResponse

router = APIRouter()


class BranchCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1)
    phone_number: Optional[str] = None
    manager: Optional[str] = None
    active: bool = True


class BranchUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    address: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    manager: Optional[str] = None
    active: Optional[bool] = None


@router.get("", response_model=List[BranchOut])
async def list_branches(storage: Storage = Depends(get_storage)):
    return await storage.list_branches()


@router.get("/{branch_id}", response_model=BranchOut)
async def get_branch(branch_id: int, storage: Storage = Depends(get_storage)):
    branch = await storage.get_branch(branch_id)
    if branch is None:
        raise NotFoundError("Branch not found")
    return branch


@router.post("", response_model=BranchOut, status_code=status.HTTP_201_CREATED)
async def create_branch(
    body: BranchCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if await storage.get_branch_by_name(body.name):
        raise ConflictError("Branch name already exists", details={"name": body.name})

    branch = await storage.create_branch(body.model_dump())
    await storage.log_activity("Branch created", "branch", branch.id, actor_id)
    return branch


@router.put("/{branch_id}", response_model=BranchOut)
async def update_branch(
    branch_id: int,
    body: BranchUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    branch = await storage.update_branch(branch_id, body.model_dump(exclude_unset=True, exclude_none=True))
    if branch is None:
        raise NotFoundError("Branch not found")
    await storage.log_activity("Branch updated", "branch", branch.id, actor_id)
    return branch


@router.delete("/{branch_id}", response_model=MessageResponse)
async def delete_branch(
    branch_id: int,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if not await storage.delete_branch(branch_id):
        raise NotFoundError("Branch not found")
    await storage.log_activity("Branch deleted", "branch", branch_id, actor_id)
    return MessageResponse(message="Branch deleted")
