"""
Activity Log API Endpoints
"""

from typing import List, Sequence

from fastapi import APIRouter, Depends, Query

from bizmanage.database.models import ActivityLog
from bizmanage.database.repository import Storage
from bizmanage.serving.api.dependencies import get_storage
from bizmanage.serving.api.schemas import ActivityWithUser, UserOut

router = APIRouter()


async def with_users(storage: Storage, activities: Sequence[ActivityLog]) -> List[ActivityWithUser]:
    """Attach the acting user (without credentials) to each activity."""
    users = {user.id: user for user in await storage.list_users()}
    enriched = []
    for activity in activities:
        item = ActivityWithUser.model_validate(activity)
        user = users.get(activity.user_id) if activity.user_id else None
        item.user = UserOut.model_validate(user) if user else None
        enriched.append(item)
    return enriched


@router.get("", response_model=List[ActivityWithUser])
async def list_activities(
    limit: int = Query(10, ge=1, le=500),
    storage: Storage = Depends(get_storage),
):
    """Most recent activities first."""
    return await with_users(storage, await storage.list_recent_activities(limit))
