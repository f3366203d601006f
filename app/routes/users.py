"""
API routes for the current user's profile
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_entity_store
from app.exceptions import NotFoundError
from app.models import User
from app.security import Actor, get_current_actor
from app.services.entity_store import EntityStore

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile")
async def get_profile(
    actor: Actor = Depends(get_current_actor),
    store: EntityStore = Depends(get_entity_store),
):
    user = await store.get(User, actor.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return {
        "success": True,
        "user": {
            "_id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
        },
    }
