"""
API routes for complaints and complaint replies
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_complaint_manager
from app.schemas import ComplaintCreate, ComplaintReplyCreate
from app.security import Actor, get_current_actor, require_admin
from app.services.complaint_manager import ComplaintLifecycleManager

router = APIRouter(prefix="/complaints", tags=["complaints"])


@router.post("", status_code=201)
async def raise_complaint(
    body: ComplaintCreate,
    actor: Actor = Depends(get_current_actor),
    manager: ComplaintLifecycleManager = Depends(get_complaint_manager),
):
    complaint = await manager.raise_complaint(
        actor, body.order_id, body.product_type, body.description
    )
    return {"success": True, "message": "Complaint raised successfully", "complaint": complaint}


@router.get("/user")
async def get_user_complaints(
    # Raw strings: malformed values fall back to defaults instead of a 400
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    manager: ComplaintLifecycleManager = Depends(get_complaint_manager),
):
    """Get the current user's complaints, paginated"""
    result = await manager.get_user_complaints(actor, page, limit)
    return {"success": True, **result}


@router.get("/all")
async def get_all_complaints(
    actor: Actor = Depends(require_admin),
    manager: ComplaintLifecycleManager = Depends(get_complaint_manager),
):
    """Get every complaint with owner details (admin only)"""
    complaints = await manager.get_all_complaints(actor)
    return {"success": True, "count": len(complaints), "complaints": complaints}


@router.patch("/{complaint_id}/close")
async def close_complaint(
    complaint_id: str,
    actor: Actor = Depends(get_current_actor),
    manager: ComplaintLifecycleManager = Depends(get_complaint_manager),
):
    complaint = await manager.close_complaint(complaint_id, actor)
    return {"success": True, "message": "Complaint closed successfully", "complaint": complaint}


@router.post("/replies", status_code=201)
async def create_complaint_reply(
    body: ComplaintReplyCreate,
    actor: Actor = Depends(get_current_actor),
    manager: ComplaintLifecycleManager = Depends(get_complaint_manager),
):
    reply = await manager.create_complaint_reply(actor, body.complaint_id, body.content)
    return {"success": True, "reply": reply}
