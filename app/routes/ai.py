"""
API routes for AI-drafted support replies
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_ai_service
from app.schemas import AICommentReplyRequest, AIComplaintReplyRequest
from app.security import Actor, get_current_actor
from app.services.ai_service import AIService

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/comment-reply")
async def comment_reply(
    body: AICommentReplyRequest,
    actor: Actor = Depends(get_current_actor),
    ai_service: AIService = Depends(get_ai_service),
):
    """Draft a reply to a comment based on its sentiment"""
    reply = await ai_service.generate_comment_reply(body.sentiment.value, body.description)
    return {"success": True, "reply": reply}


@router.post("/complaint-reply")
async def complaint_reply(
    body: AIComplaintReplyRequest,
    actor: Actor = Depends(get_current_actor),
    ai_service: AIService = Depends(get_ai_service),
):
    """Draft a reply to a complaint based on its severity"""
    reply = await ai_service.generate_complaint_reply(body.severity.value, body.description)
    return {"success": True, "reply": reply}
