"""
API routes for comments and comment replies
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_feedback_engine
from app.schemas import CommentCreate, CommentReplyCreate
from app.security import Actor, get_current_actor
from app.services.feedback_engine import FeedbackEngine

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", status_code=201)
async def create_comment(
    body: CommentCreate,
    actor: Actor = Depends(get_current_actor),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    """Comment on a post; sentiment is tagged automatically"""
    comment = await engine.create_comment(actor, body.post_id, body.content)
    return {"success": True, "comment": comment}


@router.post("/replies", status_code=201)
async def create_comment_reply(
    body: CommentReplyCreate,
    actor: Actor = Depends(get_current_actor),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    reply = await engine.create_comment_reply(actor, body.comment_id, body.content)
    return {"success": True, "reply": reply}


@router.get("/{comment_id}")
async def get_comment(
    comment_id: str,
    actor: Actor = Depends(get_current_actor),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    """Fetch a comment by id, including comments whose post was deleted"""
    comment = await engine.get_comment(comment_id)
    return {"success": True, "comment": comment}
