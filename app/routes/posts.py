"""
API routes for posts and likes
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.dependencies import get_attachment_store, get_feedback_engine
from app.schemas import PostCreate, PostUpdate, parse_form
from app.security import Actor, get_current_actor, require_admin
from app.services.attachment_store import AttachmentStore, StoredBlob
from app.services.feedback_engine import FeedbackEngine

router = APIRouter(prefix="/posts", tags=["posts"])


async def _store_upload(image: Optional[UploadFile], attachments: AttachmentStore) -> Optional[StoredBlob]:
    if image is None or not image.filename:
        return None
    data = await image.read()
    return await attachments.upload(data, image.filename, image.content_type)


@router.post("", status_code=201)
async def create_post(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    actor: Actor = Depends(require_admin),
    engine: FeedbackEngine = Depends(get_feedback_engine),
    attachments: AttachmentStore = Depends(get_attachment_store),
):
    """Create a post, uploading its image first when one is attached"""
    fields = parse_form(PostCreate, title=title, description=description)
    blob = await _store_upload(image, attachments)
    post = await engine.create_post(actor, fields.title, fields.description, attachment=blob)
    return {"success": True, "post": post}


@router.get("")
async def get_posts(
    actor: Actor = Depends(get_current_actor),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    """Get all posts with comments and replies populated, newest first"""
    posts = await engine.list_posts()
    return {"success": True, "count": len(posts), "posts": posts}


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    actor: Actor = Depends(get_current_actor),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    post = await engine.get_post(post_id)
    return {"success": True, "post": post}


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    actor: Actor = Depends(require_admin),
    engine: FeedbackEngine = Depends(get_feedback_engine),
    attachments: AttachmentStore = Depends(get_attachment_store),
):
    """Update title/description and optionally replace the image"""
    fields = parse_form(PostUpdate, title=title, description=description)
    # Ownership is checked before anything is uploaded
    await engine.ensure_post_owner(post_id, actor, "Not authorized to update this post")
    blob = await _store_upload(image, attachments)
    post = await engine.update_post(
        post_id,
        actor,
        title=fields.title,
        description=fields.description,
        attachment=blob,
    )
    return {"success": True, "message": "Post updated successfully", "post": post}


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    actor: Actor = Depends(require_admin),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    await engine.delete_post(post_id, actor)
    return {"success": True, "message": "Post deleted successfully"}


@router.put("/{post_id}/like")
async def toggle_like(
    post_id: str,
    actor: Actor = Depends(get_current_actor),
    engine: FeedbackEngine = Depends(get_feedback_engine),
):
    """Like or unlike a post"""
    result = await engine.toggle_like(post_id, actor)
    return {"success": True, **result}
