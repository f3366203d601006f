"""
Persistence for the feedback/complaint entity graph.

Every write commits on its own; there is no transaction spanning a child
record and the parent id list it is appended to. Lookups return None for
absent (or malformed) ids rather than raising.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, col, select

from app.models import (
    Attachment,
    Comment,
    CommentReply,
    Complaint,
    ComplaintReply,
    Post,
    User,
    utc_now,
)
from app.logging_config import logger

ModelT = TypeVar("ModelT", bound=SQLModel)


def as_uuid(value: Any) -> Optional[UUID]:
    """Coerce an id to UUID, returning None when it is not one"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_user(user_id: str, users: Dict[str, User], with_email: bool = False) -> Dict[str, Any]:
    user = users.get(user_id)
    data = {"_id": user_id, "name": user.name if user else None}
    if with_email:
        data["email"] = user.email if user else None
    return data


def serialize_attachment(attachment: Optional[Attachment]) -> Optional[Dict[str, Any]]:
    if attachment is None:
        return None
    return {"_id": str(attachment.id), "url": attachment.url, "publicId": attachment.public_id}


def serialize_comment_reply(reply: CommentReply, users: Dict[str, User]) -> Dict[str, Any]:
    return {
        "_id": str(reply.id),
        "content": reply.content,
        "user": serialize_user(reply.user, users),
        "comment": str(reply.comment),
        "createdAt": _timestamp(reply.created_at),
        "updatedAt": _timestamp(reply.updated_at),
    }


def serialize_comment(
    comment: Comment,
    users: Dict[str, User],
    replies: Optional[List[CommentReply]] = None,
) -> Dict[str, Any]:
    return {
        "_id": str(comment.id),
        "content": comment.content,
        "sentiment": _enum_value(comment.sentiment),
        "user": serialize_user(comment.user, users),
        "post": str(comment.post),
        "replies": (
            [serialize_comment_reply(reply, users) for reply in replies]
            if replies is not None
            else list(comment.replies or [])
        ),
        "createdAt": _timestamp(comment.created_at),
        "updatedAt": _timestamp(comment.updated_at),
    }


def serialize_complaint_reply(reply: ComplaintReply, users: Dict[str, User]) -> Dict[str, Any]:
    return {
        "_id": str(reply.id),
        "content": reply.content,
        "userId": serialize_user(reply.user_id, users),
        "complaintId": str(reply.complaint_id),
        "createdAt": _timestamp(reply.created_at),
        "updatedAt": _timestamp(reply.updated_at),
    }


def serialize_complaint(
    complaint: Complaint,
    users: Optional[Dict[str, User]] = None,
    replies: Optional[List[ComplaintReply]] = None,
    include_owner: bool = False,
) -> Dict[str, Any]:
    users = users or {}
    owner: Any = complaint.user_id
    if include_owner:
        owner = serialize_user(complaint.user_id, users, with_email=True)
    return {
        "_id": str(complaint.id),
        "orderId": complaint.order_id,
        "productType": complaint.product_type,
        "description": complaint.description,
        "userId": owner,
        "severity": _enum_value(complaint.severity),
        "status": _enum_value(complaint.status),
        "replies": (
            [serialize_complaint_reply(reply, users) for reply in replies]
            if replies is not None
            else list(complaint.replies or [])
        ),
        "createdAt": _timestamp(complaint.created_at),
        "updatedAt": _timestamp(complaint.updated_at),
    }


class EntityStore:
    """Create/read/update/delete plus relationship-aware reads over one session"""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Generic record access
    # ------------------------------------------------------------------

    async def get(self, model: Type[ModelT], entity_id: Any) -> Optional[ModelT]:
        if model is User:
            return await self.session.get(User, str(entity_id)) if entity_id else None
        key = as_uuid(entity_id)
        if key is None:
            return None
        return await self.session.get(model, key)

    async def save(self, entity: ModelT) -> ModelT:
        """Persist a single record in its own commit"""
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self._commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: SQLModel) -> None:
        await self.session.delete(entity)
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def append_child(self, parent: ModelT, field: str, child_id: Any) -> ModelT:
        """
        Append ``child_id`` to one of the parent's id lists as a separate commit.

        The parent is re-read first so appends made by other requests since it
        was loaded are kept; the re-read and the write are still not atomic.
        """
        await self.session.refresh(parent)
        setattr(parent, field, [*(getattr(parent, field) or []), str(child_id)])
        return await self.save(parent)

    async def get_many(self, model: Type[ModelT], ids: Iterable[Any]) -> List[ModelT]:
        """Fetch records for ``ids`` in the given order, skipping missing ones"""
        keys = [key for key in (as_uuid(i) for i in ids) if key is not None]
        if not keys:
            return []
        result = await self.session.execute(select(model).where(col(model.id).in_(keys)))
        found = {record.id: record for record in result.scalars().all()}
        return [found[key] for key in keys if key in found]

    async def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        wanted = {user_id for user_id in user_ids if user_id}
        if not wanted:
            return {}
        result = await self.session.execute(select(User).where(col(User.id).in_(wanted)))
        return {user.id: user for user in result.scalars().all()}

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_posts(self) -> List[Post]:
        result = await self.session.execute(
            select(Post).order_by(col(Post.created_at).desc(), col(Post.id).desc())
        )
        return list(result.scalars().all())

    async def count_complaints(self, user_id: Optional[str] = None) -> int:
        query = select(func.count()).select_from(Complaint)
        if user_id is not None:
            query = query.where(Complaint.user_id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def list_complaints(
        self,
        user_id: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Complaint]:
        query = select(Complaint)
        if user_id is not None:
            query = query.where(Complaint.user_id == user_id)
        # id breaks timestamp ties so pages never overlap
        query = query.order_by(
            col(Complaint.created_at).desc(), col(Complaint.id).desc()
        ).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Relationship-aware reads
    # ------------------------------------------------------------------

    async def expand_posts(self, posts: Sequence[Post]) -> List[Dict[str, Any]]:
        """Populate author, attachment, comments and comment replies for each post"""
        comments = await self.get_many(
            Comment, [comment_id for post in posts for comment_id in (post.comments or [])]
        )
        replies = await self.get_many(
            CommentReply, [reply_id for comment in comments for reply_id in (comment.replies or [])]
        )
        attachments = await self.get_many(
            Attachment, [post.image for post in posts if post.image is not None]
        )
        users = await self.get_users(
            [post.author for post in posts]
            + [comment.user for comment in comments]
            + [reply.user for reply in replies]
        )

        comments_by_id = {str(comment.id): comment for comment in comments}
        replies_by_id = {str(reply.id): reply for reply in replies}
        attachments_by_id = {attachment.id: attachment for attachment in attachments}

        expanded = []
        for post in posts:
            post_comments = []
            for comment_id in post.comments or []:
                comment = comments_by_id.get(comment_id)
                if comment is None:
                    continue
                comment_replies = [
                    replies_by_id[reply_id]
                    for reply_id in (comment.replies or [])
                    if reply_id in replies_by_id
                ]
                post_comments.append(serialize_comment(comment, users, comment_replies))

            expanded.append({
                "_id": str(post.id),
                "title": post.title,
                "description": post.description,
                "author": serialize_user(post.author, users),
                "likes": post.likes,
                "likedBy": list(post.liked_by or []),
                "comments": post_comments,
                "image": serialize_attachment(attachments_by_id.get(post.image)),
                "createdAt": _timestamp(post.created_at),
                "updatedAt": _timestamp(post.updated_at),
            })
        return expanded

    async def expand_post(self, post: Post) -> Dict[str, Any]:
        return (await self.expand_posts([post]))[0]

    async def expand_complaints(
        self,
        complaints: Sequence[Complaint],
        include_owner: bool = False,
    ) -> List[Dict[str, Any]]:
        """Populate complaint replies (with authors) and optionally the owner"""
        replies = await self.get_many(
            ComplaintReply,
            [reply_id for complaint in complaints for reply_id in (complaint.replies or [])],
        )
        user_ids = [reply.user_id for reply in replies]
        if include_owner:
            user_ids += [complaint.user_id for complaint in complaints]
        users = await self.get_users(user_ids)
        replies_by_id = {str(reply.id): reply for reply in replies}

        expanded = []
        for complaint in complaints:
            complaint_replies = [
                replies_by_id[reply_id]
                for reply_id in (complaint.replies or [])
                if reply_id in replies_by_id
            ]
            expanded.append(
                serialize_complaint(complaint, users, complaint_replies, include_owner=include_owner)
            )
        logger.debug(f"Expanded {len(expanded)} complaints (owner populated: {include_owner})")
        return expanded
