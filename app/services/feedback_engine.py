"""
Posts, sentiment-tagged comments, comment replies and likes
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.exceptions import NotFoundError
from app.models import Attachment, Comment, CommentReply, Post, Sentiment, UNKNOWN_SENTIMENT
from app.security import Actor, ensure_owner
from app.services.attachment_store import AttachmentStore, StoredBlob
from app.services.classification_gateway import Classification, ClassificationGateway
from app.services.entity_store import EntityStore, serialize_comment, serialize_comment_reply
from app.services.sentiment_analyzer import SentimentAnalyzer
from app.logging_config import logger


class FeedbackEngine:
    """Orchestrates the post/comment graph on top of the entity store"""

    def __init__(
        self,
        store: EntityStore,
        gateway: ClassificationGateway,
        attachments: Optional[AttachmentStore] = None,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
    ):
        """
        Args:
            store: Entity store bound to the request's session
            gateway: Classifier used to tag comment sentiment
            attachments: Blob storage for post images; removals are skipped without it
            sentiment_analyzer: Local classifier resolving ``Unknown`` sentiment
        """
        self.store = store
        self.gateway = gateway
        self.attachments = attachments
        self.sentiment_analyzer = sentiment_analyzer or SentimentAnalyzer()

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def create_post(
        self,
        actor: Actor,
        title: str,
        description: str,
        attachment: Optional[StoredBlob] = None,
    ) -> Dict[str, Any]:
        image_id = None
        if attachment is not None:
            image = await self.store.save(Attachment(
                url=attachment.url,
                public_id=attachment.handle,
                uploaded_by=actor.user_id,
            ))
            image_id = image.id

        post = await self.store.save(Post(
            title=title,
            description=description,
            author=actor.user_id,
            image=image_id,
        ))
        logger.info(f"Post {post.id} created by {actor.user_id}")
        return await self.store.expand_post(post)

    async def list_posts(self) -> List[Dict[str, Any]]:
        posts = await self.store.list_posts()
        return await self.store.expand_posts(posts)

    async def get_post(self, post_id: Any) -> Dict[str, Any]:
        post = await self._require_post(post_id)
        return await self.store.expand_post(post)

    async def update_post(
        self,
        post_id: Any,
        actor: Actor,
        title: Optional[str] = None,
        description: Optional[str] = None,
        attachment: Optional[StoredBlob] = None,
    ) -> Dict[str, Any]:
        post = await self.ensure_post_owner(post_id, actor, "Not authorized to update this post")

        if attachment is not None:
            previous_image = post.image
            image = await self.store.save(Attachment(
                url=attachment.url,
                public_id=attachment.handle,
                uploaded_by=actor.user_id,
            ))
            post.image = image.id
            if previous_image is not None:
                await self._discard_attachment(previous_image)

        if title is not None:
            post.title = title
        if description is not None:
            post.description = description

        post = await self.store.save(post)
        logger.info(f"Post {post.id} updated by {actor.user_id}")
        return await self.store.expand_post(post)

    async def delete_post(self, post_id: Any, actor: Actor) -> None:
        """Delete a post and its attachment; its comments are left in place"""
        post = await self.ensure_post_owner(post_id, actor, "Not authorized to delete this post")

        orphaned = len(post.comments or [])
        if post.image is not None:
            await self._discard_attachment(post.image)

        await self.store.delete(post)
        logger.info(f"Post {post_id} deleted by {actor.user_id}, {orphaned} comments left orphaned")

    async def toggle_like(self, post_id: Any, actor: Actor) -> Dict[str, Any]:
        """
        Like the post, or unlike it if the actor already does.

        Read-modify-write without concurrency control: two concurrent toggles
        can both start from the same ``liked_by`` and one update is lost.
        """
        post = await self._require_post(post_id)

        liked_by = list(post.liked_by or [])
        has_liked = actor.user_id in liked_by
        if has_liked:
            liked_by.remove(actor.user_id)
        else:
            liked_by.append(actor.user_id)

        post.liked_by = liked_by
        post.likes = len(liked_by)
        post = await self.store.save(post)

        return {"liked": not has_liked, "likes": post.likes}

    # ------------------------------------------------------------------
    # Comments and replies
    # ------------------------------------------------------------------

    async def create_comment(self, actor: Actor, post_id: Any, content: str) -> Dict[str, Any]:
        post = await self._require_post(post_id)

        outcome = await self.gateway.classify_sentiment_outcome(content)
        sentiment = self.resolve_sentiment(outcome, content)

        comment = await self.store.save(Comment(
            content=content,
            sentiment=sentiment,
            user=actor.user_id,
            post=post.id,
        ))
        await self.store.append_child(post, "comments", comment.id)

        logger.info(
            f"Comment {comment.id} on post {post.id} tagged {sentiment.value}"
            f"{' (local fallback)' if outcome.degraded else ''}"
        )
        users = await self.store.get_users([actor.user_id])
        return serialize_comment(comment, users, [])

    async def get_comment(self, comment_id: Any) -> Dict[str, Any]:
        comment = await self.store.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        replies = await self.store.get_many(CommentReply, comment.replies or [])
        users = await self.store.get_users([comment.user] + [reply.user for reply in replies])
        return serialize_comment(comment, users, replies)

    async def create_comment_reply(self, actor: Actor, comment_id: Any, content: str) -> Dict[str, Any]:
        comment = await self.store.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")

        reply = await self.store.save(CommentReply(
            content=content,
            user=actor.user_id,
            comment=comment.id,
        ))
        await self.store.append_child(comment, "replies", reply.id)

        users = await self.store.get_users([actor.user_id])
        return serialize_comment_reply(reply, users)

    def resolve_sentiment(self, outcome: Classification, content: str) -> Sentiment:
        """Collapse a classifier outcome to a persistable label"""
        if outcome.label != UNKNOWN_SENTIMENT:
            try:
                return Sentiment(outcome.label)
            except ValueError:
                logger.warning(f"Classifier produced unexpected label {outcome.label!r}")
        return self.sentiment_analyzer.label(content)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def ensure_post_owner(self, post_id: Any, actor: Actor, message: str) -> Post:
        """Raise NotFoundError/ForbiddenError unless ``actor`` authored the post"""
        post = await self._require_post(post_id)
        ensure_owner(actor, post.author, message)
        return post

    async def _require_post(self, post_id: Any) -> Post:
        post = await self.store.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def _discard_attachment(self, attachment_id: UUID) -> None:
        """Best-effort removal of a stored attachment and its record"""
        image = await self.store.get(Attachment, attachment_id)
        if image is None:
            return

        if self.attachments is not None:
            try:
                await self.attachments.remove(image.public_id)
            except Exception as e:
                logger.warning(f"Could not remove attachment blob {image.public_id}: {str(e)}")

        try:
            await self.store.delete(image)
        except Exception as e:
            logger.warning(f"Could not delete attachment record {attachment_id}: {str(e)}")
