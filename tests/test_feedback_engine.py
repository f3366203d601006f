"""
Tests for posts, comments, replies and likes
"""
from uuid import uuid4
from unittest.mock import AsyncMock

import pytest
from sqlmodel import select

from app.exceptions import ForbiddenError, NotFoundError, UpstreamUnavailableError
from app.models import Attachment, Comment, Role, Sentiment, UNKNOWN_SENTIMENT
from app.security import Actor
from app.services.attachment_store import StoredBlob
from app.services.classification_gateway import Classification
from app.services.feedback_engine import FeedbackEngine
from app.services.sentiment_analyzer import SentimentAnalyzer


@pytest.fixture
def attachments():
    mock_attachments = AsyncMock()
    mock_attachments.remove.return_value = None
    return mock_attachments


@pytest.fixture
def engine(store, gateway, attachments):
    return FeedbackEngine(store, gateway, attachments=attachments, sentiment_analyzer=SentimentAnalyzer())


@pytest.fixture
def second_admin():
    return Actor(user_id="admin-2", role=Role.ADMIN)


async def _comment_rows(session):
    result = await session.execute(select(Comment))
    return list(result.scalars().all())


class TestPosts:
    """Post creation, reads, updates and deletion"""

    @pytest.mark.asyncio
    async def test_create_post(self, engine, admin):
        post = await engine.create_post(admin, "Summer sale", "Everything 20% off")

        assert post["title"] == "Summer sale"
        assert post["author"] == {"_id": "admin-1", "name": "Support Desk"}
        assert post["likes"] == 0
        assert post["likedBy"] == []
        assert post["comments"] == []
        assert post["image"] is None

    @pytest.mark.asyncio
    async def test_create_post_with_attachment(self, engine, admin, session):
        blob = StoredBlob(url="https://cdn.test/banner.png", handle="banner.png")

        post = await engine.create_post(admin, "Summer sale", "Everything 20% off", attachment=blob)

        assert post["image"]["url"] == "https://cdn.test/banner.png"
        assert post["image"]["publicId"] == "banner.png"
        records = (await session.execute(select(Attachment))).scalars().all()
        assert len(records) == 1
        assert records[0].uploaded_by == "admin-1"

    @pytest.mark.asyncio
    async def test_list_posts_newest_first(self, engine, admin):
        for title in ["First", "Second", "Third"]:
            await engine.create_post(admin, title, "Body")

        posts = await engine.list_posts()

        assert [post["title"] for post in posts] == ["Third", "Second", "First"]

    @pytest.mark.asyncio
    async def test_get_post_missing(self, engine):
        with pytest.raises(NotFoundError, match="Post not found"):
            await engine.get_post(uuid4())

    @pytest.mark.asyncio
    async def test_get_post_malformed_id(self, engine):
        with pytest.raises(NotFoundError):
            await engine.get_post("not-a-valid-id")

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, engine, admin):
        created = await engine.create_post(admin, "Summer sale", "Everything 20% off")

        updated = await engine.update_post(created["_id"], admin, title="Winter sale")

        assert updated["title"] == "Winter sale"
        assert updated["description"] == "Everything 20% off"

    @pytest.mark.asyncio
    async def test_update_by_non_author_is_forbidden(self, engine, admin, second_admin):
        created = await engine.create_post(admin, "Summer sale", "Everything 20% off")

        with pytest.raises(ForbiddenError, match="Not authorized to update this post"):
            await engine.update_post(created["_id"], second_admin, title="Hijacked")

        post = await engine.get_post(created["_id"])
        assert post["title"] == "Summer sale"

    @pytest.mark.asyncio
    async def test_update_replaces_attachment(self, engine, admin, attachments, session):
        old_blob = StoredBlob(url="https://cdn.test/old.png", handle="old.png")
        new_blob = StoredBlob(url="https://cdn.test/new.png", handle="new.png")
        created = await engine.create_post(admin, "Summer sale", "Body", attachment=old_blob)

        updated = await engine.update_post(created["_id"], admin, attachment=new_blob)

        assert updated["image"]["publicId"] == "new.png"
        attachments.remove.assert_awaited_once_with("old.png")
        remaining = (await session.execute(select(Attachment))).scalars().all()
        assert [record.public_id for record in remaining] == ["new.png"]

    @pytest.mark.asyncio
    async def test_update_survives_blob_removal_failure(self, engine, admin, attachments):
        attachments.remove.side_effect = UpstreamUnavailableError("Attachment removal failed")
        created = await engine.create_post(
            admin, "Summer sale", "Body",
            attachment=StoredBlob(url="https://cdn.test/old.png", handle="old.png"),
        )

        updated = await engine.update_post(
            created["_id"], admin,
            attachment=StoredBlob(url="https://cdn.test/new.png", handle="new.png"),
        )

        assert updated["image"]["publicId"] == "new.png"

    @pytest.mark.asyncio
    async def test_delete_post_orphans_comments(self, engine, admin, owner, attachments):
        created = await engine.create_post(
            admin, "Summer sale", "Body",
            attachment=StoredBlob(url="https://cdn.test/old.png", handle="old.png"),
        )
        comment = await engine.create_comment(owner, created["_id"], "Great deals!")

        await engine.delete_post(created["_id"], admin)

        with pytest.raises(NotFoundError):
            await engine.get_post(created["_id"])
        attachments.remove.assert_awaited_once_with("old.png")

        # Comments are not cascaded and stay readable by id
        orphan = await engine.get_comment(comment["_id"])
        assert orphan["post"] == created["_id"]

    @pytest.mark.asyncio
    async def test_delete_by_non_author_is_forbidden(self, engine, admin, second_admin):
        created = await engine.create_post(admin, "Summer sale", "Body")

        with pytest.raises(ForbiddenError, match="Not authorized to delete this post"):
            await engine.delete_post(created["_id"], second_admin)

        assert (await engine.get_post(created["_id"]))["_id"] == created["_id"]

    @pytest.mark.asyncio
    async def test_delete_missing_post(self, engine, admin):
        with pytest.raises(NotFoundError):
            await engine.delete_post(uuid4(), admin)


class TestLikes:
    """Like toggling"""

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_state(self, engine, admin, owner):
        created = await engine.create_post(admin, "Summer sale", "Body")

        liked = await engine.toggle_like(created["_id"], owner)
        unliked = await engine.toggle_like(created["_id"], owner)

        assert liked == {"liked": True, "likes": 1}
        assert unliked == {"liked": False, "likes": 0}
        post = await engine.get_post(created["_id"])
        assert post["likedBy"] == []

    @pytest.mark.asyncio
    async def test_likes_match_liked_by(self, engine, admin, owner, other_user):
        created = await engine.create_post(admin, "Summer sale", "Body")

        await engine.toggle_like(created["_id"], owner)
        result = await engine.toggle_like(created["_id"], other_user)

        post = await engine.get_post(created["_id"])
        assert result["likes"] == 2
        assert post["likes"] == len(post["likedBy"])
        assert post["likedBy"] == ["user-1", "user-2"]

    @pytest.mark.asyncio
    async def test_like_missing_post(self, engine, owner):
        with pytest.raises(NotFoundError):
            await engine.toggle_like(uuid4(), owner)


class TestComments:
    """Comment creation, sentiment tagging and replies"""

    @pytest.mark.asyncio
    async def test_create_comment_tags_sentiment(self, engine, admin, owner, gateway):
        created = await engine.create_post(admin, "Summer sale", "Body")

        comment = await engine.create_comment(owner, created["_id"], "Great deals!")

        assert comment["sentiment"] == "Positive"
        assert comment["user"] == {"_id": "user-1", "name": "Jordan"}
        assert comment["post"] == created["_id"]
        assert comment["replies"] == []
        assert gateway.sentiment_calls == ["Great deals!"]

    @pytest.mark.asyncio
    async def test_comments_are_listed_in_creation_order(self, engine, admin, owner, other_user):
        created = await engine.create_post(admin, "Summer sale", "Body")

        first = await engine.create_comment(owner, created["_id"], "First!")
        second = await engine.create_comment(other_user, created["_id"], "Second")

        post = await engine.get_post(created["_id"])
        assert [comment["_id"] for comment in post["comments"]] == [first["_id"], second["_id"]]

    @pytest.mark.asyncio
    async def test_comment_on_missing_post_writes_nothing(self, engine, owner, gateway, session):
        with pytest.raises(NotFoundError, match="Post not found"):
            await engine.create_comment(owner, uuid4(), "Hello?")

        assert await _comment_rows(session) == []
        assert gateway.sentiment_calls == []

    @pytest.mark.asyncio
    async def test_unknown_sentiment_is_resolved_locally(self, store, admin, owner, make_gateway):
        gateway = make_gateway(sentiment=UNKNOWN_SENTIMENT, degraded=True)
        engine = FeedbackEngine(store, gateway)
        created = await engine.create_post(admin, "Summer sale", "Body")

        comment = await engine.create_comment(owner, created["_id"], "I love this, it is wonderful")

        assert comment["sentiment"] == Sentiment.POSITIVE.value

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", [
        Classification(label="Negative"),
        Classification(label="Neutral"),
        Classification.fallback(UNKNOWN_SENTIMENT),
        Classification(label="Ecstatic"),
    ])
    async def test_resolve_sentiment_never_unknown(self, engine, outcome):
        resolved = engine.resolve_sentiment(outcome, "The order number is 1234")

        assert resolved in set(Sentiment)

    @pytest.mark.asyncio
    async def test_resolve_sentiment_trusts_valid_label(self, engine):
        resolved = engine.resolve_sentiment(Classification(label="Negative"), "I love it")

        assert resolved == Sentiment.NEGATIVE

    @pytest.mark.asyncio
    async def test_reply_to_comment(self, engine, admin, owner):
        created = await engine.create_post(admin, "Summer sale", "Body")
        comment = await engine.create_comment(owner, created["_id"], "When does it end?")

        reply = await engine.create_comment_reply(admin, comment["_id"], "Sunday night")

        assert reply["comment"] == comment["_id"]
        assert reply["user"] == {"_id": "admin-1", "name": "Support Desk"}

        fetched = await engine.get_comment(comment["_id"])
        assert [item["content"] for item in fetched["replies"]] == ["Sunday night"]

        post = await engine.get_post(created["_id"])
        assert post["comments"][0]["replies"][0]["_id"] == reply["_id"]

    @pytest.mark.asyncio
    async def test_reply_to_missing_comment(self, engine, owner):
        with pytest.raises(NotFoundError, match="Comment not found"):
            await engine.create_comment_reply(owner, uuid4(), "Hello?")

    @pytest.mark.asyncio
    async def test_get_missing_comment(self, engine):
        with pytest.raises(NotFoundError, match="Comment not found"):
            await engine.get_comment("garbage")
