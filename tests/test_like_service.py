import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from vidtube.web.app.errors import InternalError, InvalidIdentifier, NotFound
from vidtube.web.app.models import Comment, Like, Tweet
from vidtube.web.app.services.like_service import LikeService
from vidtube.web.app.services.toggle import toggle_pair


@pytest.fixture
def like_service(db_session):
    return LikeService(db_session)


async def like_count(db_session, **criteria):
    stmt = select(func.count()).select_from(Like).where(
        *(getattr(Like, column) == value for column, value in criteria.items())
    )
    return await db_session.scalar(stmt)


class TestLikeService:
    """Test cases for LikeService."""

    @pytest.mark.asyncio
    async def test_toggle_video_like_parity(self, like_service, alice_video, bob, db_session):
        for call in range(1, 5):
            liked = await like_service.toggle_video_like(alice_video.id, bob)
            assert liked is (call % 2 == 1)
            assert await like_count(db_session, owner_id=bob.id, video_id=alice_video.id) == call % 2

    @pytest.mark.asyncio
    async def test_toggle_comment_and_tweet_likes(self, like_service, seed, alice, alice_video, bob, db_session):
        comment = await seed(Comment(video_id=alice_video.id, owner_id=alice.id, content="hi"))
        tweet = await seed(Tweet(owner_id=alice.id, content="tweet"))

        assert await like_service.toggle_comment_like(comment.id, bob) is True
        assert await like_service.toggle_tweet_like(str(tweet.id), bob) is True
        assert await like_count(db_session, owner_id=bob.id) == 2

        assert await like_service.toggle_comment_like(comment.id, bob) is False
        assert await like_count(db_session, owner_id=bob.id, comment_id=comment.id) == 0
        assert await like_count(db_session, owner_id=bob.id, tweet_id=tweet.id) == 1

    @pytest.mark.asyncio
    async def test_toggle_missing_target(self, like_service, bob):
        with pytest.raises(NotFound):
            await like_service.toggle_tweet_like("5c7d6a7e-1f3b-4c8e-9a4d-2b6f8e1c3d5a", bob)

    @pytest.mark.asyncio
    async def test_toggle_invalid_identifier(self, like_service, bob):
        with pytest.raises(InvalidIdentifier) as exc_info:
            await like_service.toggle_comment_like("xyz", bob)
        assert exc_info.value.message == "Invalid comment ID"

    @pytest.mark.asyncio
    async def test_liked_videos(self, like_service, alice_video, alice, bob):
        await like_service.toggle_video_like(alice_video.id, bob)

        liked = await like_service.get_liked_videos(bob)

        assert len(liked) == 1
        assert liked[0]["video"]["title"] == "Alice's video"
        assert liked[0]["video"]["owner"]["username"] == "alice"
        assert await like_service.get_liked_videos(alice) == []


class TestTogglePair:
    """Concurrent toggles resolve through store constraints."""

    def make_session(self, existing):
        session = MagicMock()
        lookup = MagicMock()
        lookup.scalar_one_or_none.return_value = existing
        session.execute = AsyncMock(return_value=lookup)
        session.commit = AsyncMock()
        session.rollback = AsyncMock()
        return session

    @pytest.mark.asyncio
    async def test_unique_violation_on_insert_means_already_liked(self):
        session = self.make_session(existing=None)
        session.execute.return_value.scalar_one_or_none.side_effect = [None, "like-id"]
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))

        assert await toggle_pair(session, Like, {"owner_id": "a", "video_id": "b"}) is True
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejected_insert_without_stored_pair_is_internal_error(self):
        session = self.make_session(existing=None)
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("foreign key"))

        with pytest.raises(InternalError):
            await toggle_pair(session, Like, {"owner_id": "a", "video_id": "b"})
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_like_on_vanished_video_is_internal_error(self, bob, db_session):
        with pytest.raises(InternalError):
            await toggle_pair(db_session, Like, {"owner_id": bob.id, "video_id": uuid.uuid4()})

        assert await like_count(db_session, owner_id=bob.id) == 0

    @pytest.mark.asyncio
    async def test_store_failure_on_insert_is_internal_error(self):
        session = self.make_session(existing=None)
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with pytest.raises(InternalError):
            await toggle_pair(session, Like, {"owner_id": "a", "video_id": "b"})
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_matching_no_row_means_already_unliked(self):
        session = self.make_session(existing="like-id")
        removed = MagicMock(rowcount=0)
        lookup = session.execute.return_value
        session.execute = AsyncMock(side_effect=[lookup, removed])

        assert await toggle_pair(session, Like, {"owner_id": "a", "video_id": "b"}) is False
        session.commit.assert_awaited_once()
