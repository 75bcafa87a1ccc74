import pytest

from vidtube.web.app.models import Comment, Like, Subscription, Tweet, Video
from vidtube.web.app.services.dashboard_service import DashboardService


@pytest.fixture
def dashboard_service(db_session):
    return DashboardService(db_session)


class TestDashboardService:
    """Test cases for DashboardService."""

    @pytest.mark.asyncio
    async def test_empty_channel_stats_are_zero(self, dashboard_service, bob):
        assert await dashboard_service.get_channel_stats(bob) == {
            "totalVideos": 0,
            "totalViews": 0,
            "totalSubscribers": 0,
            "totalVideoLikes": 0,
            "totalCommentLikes": 0,
            "totalTweetLikes": 0,
        }

    @pytest.mark.asyncio
    async def test_stats_count_likes_received(self, dashboard_service, seed, alice, bob, alice_video):
        # Arrange
        second = await seed(Video(
            owner_id=alice.id, title="Second", description="d", views=5,
            video_file="https://media.test/video/2.mp4", thumbnail="https://media.test/image/2.png",
        ))
        comment = await seed(Comment(video_id=alice_video.id, owner_id=alice.id, content="pinned"))
        tweet = await seed(Tweet(owner_id=alice.id, content="new upload"))
        bob_tweet = await seed(Tweet(owner_id=bob.id, content="bob's tweet"))
        await seed(
            Subscription(channel_id=alice.id, subscriber_id=bob.id),
            Like(owner_id=bob.id, video_id=alice_video.id),
            Like(owner_id=alice.id, video_id=second.id),
            Like(owner_id=bob.id, comment_id=comment.id),
            Like(owner_id=bob.id, tweet_id=tweet.id),
            # Likes alice gives away do not count towards her channel
            Like(owner_id=alice.id, tweet_id=bob_tweet.id),
        )

        # Act
        stats = await dashboard_service.get_channel_stats(alice)

        # Assert
        assert stats == {
            "totalVideos": 2,
            "totalViews": 15,
            "totalSubscribers": 1,
            "totalVideoLikes": 2,
            "totalCommentLikes": 1,
            "totalTweetLikes": 1,
        }

    @pytest.mark.asyncio
    async def test_channel_videos_only_lists_own_videos(self, dashboard_service, alice, bob, alice_video):
        videos = await dashboard_service.get_channel_videos(alice)

        assert [video["title"] for video in videos] == ["Alice's video"]
        assert videos[0]["isPublished"] is True
        assert "videoFile" not in videos[0]
        assert await dashboard_service.get_channel_videos(bob) == []
