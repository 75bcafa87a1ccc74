import uuid

import pytest

from vidtube.web.app.errors import Forbidden, InvalidIdentifier, InvalidInput, NotFound
from vidtube.web.app.services.tweet_service import TweetService


@pytest.fixture
def tweet_service(db_session):
    return TweetService(db_session)


class TestTweetService:
    """Test cases for TweetService."""

    @pytest.mark.asyncio
    async def test_create_and_list_user_tweets(self, tweet_service, alice, bob):
        await tweet_service.create_tweet(alice, "hello world")
        await tweet_service.create_tweet(bob, "bob here")

        tweets = await tweet_service.get_user_tweets(str(alice.id))

        assert [tweet["content"] for tweet in tweets] == ["hello world"]
        assert tweets[0]["owner"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_user_without_tweets_gets_empty_list(self, tweet_service, bob):
        assert await tweet_service.get_user_tweets(bob.id) == []

    @pytest.mark.asyncio
    async def test_unknown_user(self, tweet_service):
        with pytest.raises(NotFound):
            await tweet_service.get_user_tweets(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_content_required(self, tweet_service, alice):
        with pytest.raises(InvalidInput):
            await tweet_service.create_tweet(alice, "")

    @pytest.mark.asyncio
    async def test_update_and_delete_are_owner_only(self, tweet_service, alice, bob):
        tweet = await tweet_service.create_tweet(alice, "draft")

        with pytest.raises(Forbidden):
            await tweet_service.update_tweet(tweet["id"], bob, "mine now")
        with pytest.raises(Forbidden):
            await tweet_service.delete_tweet(tweet["id"], bob)

        updated = await tweet_service.update_tweet(tweet["id"], alice, "final")
        assert updated["content"] == "final"

        await tweet_service.delete_tweet(tweet["id"], alice)
        assert await tweet_service.get_user_tweets(alice.id) == []

    @pytest.mark.asyncio
    async def test_invalid_tweet_identifier(self, tweet_service, alice):
        with pytest.raises(InvalidIdentifier):
            await tweet_service.delete_tweet("1234", alice)
