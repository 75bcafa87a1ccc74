import jwt
import pytest

from vidtube.web.app.errors import Conflict, InvalidIdentifier, InvalidInput, NotFound, Unauthorized
from vidtube.web.app.services.user_service import (
    UserService, create_access_token, decode_access_token, hash_password, verify_password
)


@pytest.fixture
def user_service(db_session, settings):
    return UserService(db_session, settings)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret", rounds=4)
        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)


class TestTokens:

    def test_round_trip_subject(self, settings):
        token = create_access_token("user-id", settings)
        assert decode_access_token(token, settings)["sub"] == "user-id"

    def test_rejects_foreign_signature(self, settings):
        token = jwt.encode({"sub": "user-id"}, "another-secret", algorithm="HS256")
        with pytest.raises(Unauthorized):
            decode_access_token(token, settings)


class TestUserService:
    """Test cases for UserService."""

    @pytest.mark.asyncio
    async def test_register_normalizes_and_hides_credentials(self, user_service):
        user = await user_service.register_user("Carol C", " Carol@Example.com ", "CarolC", "pw")

        assert user["username"] == "carolc"
        assert user["email"] == "carol@example.com"
        assert user["fullName"] == "Carol C"
        assert "password_hash" not in user
        assert "passwordHash" not in user

    @pytest.mark.asyncio
    async def test_register_requires_all_fields(self, user_service):
        with pytest.raises(InvalidInput) as exc_info:
            await user_service.register_user("Carol", "carol@example.com", " ", "pw")
        assert exc_info.value.message == "All fields are required"

    @pytest.mark.asyncio
    async def test_register_duplicate_username_or_email(self, user_service, alice):
        with pytest.raises(Conflict):
            await user_service.register_user("Other", "other@example.com", "ALICE", "pw")
        with pytest.raises(Conflict):
            await user_service.register_user("Other", "alice@example.com", "other", "pw")

    @pytest.mark.asyncio
    async def test_login_with_username_or_email(self, user_service, alice, settings):
        result = await user_service.login("alice", "alice-password")
        assert result["user"]["username"] == "alice"
        assert decode_access_token(result["accessToken"], settings)["sub"] == str(alice.id)

        result = await user_service.login("ALICE@example.com", "alice-password")
        assert result["user"]["id"] == alice.id

    @pytest.mark.asyncio
    async def test_login_rejects_bad_credentials(self, user_service, alice):
        with pytest.raises(Unauthorized):
            await user_service.login("alice", "wrong")
        with pytest.raises(Unauthorized):
            await user_service.login("nobody", "alice-password")

    @pytest.mark.asyncio
    async def test_password_over_bcrypt_limit_is_invalid_input(self, user_service, alice):
        with pytest.raises(InvalidInput):
            await user_service.register_user("Long Pw", "long@example.com", "longpw", "x" * 80)
        with pytest.raises(InvalidInput):
            await user_service.login("alice", "x" * 80)
        # Multi-byte characters count by their encoded length
        with pytest.raises(InvalidInput):
            await user_service.register_user("Long Pw", "long@example.com", "longpw", "é" * 40)

        user = await user_service.register_user("Max Pw", "max@example.com", "maxpw", "x" * 72)
        assert user["username"] == "maxpw"

    @pytest.mark.asyncio
    async def test_get_user(self, user_service, alice):
        assert (await user_service.get_user(str(alice.id))).username == "alice"
        with pytest.raises(InvalidIdentifier):
            await user_service.get_user("nope")
        with pytest.raises(NotFound):
            await user_service.get_user("1e2d3c4b-5a69-4788-9a0b-1c2d3e4f5a6b")
