import os

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vidtube.web.app.config import Settings
from vidtube.web.app.main import create_app
from vidtube.web.app.models import Base, User, Video
from vidtube.web.app.services.media_host import MediaUpload
from vidtube.web.app.services.media_service import MediaService
from vidtube.web.app.services.user_service import create_access_token, hash_password

MEDIA_BASE_URL = "https://media.test"


class FakeMediaHost:
    """In-process stand-in for the media host that records every call."""

    def __init__(self):
        self.calls = []
        self.uploaded_paths = []
        self.fail_uploads = False
        self.delete_result = {"result": "ok"}
        self.duration = 42.0

    @property
    def uploads(self):
        return [ref for kind, ref in self.calls if kind == "upload"]

    @property
    def deletes(self):
        return [ref for kind, ref in self.calls if kind == "delete"]

    async def upload(self, local_path):
        self.calls.append(("upload", local_path))
        self.uploaded_paths.append((local_path, os.path.exists(local_path)))
        if self.fail_uploads:
            return None
        name = os.path.basename(local_path)
        resource_type = "video" if name.endswith(".mp4") else "image"
        return MediaUpload(
            url=f"{MEDIA_BASE_URL}/{resource_type}/{name}",
            key=f"{resource_type}/{name}",
            resource_type=resource_type,
            duration=self.duration if resource_type == "video" else None
        )

    async def delete(self, remote_ref):
        self.calls.append(("delete", remote_ref))
        return self.delete_result


@pytest.fixture(scope="function")
async def engine():
    """In-memory database with the schema created from scratch for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(db_session):
    """Persist model instances and return them."""
    async def _seed(*objects):
        db_session.add_all(objects)
        await db_session.commit()
        return objects[0] if len(objects) == 1 else objects
    return _seed


@pytest.fixture
async def alice(seed):
    return await seed(User(
        username="alice",
        email="alice@example.com",
        full_name="Alice Example",
        password_hash=hash_password("alice-password", rounds=4),
        avatar=f"{MEDIA_BASE_URL}/image/alice.png",
    ))


@pytest.fixture
async def bob(seed):
    return await seed(User(
        username="bob",
        email="bob@example.com",
        full_name="Bob Example",
        password_hash=hash_password("bob-password", rounds=4),
    ))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        JWT_SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        UPLOAD_TEMP_DIR=str(tmp_path / "uploads"),
        MEDIA_PUBLIC_BASE_URL=MEDIA_BASE_URL,
        LOG_JSON=False,
    )


@pytest.fixture
def fake_media_host():
    return FakeMediaHost()


@pytest.fixture
def media_service(fake_media_host, settings):
    return MediaService(fake_media_host, settings.UPLOAD_TEMP_DIR)


@pytest.fixture
def app(settings, session_factory, fake_media_host):
    """Application wired to the test database and the fake media host."""
    app = create_app(settings)
    app.state.session_factory = session_factory
    app.state.media_host = fake_media_host
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(settings):
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(str(user.id), settings)}"}
    return _headers


@pytest.fixture
async def alice_video(seed, alice):
    return await seed(Video(
        owner_id=alice.id,
        title="Alice's video",
        description="Uploaded by alice",
        video_file=f"{MEDIA_BASE_URL}/video/alice.mp4",
        thumbnail=f"{MEDIA_BASE_URL}/image/alice.png",
        duration=12.5,
        views=10,
    ))
