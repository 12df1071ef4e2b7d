"""
Shared test fixtures.

The application reads its settings once, so the environment is prepared
before anything from groupboard is imported: SQLite instead of MySQL, a
throwaway images directory, a known AES key and the trusted user header
that the test client uses to act as a given user.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IMAGES_DIR"] = tempfile.mkdtemp(prefix="groupboard-images-")
os.environ["AES_SECRET_KEY"] = "test-secret"
os.environ["TRUSTED_USER_HEADER"] = "X-User-Id"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from groupboard.core.crypto import AESCipher, get_cipher
from groupboard.core.images import LocalImageStore, get_image_store
from groupboard.main import create_app
from groupboard.models.base import Base
from groupboard.models.user import User
from groupboard.models.post import Post
from groupboard.models.comment import Comment
from groupboard.models.like import Like, LikeSign
from groupboard.storage.database import get_db, get_session_factory

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine(tmp_path):
    """
    File-backed SQLite so that the aggregate counts, which run in worker
    threads with their own sessions, see the same data as the test.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'groupboard.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def cipher():
    return AESCipher("test-secret")


# =============================================================================
# Data Factories
# =============================================================================

class Seeder:
    """Builds users, posts, comments and likes with predictable ids."""

    def __init__(self, db, cipher):
        self.db = db
        self.cipher = cipher

    def user(self, uid, first_name="Test", last_name="User", email=None, department=None):
        user = User(
            uid=uid,
            first_name=first_name,
            last_name=last_name,
            email=self.cipher.encrypt(email or f"{uid}@example.com"),
            image_url=f"http://testserver/images/{uid}.png",
            department=department,
            expert_in="python",
            interested_in="hiking",
            one_word="curious",
            is_up_for="coffee",
        )
        self.db.add(user)
        self.db.commit()
        return user

    def post(self, pid, user_id, title="Title", description=None, topic=None, minutes=0, image_url=None):
        post = Post(
            pid=pid,
            user_id=user_id,
            title=title,
            description=description,
            topic=topic,
            image_url=image_url,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        self.db.add(post)
        self.db.commit()
        return post

    def comment(self, post_id, user_id, text="Nice"):
        comment = Comment(post_id=post_id, user_id=user_id, text=text)
        self.db.add(comment)
        self.db.commit()
        return comment

    def like(self, post_id, user_id, sign=LikeSign.LIKE):
        like = Like(post_id=post_id, user_id=user_id, like=sign.value)
        self.db.add(like)
        self.db.commit()
        return like


@pytest.fixture
def seeder(db, cipher):
    return Seeder(db, cipher)


@pytest.fixture
def forum(seeder):
    """
    Standard dataset:
    - alice (IT) owns P1: 3 likes, 1 dislike, 2 comments, topic "events"
    - bob (Sales) owns P3: no reactions, topic "news"
    - P2 does not exist
    """
    seeder.user("u-alice", "Alice", "Martin", email="alice@example.com", department="IT")
    seeder.user("u-bob", "Bob", "Durand", email="bob@example.com", department="Sales")
    for uid in ("u-carol", "u-dave", "u-erin"):
        seeder.user(uid, department="IT")

    seeder.post("P1", "u-alice", title="Team Lunch", description="Pizza on Friday", topic="events", minutes=1)
    seeder.post("P3", "u-bob", title="Quarterly numbers", description="Sales went UP", topic="news", minutes=2)

    for uid in ("u-bob", "u-carol", "u-dave"):
        seeder.like("P1", uid, LikeSign.LIKE)
    seeder.like("P1", "u-erin", LikeSign.DISLIKE)

    seeder.comment("P1", "u-bob", "Count me in")
    seeder.comment("P1", "u-carol", "Me too")
    return seeder


# =============================================================================
# HTTP Client Fixtures
# =============================================================================

@pytest.fixture
def images_dir(tmp_path):
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture
def client(session_factory, cipher, images_dir):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cipher] = lambda: cipher
    app.dependency_overrides[get_image_store] = lambda: LocalImageStore(str(images_dir))

    return TestClient(app)

