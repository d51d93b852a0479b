# tests/conftest.py
# Shared fixtures: temporary SQLite database, fake collaborators, pinned clock

import os

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["TEST_MODE"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SCHEDULER_SECRET"] = ""

import datetime as dt

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from ensport_backend.core.clock import bangkok_tz, get_clock
from ensport_backend.core.database import get_db, init_db
from ensport_backend.core.errors import NotificationError, ImageHostError
from ensport_backend.core.rate_limit import InMemoryRateLimitStore, get_rate_limit_store
from ensport_backend.core.security import create_session_token, hash_password
from ensport_backend.main import app
from ensport_backend.models.match_model import Match, MatchStatus
from ensport_backend.models.subscriber_model import Subscriber
from ensport_backend.models.user_model import User, UserRole
from ensport_backend.routes.scheduler_routes import get_scheduler_secret
from ensport_backend.services.email_service import get_mailer
from ensport_backend.services.image_host import get_image_host


def bangkok(year, month, day, hour=0, minute=0):
    return bangkok_tz.localize(dt.datetime(year, month, day, hour, minute))


class FakeMailer:
    """Records every send; set fail=True to simulate a provider outage."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, html):
        if self.fail:
            raise NotificationError("provider unavailable")
        self.sent.append({"to": list(to), "subject": subject, "html": html})
        return ["msg-id"]


class FakeImageHost:
    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.fail_destroy = False

    def upload_image(self, data, filename, content_type):
        public_id = f"KKUENSPORT/Banner/banner_{len(self.uploads) + 1}"
        self.uploads.append({"filename": filename, "size": len(data), "content_type": content_type})
        return {"public_id": public_id, "url": f"https://cdn.example/{public_id}.jpg"}

    def destroy(self, public_id):
        if self.fail_destroy:
            raise ImageHostError("cdn down")
        self.destroyed.append(public_id)
        return True


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


# ---------------------------------------------
# Database
# ---------------------------------------------

@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


# ---------------------------------------------
# Collaborators
# ---------------------------------------------

@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def clock():
    return FakeClock(bangkok(2025, 12, 25, 9, 2))


@pytest.fixture
def rate_limit_store():
    return InMemoryRateLimitStore()


@pytest.fixture
async def client(session_maker, mailer, image_host, clock, rate_limit_store):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_image_host] = lambda: image_host
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rate_limit_store] = lambda: rate_limit_store
    app.dependency_overrides[get_scheduler_secret] = lambda: ""

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------
# Data factories
# ---------------------------------------------

@pytest.fixture
def create_user(db):
    async def _create(username="admin", role=UserRole.ADMIN, sport_type=None,
                      password="password123", is_active=True):
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            sport_type=sport_type,
            is_active=is_active,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _create


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_session_token(user.id)}"}
    return _headers


@pytest.fixture
def create_match(db):
    async def _create(**overrides):
        values = {
            "sport_type": "Football",
            "team1": "Engineering",
            "team2": "Science",
            "date": dt.date(2025, 12, 26),
            "time_start": "09:00",
            "time_end": "10:00",
            "location": "KKU Main Stadium",
            "maps_link": "https://maps.example/kku-stadium",
            "status": MatchStatus.SCHEDULED,
        }
        values.update(overrides)
        match = Match(**values)
        db.add(match)
        await db.commit()
        await db.refresh(match)
        return match
    return _create


@pytest.fixture
def create_subscriber(db):
    async def _create(email="fan@kku.ac.th", is_active=True):
        subscriber = Subscriber(email=email, is_active=is_active)
        db.add(subscriber)
        await db.commit()
        await db.refresh(subscriber)
        return subscriber
    return _create
