import os
from types import SimpleNamespace

os.environ.setdefault("JUARA_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JUARA_JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from juara_loyalty import models  # noqa: F401
from juara_loyalty.core.database import Base, get_db
from juara_loyalty.main import create_app
from juara_loyalty.models import Role
from juara_loyalty.services import member_service
from juara_loyalty.services.assistant_service import get_assistant, get_chat_sessions
from juara_loyalty.services.auth_service import get_auth_provider

ADMIN_EMAIL = "admin@martabakjuara.com"
ADMIN_PASSWORD = "admin-secret"


class FakeChat:
    def __init__(self, replies, fail=False):
        self.replies = replies
        self.fail = fail
        self.messages = []

    def send_message_stream(self, message):
        self.messages.append(message)
        for part in self.replies:
            yield SimpleNamespace(text=part)
        if self.fail:
            raise RuntimeError("stream interrupted")


class FakeAssistant:
    def __init__(self, welcome="Halo, selamat bergabung!", replies=("Martabak ", "manis ", "tersedia!")):
        self.welcome = welcome
        self.replies = list(replies)
        self.fail_welcome = False
        self.fail_chat_start = False
        self.fail_stream = False
        self.prompts = []
        self.chats = []

    def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.fail_welcome:
            raise RuntimeError("gemini unavailable")
        return self.welcome

    def start_chat(self, system_instruction):
        if self.fail_chat_start:
            raise RuntimeError("gemini unavailable")
        chat = FakeChat(self.replies, fail=self.fail_stream)
        self.chats.append(chat)
        return chat


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def auth():
    return get_auth_provider()


@pytest.fixture
def make_member(session, auth):
    counter = {"n": 0}

    def _make(name="Siti Rahma", points=0):
        counter["n"] += 1
        member, _ = member_service.register_member(
            session,
            auth,
            email=f"member{counter['n']}@example.com",
            password="rahasia123",
            name=name,
            phone="081234567890",
        )
        member.points = points
        session.commit()
        return member

    return _make


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def app_with_db(session_factory, assistant):
    app = create_app(create_tables=False)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_assistant] = lambda: assistant

    try:
        yield app, session_factory
    finally:
        app.dependency_overrides.clear()
        get_chat_sessions().clear()


@pytest.fixture
def client(app_with_db):
    app, _ = app_with_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client, session_factory, auth):
    with session_factory() as db:
        auth.sign_up(db, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role=Role.ADMIN)
        db.commit()

    response = client.post("/api/v1/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def register_member(client):
    counter = {"n": 0}

    def _register(name="Budi Santoso", **overrides):
        counter["n"] += 1
        payload = {
            "email": f"budi{counter['n']}@example.com",
            "password": "rahasia123",
            "name": name,
            "phone": "081298765432",
        }
        payload.update(overrides)
        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        body["headers"] = {"Authorization": f"Bearer {body['token']['access_token']}"}
        return body

    return _register
