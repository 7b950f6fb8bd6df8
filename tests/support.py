"""Shared fixtures for the unittest-style test cases."""

import unittest
from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from taskmanager.core.config import get_settings
from taskmanager.core.database import SessionLocal, engine
from taskmanager.core.security import get_token_codec
from taskmanager.main import app
from taskmanager.models import Base, Role
from taskmanager.services.auth import AuthService
from taskmanager.services.mailer import get_mail_dispatcher
from taskmanager.services.throttle import InMemoryAttemptStore, LoginThrottle, get_login_throttle


class FakeMailer:
    """Records reset emails instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send_password_reset_email(self, to_email: str, token: str) -> None:
        self.sent.append((to_email, token))

    @property
    def last_token(self) -> str:
        return self.sent[-1][1]


class FixedClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema with seeded roles per test; self.db is an open session."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()
        self.db.add_all([Role(name="ROLE_USER"), Role(name="ROLE_ADMIN")])
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def make_throttle(self) -> LoginThrottle:
        return LoginThrottle(InMemoryAttemptStore(), max_attempts=6)

    def make_auth(self, throttle: LoginThrottle, mailer: FakeMailer) -> AuthService:
        return AuthService.for_session(self.db, throttle, get_token_codec(), mailer, get_settings())


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient with a private throttle and recording mailer."""

    def setUp(self) -> None:
        super().setUp()
        self.throttle = self.make_throttle()
        self.mailer = FakeMailer()
        app.dependency_overrides[get_login_throttle] = lambda: self.throttle
        app.dependency_overrides[get_mail_dispatcher] = lambda: self.mailer
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def register(
        self,
        username: str = "alice",
        email: str = "a@x.com",
        password: str = "secret123",
        **extra: object,
    ):
        body = {"username": username, "email": email, "password": password, **extra}
        return self.client.post("/auth/register", json=body)

    def login(self, email: str = "a@x.com", password: str = "secret123"):
        return self.client.post("/auth/login", json={"email": email, "password": password})

    def auth_headers(self, email: str = "a@x.com", password: str = "secret123") -> dict[str, str]:
        resp = self.login(email, password)
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}
