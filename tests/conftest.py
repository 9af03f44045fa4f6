"""Pytest configuration for all tests."""

import re
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inkpost.core.config import Settings
from inkpost.domain.roles import UserRole
from inkpost.domain.services.auth_service import AuthService
from inkpost.infrastructure.auth.jwt_service import JWTService
from inkpost.infrastructure.auth.password_hasher import PasswordHasher
from inkpost.infrastructure.persistence.database import Base, enable_sqlite_foreign_keys
from inkpost.infrastructure.persistence.models import UserModel
from inkpost.infrastructure.persistence.repositories import TokenStore, UserRepository
from inkpost.infrastructure.services.email.email_provider import EmailProvider
from inkpost.infrastructure.services.email_service import EmailService

TEST_PASSWORD = "Str0ng!Passw0rd"


class RecordingEmailProvider(EmailProvider):
    """Email provider that keeps sent messages in memory."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []
        self.fail = False

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
        reply_to: str | None = None,
    ) -> bool:
        if self.fail:
            raise ConnectionError("SMTP server unavailable")
        self.sent.append(
            {"to": to, "subject": subject, "html": html_body, "text": text_body}
        )
        return True

    async def check_connection(self) -> tuple[bool, str | None]:
        return True, None

    def find(self, to: str, subject: str) -> list[dict[str, str]]:
        return [m for m in self.sent if m["to"] == to and m["subject"] == subject]

    def token_for(self, to: str, subject: str) -> str:
        """Extract the token from the link in the latest matching message."""
        message = self.find(to, subject)[-1]
        match = re.search(r"token=([0-9a-f]+)", message["text"])
        assert match is not None, message["text"]
        return match.group(1)


@pytest.fixture
def settings() -> Settings:
    """Settings for tests, with cheap password hashing and no .env file."""
    return Settings(
        _env_file=None,
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        access_token_secret="test-access-secret-0123456789abcdef0123456789",
        refresh_token_secret="test-refresh-secret-0123456789abcdef012345678",
        password_hash_time_cost=1,
        password_hash_memory_cost=1024,
        password_hash_parallelism=1,
        frontend_url="http://blog.test",
    )


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher.from_settings(settings)


@pytest.fixture
def jwt_service(settings: Settings) -> JWTService:
    return JWTService.from_settings(settings)


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture
def email_service(email_provider: RecordingEmailProvider, settings: Settings) -> EmailService:
    return EmailService(email_provider, settings)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database with foreign keys enforced.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def token_store(db_session: AsyncSession) -> TokenStore:
    return TokenStore(db_session)


@pytest.fixture
def user_repo(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def auth_service(
    db_session: AsyncSession,
    user_repo: UserRepository,
    token_store: TokenStore,
    hasher: PasswordHasher,
    jwt_service: JWTService,
    email_service: EmailService,
    settings: Settings,
) -> AuthService:
    return AuthService(
        session=db_session,
        user_repo=user_repo,
        token_store=token_store,
        hasher=hasher,
        jwt_service=jwt_service,
        email_service=email_service,
        settings=settings,
    )


@pytest.fixture
def create_user(db_session: AsyncSession, hasher: PasswordHasher):
    """Factory that inserts a user directly, bypassing registration."""

    async def _create(
        email: str = "alice@example.com",
        username: str = "alice",
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER,
        verified: bool = False,
        name: str | None = "Alice",
    ) -> UserModel:
        user = UserModel(
            email=email.lower(),
            username=username,
            password_hash=hasher.hash(password),
            name=name,
            role=role.value,
            verified=verified,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def app(
    settings: Settings,
    db_session: AsyncSession,
    email_service: EmailService,
) -> FastAPI:
    """Application wired to the test database and the recording mailer."""
    from inkpost.infrastructure.api.app import create_app
    from inkpost.infrastructure.persistence.database import get_db_session

    application = create_app(settings)
    application.state.email_service = email_service
    application.dependency_overrides[get_db_session] = lambda: db_session
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}
