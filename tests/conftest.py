"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import date, timedelta
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Ensure the application uses a dedicated SQLite database during tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["ADMIN_EMAILS"] = "admin@alumni.test"
os.environ["ENVIRONMENT"] = "test"

from alumni_backend.config import get_settings
from alumni_backend.database import enable_sqlite_foreign_keys


BASE_DIR = Path(__file__).resolve().parent.parent
TEST_DB_PATH = BASE_DIR / "test.db"
ADMIN_EMAIL = "admin@alumni.test"
settings = get_settings()


@pytest.fixture(scope="session", autouse=True)
def apply_migrations():
    """Apply database migrations against the test database."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

    alembic_cfg = AlembicConfig(str(BASE_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, "head")

    yield

    if TEST_DB_PATH.exists():
        try:
            TEST_DB_PATH.unlink()
        except PermissionError:
            # On Windows the file may still be held open; the next run removes it
            pass


@pytest.fixture(scope="session")
async def test_engine():
    """Create test database engine using the same database as migrations."""
    engine = create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
        pool_recycle=300,
    )
    enable_sqlite_foreign_keys(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()
        await session.close()


@pytest.fixture
async def test_app(test_engine):
    """Create test app with database override."""
    from alumni_backend.main import app
    from alumni_backend.database import get_db

    async def override_get_db():
        async_session = async_sessionmaker(
            test_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
async def alumni_factory(db_session):
    """Factory for creating committed alumni rows with unique emails."""
    from alumni_backend.models import Alumni

    async def _create_alumni(
        email: str | None = None,
        first_name: str = "Test",
        last_name: str | None = None,
        **profile,
    ):
        unique_id = str(uuid.uuid4())[:8]
        alumni = Alumni(
            email=email or f"alumni{unique_id}@example.com",
            first_name=first_name,
            last_name=last_name or f"Alumni{unique_id}",
            **profile,
        )
        db_session.add(alumni)
        await db_session.commit()
        return alumni

    return _create_alumni


@pytest.fixture
async def admin_alumni(db_session, alumni_factory):
    """The single admin account, created on first use."""
    from alumni_backend.models import Alumni

    result = await db_session.execute(select(Alumni).where(Alumni.email == ADMIN_EMAIL))
    admin = result.scalar_one_or_none()
    if admin:
        return admin
    return await alumni_factory(email=ADMIN_EMAIL, first_name="Admin", last_name="User")


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a token for the given alumni."""
    from alumni_backend.services.auth_service import AuthService

    def _headers(alumni) -> dict[str, str]:
        token = AuthService().create_access_token(alumni.alumni_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def survey_payload():
    """Factory for survey authoring payloads (JSON-ready dicts)."""

    def _payload(title: str = "Alumni Survey", sections: list[dict] | None = None, **overrides) -> dict:
        today = date.today()
        payload = {
            "title": title,
            "description": "How are our graduates doing?",
            "start_date": (today - timedelta(days=1)).isoformat(),
            "end_date": (today + timedelta(days=30)).isoformat(),
            "sections": sections or [
                {
                    "section_title": "Basics",
                    "questions": [
                        {
                            "question_text": "Employment status",
                            "question_type": "Multiple Choice",
                            "is_required": True,
                            "is_other_option": True,
                            "options": [{"option_text": "Employed"}, {"option_text": "Unemployed"}],
                        },
                    ],
                },
            ],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
async def survey_factory(db_session, survey_payload):
    """Create a survey through the service and return its schema tree."""
    from alumni_backend.schemas.survey import SurveyDefinition
    from alumni_backend.services import SurveyService

    async def _create_survey(**kwargs):
        definition = SurveyDefinition.model_validate(survey_payload(**kwargs))
        return await SurveyService(db_session).create_survey(definition)

    return _create_survey
