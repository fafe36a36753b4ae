"""
Test Configuration

Pytest configuration and shared fixtures for all tests.
"""

import os

# Keep the application module from pointing at a file database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from core.schemas import FormDefinition

# In-memory database shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database per test."""
    from core.models import Base

    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Get async test client wired to the test database."""
    from main import app
    from core.database import get_db
    from utils.rate_limit import limiter

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.enabled = True


# =============================================================================
# Sample Forms
# =============================================================================

@pytest.fixture
def contact_form() -> FormDefinition:
    """Three required fields plus an optional practice-type select."""
    return FormDefinition.model_validate({
        "id": 1,
        "name": "Contact Form",
        "version": "2.1.0",
        "applicationType": "clinical",
        "fields": [
            {"fieldId": "fullName", "label": "Full Name", "type": "text", "required": True, "order": 1},
            {"fieldId": "email", "label": "Email Address", "type": "email", "required": True, "order": 2},
            {"fieldId": "phone", "label": "Phone Number", "type": "phone", "required": True, "order": 3},
            {
                "fieldId": "practiceType",
                "label": "Practice Type",
                "type": "select",
                "order": 4,
                "options": [
                    {"value": "wellness", "label": "Wellness"},
                    {"value": "diabetic", "label": "Diabetic Care"},
                    {"value": "longevity", "label": "Longevity"},
                ],
            },
        ],
    })


@pytest.fixture
def valid_contact_data() -> dict:
    return {
        "fullName": "  Jane Smith ",
        "email": "Jane.Smith@EXAMPLE.com",
        "phone": "+1 (555) 123-4567",
        "practiceType": "Wellnes",
    }


@pytest.fixture
def form_payload() -> dict:
    """Admin create-form request body."""
    return {
        "name": "Clinic Intake",
        "description": "Intake form for clinics",
        "applicationType": "clinical",
        "isActive": True,
        "isDefault": True,
        "fields": [
            {
                "fieldId": "firstName",
                "label": "First Name",
                "type": "text",
                "required": True,
                "order": 1,
                "validationRules": [
                    {"type": "maxLength", "value": 50, "message": "First name is too long"},
                ],
            },
            {"fieldId": "email", "label": "Email", "type": "email", "required": True, "order": 2},
            {
                "fieldId": "businessType",
                "label": "Business Type",
                "type": "select",
                "order": 3,
                "options": [
                    {"value": "wellness", "label": "Wellness"},
                    {"value": "health-coach", "label": "Health Coach"},
                ],
            },
        ],
    }
