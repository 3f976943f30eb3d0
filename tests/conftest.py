"""
Shared test fixtures for the Plant Health API test suite.

Provides:
- In-memory SQLite database (aiosqlite) with all tables created
- Plant repository bound to a test session
- Fake object store and diagnosis oracle for the upload pipeline
- Supabase-style access tokens signed with the test secret
- FastAPI application and httpx client wired to the test database

Usage:
    async def test_example(client, auth_headers):
        response = await client.get("/api/v1/plants", headers=auth_headers)
        assert response.status_code == 200
"""

import io
import logging
import os
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

# Settings are read once and cached, so the environment must be ready first
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-service-role-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-with-enough-length-for-hs256"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_FORMAT"] = "text"
os.environ["DIAGNOSIS_PROVIDER"] = "static"

import httpx  # noqa: E402
import pytest  # noqa: E402
from jose import jwt  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from plant_health.main import create_application  # noqa: E402
from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult  # noqa: E402
from plant_health.modules.plant_diagnosis.domain.services.gateways import (  # noqa: E402
    DiagnosisOracle,
    ImageStore,
)
from plant_health.modules.plant_diagnosis.infrastructure.database import models  # noqa: E402,F401
from plant_health.modules.plant_diagnosis.infrastructure.database.plant_repository_impl import (  # noqa: E402
    SqlAlchemyPlantRepository,
)
from plant_health.modules.plant_diagnosis.presentation.dependencies import (  # noqa: E402
    get_diagnosis_oracle,
    get_image_store,
)
from plant_health.shared.config.database import DatabaseBase  # noqa: E402
from plant_health.shared.config.settings import get_settings  # noqa: E402
from plant_health.shared.core.exceptions import PlantHealthException  # noqa: E402
from plant_health.shared.infrastructure.database.connection import register_connection_events  # noqa: E402
from plant_health.shared.infrastructure.database.session import DatabaseSessionManager  # noqa: E402

# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("plant_health").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

TODAY = date(2026, 3, 1)
NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


# ========================== Sample Data ====================================


def make_diagnosis_payload() -> dict:
    """Diagnosis in the camelCase wire form the oracle returns."""
    return {
        "plantName": "Monstera deliciosa",
        "confidence": 0.87,
        "issues": [
            {
                "name": "Leaf Spot",
                "severity": "medium",
                "description": "Brown spots with yellow halos on older leaves",
                "causes": ["Overwatering", "Poor air circulation", "Splashing water"],
            }
        ],
        "recommendations": [
            {"action": "Remove affected leaves", "timeline": "Immediately", "priority": 2},
            {"action": "Reduce watering to once every 10 days", "timeline": "Ongoing", "priority": 1},
            {"action": "Move away from drafty windows", "timeline": "This week", "priority": 3},
            {"action": "Apply copper fungicide", "timeline": "Weekly", "priority": 1},
        ],
        "careTips": [
            {"icon": "💧", "title": "Watering", "description": "Water Monstera when the top 2 inches are dry."},
            {"icon": "☀️", "title": "Light", "description": "Monstera likes bright indirect light."},
            {"icon": "🌡️", "title": "Temperature", "description": "Keep Monstera at 65-85°F."},
            {"icon": "🌫️", "title": "Humidity", "description": "Monstera prefers 60% humidity."},
            {"icon": "✂️", "title": "Pruning", "description": "Trim yellow Monstera leaves at the base."},
            {"icon": "🌱", "title": "Soil", "description": "Use a chunky aroid mix for Monstera."},
        ],
    }


@pytest.fixture()
def diagnosis_payload() -> dict:
    return make_diagnosis_payload()


@pytest.fixture()
def diagnosis() -> DiagnosisResult:
    return DiagnosisResult.model_validate(make_diagnosis_payload())


def make_png_bytes(size: Tuple[int, int] = (8, 8), image_format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(34, 139, 34)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png_bytes()


# ========================== Fakes ==========================================


class FakeImageStore(ImageStore):
    """Object store that keeps uploads in memory."""

    def __init__(self, error: Optional[PlantHealthException] = None):
        self.error = error
        self.uploads: List[Tuple[UUID, bytes, Optional[str]]] = []

    async def upload(self, owner_id: UUID, image_bytes: bytes, filename: Optional[str] = None) -> str:
        if self.error is not None:
            raise self.error
        self.uploads.append((owner_id, image_bytes, filename))
        return f"https://test-project.supabase.co/storage/v1/object/public/plant-images/{owner_id}/{len(self.uploads)}.png"


class FakeDiagnosisOracle(DiagnosisOracle):
    """Oracle returning a fixed diagnosis, or raising a fixed error."""

    provider_name = "fake"

    def __init__(
        self,
        result: Optional[DiagnosisResult] = None,
        error: Optional[Exception] = None,
    ):
        self.result = result
        self.error = error
        self.calls: List[str] = []

    async def diagnose(self, image_url: str) -> DiagnosisResult:
        self.calls.append(image_url)
        if self.error is not None:
            raise self.error
        return self.result.model_copy(deep=True)


@pytest.fixture()
def image_store() -> FakeImageStore:
    return FakeImageStore()


@pytest.fixture()
def oracle(diagnosis) -> FakeDiagnosisOracle:
    return FakeDiagnosisOracle(result=diagnosis)


# ========================== Database Fixtures ==============================


@pytest.fixture()
async def engine():
    """In-memory SQLite database with all tables created.

    Each test gets a fresh database, no cross-test contamination.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    register_connection_events(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(DatabaseBase.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture()
async def session(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as db_session:
        yield db_session


@pytest.fixture()
def plant_repo(session) -> SqlAlchemyPlantRepository:
    """SqlAlchemyPlantRepository backed by the in-memory DB."""
    return SqlAlchemyPlantRepository(session)


@pytest.fixture()
def owner_id() -> UUID:
    return uuid4()


# ========================== Auth Fixtures ==================================


def make_access_token(
    user_id: str,
    expires_in: timedelta = timedelta(hours=1),
    audience: str = "authenticated",
    secret: Optional[str] = None,
) -> str:
    """Access token shaped like the ones Supabase Auth issues."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "aud": audience,
        "email": f"{user_id[:8]}@example.com",
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(claims, secret or get_settings().SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture()
def auth_headers(owner_id) -> dict:
    return {"Authorization": f"Bearer {make_access_token(str(owner_id))}"}


@pytest.fixture()
def other_auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_access_token(str(uuid4()))}"}


# ========================== Application Fixtures ===========================


@pytest.fixture()
def app(engine, image_store, oracle):
    """Application wired to the test database, object store and oracle."""
    application = create_application()
    application.state.session_manager = DatabaseSessionManager(engine)
    application.dependency_overrides[get_image_store] = lambda: image_store
    application.dependency_overrides[get_diagnosis_oracle] = lambda: oracle
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
