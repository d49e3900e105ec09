"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ENVIRONMENT"] = "test"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
# Cheapest bcrypt cost so hashing does not dominate test time
os.environ["BCRYPT_ROUNDS"] = "4"

from authentication.security import get_password_hasher, get_token_issuer  # noqa: E402
from models.config import settings  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402
from services.auth_service import AuthService  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "Password1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch) -> Path:
    """Point the file store at a per-test temporary directory."""
    root = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(root))
    return root


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session."""
    return db_session


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(
    db_session,
    username: str,
    email: str,
    role: db_models.UserRole = db_models.UserRole.USER,
    password: str = TEST_PASSWORD,
    is_active: bool = True,
) -> db_models.User:
    user = db_models.User(
        username=username,
        email=email,
        hashed_password=get_password_hasher().hash(password),
        role=role,
        is_active=is_active,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session) -> db_models.User:
    """Create a regular account."""
    return make_user(db_session, "testuser", "test@example.com")


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    """Create an admin account."""
    return make_user(
        db_session, "adminuser", "admin@example.com", role=db_models.UserRole.ADMIN
    )


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Get authentication headers for test user."""
    token = AuthService.issue_token(test_user, get_token_issuer())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_auth_headers(admin_user) -> dict:
    """Get authentication headers for admin user."""
    token = AuthService.issue_token(admin_user, get_token_issuer())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def png_file():
    """Multipart tuple for a small PNG upload."""

    def _png(name: str = "photo.png"):
        return (name, PNG_BYTES, "image/png")

    return _png


@pytest.fixture
def vet_payload() -> dict:
    return {
        "hospital": "Happy Paws Clinic",
        "address": "12 Main Street",
        "phone": "+15551234567",
        "email": "Contact@HappyPaws.example.com",
        "services": ["Surgery", "Vaccination"],
        "emergencyService": True,
        "rating": 4.5,
    }


@pytest.fixture
def report_payload() -> dict:
    return {
        "animalType": "Dog",
        "animalCondition": "Injured",
        "location": "Riverside Park",
        "description": "Limping dog near the fountain",
        "contactName": "Sam",
        "contactPhone": "+15550001111",
    }
