"""Shared test fixtures for the course platform test suite."""

from pathlib import Path
from unittest.mock import Mock

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Forget any Vault login so env changes are picked up
from clients.vault_client import reset_vault
reset_vault()

from fakes import TEST_PASSWORD, FakeMongo, FakeRedis

from auth.cipher import PasswordCipher
from auth.config import AuthConfig, TokenSecrets
from auth.database import AuthDatabase
from auth.otp import OtpIssuer
from auth.security_logger import SecurityLogger
from auth.service import Authenticator
from auth.session import SessionCache
from auth.tokens import TokenCodec
from auth.types import Role, User
from clients.email_client import EmailGatewayClient
from clients.media_client import MediaStorageClient


# =============================================================================
# TEST USER CONSTANTS
# =============================================================================

TEST_USER_EMAIL = "testuser@example.com"
TEST_ADMIN_EMAIL = "admin@example.com"


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def mongo():
    """In-memory Mongo stand-in, fresh per test."""
    return FakeMongo()


@pytest.fixture
def redis():
    """In-memory Redis stand-in, fresh per test."""
    return FakeRedis()


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def config():
    """Auth config with a cheap bcrypt cost."""
    return AuthConfig(password_hash_rounds=4)


@pytest.fixture
def secrets():
    return TokenSecrets(
        access="test-access-secret",
        refresh="test-refresh-secret",
        activation="test-activation-secret",
        crypto="test-crypto-secret",
    )


@pytest.fixture
def codec():
    return TokenCodec()


@pytest.fixture
def mock_email_client():
    """Mock email client - no actual emails sent in tests."""
    mock = Mock(spec=EmailGatewayClient)
    mock.send_verification_code.return_value = None
    return mock


@pytest.fixture
def mock_media():
    """Mock media client returning a predictable hosted image."""
    mock = Mock(spec=MediaStorageClient)
    mock.upload.side_effect = lambda source, folder: {
        "public_id": f"{folder}/img-1",
        "url": f"https://cdn.test/{folder}/img-1.png",
    }
    return mock


@pytest.fixture
def auth_db(mongo, config):
    return AuthDatabase(mongo, password_rounds=config.password_hash_rounds)


@pytest.fixture
def session_cache(redis):
    return SessionCache(redis)


@pytest.fixture
def security_logger(mongo):
    return SecurityLogger(mongo)


@pytest.fixture
def authenticator(config, secrets, auth_db, session_cache, codec, mock_email_client, security_logger):
    """Authenticator over in-memory stores with a mocked email gateway."""
    return Authenticator(
        config=config,
        secrets=secrets,
        auth_db=auth_db,
        session_cache=session_cache,
        codec=codec,
        otp_issuer=OtpIssuer(codec, length=config.otp_length),
        cipher=PasswordCipher(secrets.crypto),
        email_client=mock_email_client,
        security_logger=security_logger,
    )


@pytest.fixture
def make_user(auth_db):
    """Create a stored, verified user with the test password."""

    def _make(email: str = TEST_USER_EMAIL, role: Role = Role.USER, **extra) -> User:
        data = {
            "fname": "Test",
            "lname": "User",
            "email": email,
            "password": TEST_PASSWORD,
            "is_verified": True,
            "role": role,
            **extra,
        }
        return auth_db.create_user(data)

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email=TEST_ADMIN_EMAIL, role=Role.ADMIN)


# =============================================================================
# APP FIXTURES
# =============================================================================


@pytest.fixture
def settings():
    """Settings with dummy connection values; stores are replaced by fakes."""
    from core.settings import Settings

    return Settings(
        environment="development",
        mongo_url="mongodb://test",
        redis_url="redis://test",
        access_token_secret="test-access-secret",
        refresh_token_secret="test-refresh-secret",
        activation_secret="test-activation-secret",
        crypto_secret="test-crypto-secret",
        session_secret="test-session-secret",
        email_gateway_url="https://email.test/send",
        email_api_key="key",
        email_hmac_secret="hmac",
    )


@pytest.fixture
def services(mongo, redis, config, authenticator, auth_db, session_cache, mock_media):
    """Services wired over the in-memory stores."""
    from api.app import Services
    from auth.dependencies import SessionGuard
    from core.services.category_service import CategoryService
    from core.services.course_service import CourseService
    from core.services.order_service import OrderService
    from core.services.review_service import ReviewService

    courses = CourseService(mongo, redis, media=mock_media)
    return Services(
        mongo=mongo,
        redis=redis,
        config=config,
        authenticator=authenticator,
        guard=SessionGuard(authenticator, config),
        categories=CategoryService(mongo, media=mock_media),
        courses=courses,
        orders=OrderService(mongo, auth_db, session_cache, courses),
        reviews=ReviewService(mongo, courses),
    )


@pytest.fixture
def app(settings, services):
    from api.app import create_app

    return create_app(settings, services)


@pytest.fixture
def client(app):
    """Test client; server errors come back as 500 responses."""
    from fastapi.testclient import TestClient

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def login(client):
    """Sign in through the API so the client carries session cookies."""

    def _login(email: str, password: str = TEST_PASSWORD):
        response = client.post("/api/v1/user/signin", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response

    return _login
