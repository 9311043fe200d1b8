"""
Basic test configuration and fixtures.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from healthvault.core.config import Settings
from healthvault.core.database import init_db
from healthvault.core.dependencies import get_email_service
from healthvault.main import create_app
from healthvault.models import OneTimeCode, OtpPurpose
from healthvault.schemas.auth import RegisterRequest
from healthvault.services.account_service import AccountService
from healthvault.services.email_service import EmailService


class RecordingMailer(EmailService):
    """Email service that keeps sent codes instead of talking to SMTP."""

    def __init__(self, settings, fail=False):
        super().__init__(settings)
        self.fail = fail
        self.sent = []

    def send_otp(self, address, code, purpose=OtpPurpose.EMAIL_VERIFICATION):
        self.sent.append({"address": address, "code": code, "purpose": purpose})
        return not self.fail

    def last_code(self, address=None):
        for message in reversed(self.sent):
            if address is None or message["address"] == address:
                return message["code"]
        return None


@pytest.fixture
def settings(tmp_path):
    """Settings fixture for testing."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret_key="test-secret",
        bcrypt_rounds=4,
        environment="test",
        storage_backend="local",
        upload_dir=str(tmp_path / "uploads"),
        smtp_host=None,
        smtp_user=None,
        auto_create_tables=False,
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    init_db(application.state.engine)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def mailer(settings):
    return RecordingMailer(settings)


@pytest.fixture
def client(app, mailer):
    """Test client fixture."""
    app.dependency_overrides[get_email_service] = lambda: mailer
    return TestClient(app)


@pytest.fixture
def db_session(app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def session_factory(app):
    return app.state.session_factory


@pytest.fixture
def accounts(db_session, settings, mailer):
    return AccountService(db_session, settings, mailer)


@pytest.fixture
def registered_user(accounts, mailer):
    """An unverified account; returns (user_id, code emailed at registration)."""
    response = accounts.register(
        RegisterRequest(
            email="Jo.Do@Example.com",
            password="password123",
            first_name="Jo",
            last_name="Do",
        )
    )
    return response.user_id, mailer.last_code("jo.do@example.com")


@pytest.fixture
def verified_user(accounts, registered_user):
    """A verified account; returns the AuthResponse from verification."""
    user_id, code = registered_user
    return accounts.verify_code(user_id, code, OtpPurpose.EMAIL_VERIFICATION)


@pytest.fixture
def auth_headers(client, mailer):
    """Register and verify through the API; returns bearer headers."""
    response = client.post(
        "/api/v1/auth/register",
        json={
            "email": "api.user@example.com",
            "password": "password123",
            "firstName": "Api",
            "lastName": "User",
        },
    )
    assert response.status_code == 201
    user_id = response.json()["userId"]

    response = client.post(
        "/api/v1/auth/verify-otp",
        json={
            "userId": user_id,
            "code": mailer.last_code("api.user@example.com"),
            "type": "EMAIL_VERIFICATION",
        },
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def expire_codes(db_session):
    """Returns a helper that pushes every code of a user into the past."""

    def _expire(user_id):
        db_session.query(OneTimeCode).filter(OneTimeCode.user_id == user_id).update(
            {OneTimeCode.expires_at: datetime(2000, 1, 1)}
        )
        db_session.commit()

    return _expire
