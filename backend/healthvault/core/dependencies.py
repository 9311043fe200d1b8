"""
Shared dependencies for FastAPI dependency injection.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from healthvault.core.config import Settings
from healthvault.core.database import get_db
from healthvault.core.exceptions import UnauthorizedError
from healthvault.core.security import TokenService
from healthvault.models import User
from healthvault.services.account_service import AccountService
from healthvault.services.email_service import EmailService
from healthvault.services.storage_service import StorageService

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings_dependency(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_email_service(
    settings: Settings = Depends(get_settings_dependency),
) -> EmailService:
    return EmailService(settings)


def get_storage_service(
    settings: Settings = Depends(get_settings_dependency),
) -> StorageService:
    return StorageService(settings)


def get_account_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
    mailer: EmailService = Depends(get_email_service),
) -> AccountService:
    return AccountService(db, settings, mailer)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
) -> User:
    """
    Resolve the bearer token to a user.

    Raises:
        UnauthorizedError: Missing, malformed, expired token or unknown user
    """
    if credentials is None:
        raise UnauthorizedError("Missing token")

    payload = TokenService(settings).decode(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    user = db.get(User, payload["sub"])
    if user is None:
        raise UnauthorizedError("User not found")
    return user
