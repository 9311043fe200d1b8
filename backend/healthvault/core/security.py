"""
Password hashing and session-token helpers.

- Passwords are hashed with bcrypt through passlib; raw passwords are never stored.
- Session tokens are HS256 JWTs carrying the user id in ``sub``.

Token verification for protected routes lives in
``healthvault.core.dependencies.get_current_user``.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings


class PasswordHasher:
    """Slow, salted password hashing."""

    def __init__(self, settings: Settings):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )

    def hash(self, raw_password: str) -> str:
        return self._context.hash(raw_password)

    def verify(self, raw_password: str, hashed_password: str) -> bool:
        try:
            return self._context.verify(raw_password, hashed_password)
        except ValueError:
            # Malformed stored hash
            return False


class TokenService:
    """Issues and decodes session tokens."""

    def __init__(self, settings: Settings):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.ttl = timedelta(minutes=settings.jwt_expire_minutes)

    def issue(self, subject_id: str, ttl: Optional[timedelta] = None) -> str:
        """
        Create a signed token for ``subject_id``.

        Args:
            subject_id: User id stored in the ``sub`` claim
            ttl: Override for the configured lifetime

        Returns:
            Encoded JWT string
        """
        now = datetime.utcnow()
        payload = {
            "sub": subject_id,
            "iat": now,
            "exp": now + (ttl or self.ttl),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the payload if the token is valid and unexpired, else None."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
