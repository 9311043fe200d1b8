"""
Account lifecycle: registration, code verification, login, code resend and
profile reads.

Flow:
1. register   -> unverified user + EMAIL_VERIFICATION code sent by email
2. verify     -> code consumed, user verified, health ID assigned, token issued
3. login      -> token for verified users; a fresh code for unverified ones
"""

import logging
from typing import Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
)

from healthvault.core.config import Settings
from healthvault.core.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    NotFoundError,
)
from healthvault.core.security import PasswordHasher, TokenService
from healthvault.models import OtpPurpose, User
from healthvault.schemas.auth import (
    AuthResponse,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
    VerificationRequiredResponse,
)
from healthvault.schemas.emergency import EmergencyInfoResponse
from healthvault.services.email_service import EmailService
from healthvault.services.health_id_service import HealthIdService
from healthvault.services.otp_service import OneTimeCodeService

logger = logging.getLogger(__name__)

# A unique-constraint violation during verification is retried this many times
VERIFY_RETRIES = 1


class AccountService:
    """Orchestrates the account lifecycle over one database session."""

    def __init__(self, db: Session, settings: Settings, mailer: EmailService):
        self.db = db
        self.settings = settings
        self.mailer = mailer
        self.hasher = PasswordHasher(settings)
        self.tokens = TokenService(settings)
        self.codes = OneTimeCodeService(db, settings)
        self.health_ids = HealthIdService(db)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_user_by_email(self, email: str):
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def _issue_and_send(self, user: User, purpose: OtpPurpose) -> None:
        """Persist a new code, commit, then dispatch it. Dispatch failure is not fatal."""
        try:
            otp = self.codes.issue(user, purpose)
            code = otp.code
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to issue %s code for user %s", purpose.value, user.id)
            raise

        if not self.mailer.send_otp(user.email, code, purpose):
            logger.warning(
                "Could not email %s code to user %s; continuing", purpose.value, user.id
            )

    def _summary(self, user: User) -> UserSummary:
        return UserSummary(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            health_code=user.health_code,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def register(self, request: RegisterRequest) -> RegisterResponse:
        """
        Create an unverified user and send an email verification code.

        Raises:
            ConflictError: If the email is already registered
        """
        email = request.email.strip().lower()
        if self._get_user_by_email(email):
            raise ConflictError()

        user = User(
            email=email,
            password_hash=self.hasher.hash(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            is_verified=False,
        )
        try:
            self.db.add(user)
            self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise ConflictError()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create user %s", email)
            raise

        self._issue_and_send(user, OtpPurpose.EMAIL_VERIFICATION)
        logger.info("Registered user %s", user.id)
        return RegisterResponse(user_id=user.id)

    def verify_code(
        self, user_id: str, code: str, purpose: OtpPurpose
    ) -> AuthResponse:
        """
        Consume a one-time code and issue a session token.

        For EMAIL_VERIFICATION the user is marked verified and gets a health
        ID in the same transaction that consumes the code.

        Raises:
            InvalidOrExpiredCodeError: Wrong, expired or already used code
        """
        try:
            user = self._verify_once(user_id, code, purpose)
        except IntegrityError:
            logger.exception("Verification for user %s failed after retry", user_id)
            raise

        token = self.tokens.issue(user.id)
        logger.info("User %s verified %s code", user.id, purpose.value)
        return AuthResponse(
            message="Verification successful",
            token=token,
            user=self._summary(user),
        )

    @retry(
        stop=stop_after_attempt(VERIFY_RETRIES + 1),
        retry=retry_if_exception_type(IntegrityError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _verify_once(self, user_id: str, code: str, purpose: OtpPurpose) -> User:
        """
        One atomic attempt: claim code, flip flag, assign health ID, commit.

        A unique-constraint violation rolls the whole attempt back, code claim
        included, and the attempt is run again from the start.
        """
        try:
            otp = self.codes.find_active(user_id, code, purpose)
            if otp is None or not self.codes.claim(otp.id):
                raise InvalidOrExpiredCodeError()

            user = self.db.get(User, user_id)
            if user is None:
                raise InvalidOrExpiredCodeError()

            if purpose == OtpPurpose.EMAIL_VERIFICATION:
                user.is_verified = True
                self.health_ids.assign(user)

            self.db.commit()
        except InvalidOrExpiredCodeError:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Verification failed for user %s", user_id)
            raise

        self.db.refresh(user)
        return user

    def login(
        self, email: str, password: str
    ) -> Union[AuthResponse, VerificationRequiredResponse]:
        """
        Check credentials.

        Returns:
            AuthResponse for verified users, VerificationRequiredResponse
            (after sending a fresh code) for unverified ones

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        user = self._get_user_by_email(email)
        if not user or not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_verified:
            self._issue_and_send(user, OtpPurpose.EMAIL_VERIFICATION)
            logger.info("Login by unverified user %s, code re-sent", user.id)
            return VerificationRequiredResponse(user_id=user.id)

        token = self.tokens.issue(user.id)
        logger.info("User %s logged in", user.id)
        return AuthResponse(token=token, user=self._summary(user))

    def resend_code(
        self, user_id: str, purpose: OtpPurpose = OtpPurpose.EMAIL_VERIFICATION
    ) -> None:
        """
        Send a new code. Earlier codes stay valid until they expire.

        Raises:
            NotFoundError: Unknown user id
        """
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        self._issue_and_send(user, purpose)

    def get_profile(self, user_id: str) -> ProfileResponse:
        """User, health code and emergency info (None if never set up)."""
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        emergency = (
            EmergencyInfoResponse.model_validate(user.emergency_info)
            if user.emergency_info
            else None
        )
        return ProfileResponse(
            id=user.id,
            email=user.email,
            phone=user.phone,
            first_name=user.first_name,
            last_name=user.last_name,
            date_of_birth=user.date_of_birth,
            gender=user.gender,
            profile_image=user.profile_image,
            is_verified=user.is_verified,
            health_code=user.health_code,
            emergency_info=emergency,
        )

    def update_profile(self, user_id: str, changes: ProfileUpdate) -> ProfileResponse:
        """Apply the fields present in ``changes``; others are left as stored."""
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        fields = changes.model_dump(exclude_unset=True)
        for name in ("first_name", "last_name"):
            # Names are required columns; null means "leave as is"
            if fields.get(name) is None:
                fields.pop(name, None)

        try:
            for name, value in fields.items():
                setattr(user, name, value.strip() if isinstance(value, str) else value)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update profile for user %s", user_id)
            raise

        return self.get_profile(user_id)
