"""One-time code issuing and single-use claiming."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from healthvault.core.config import Settings
from healthvault.models import OneTimeCode, OtpPurpose, User
from healthvault.utils.codes import generate_otp_code

logger = logging.getLogger(__name__)


class OneTimeCodeService:
    """
    Issues 6-digit codes and accepts each one at most once.

    Issuing a new code leaves earlier unused codes for the same purpose valid
    until they expire. Neither method commits; the caller owns the transaction.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.ttl = timedelta(minutes=settings.otp_expiry_minutes)

    def issue(self, user: User, purpose: OtpPurpose) -> OneTimeCode:
        """Create and flush a fresh code for ``user``."""
        otp = OneTimeCode(
            user_id=user.id,
            code=generate_otp_code(),
            purpose=purpose.value,
            expires_at=datetime.utcnow() + self.ttl,
            is_used=False,
        )
        self.db.add(otp)
        self.db.flush()
        logger.debug("Issued %s code for user %s", purpose.value, user.id)
        return otp

    def find_active(
        self, user_id: str, code: str, purpose: OtpPurpose
    ) -> Optional[OneTimeCode]:
        """Return an unused, unexpired code matching all three keys, if any."""
        return (
            self.db.query(OneTimeCode)
            .filter(
                OneTimeCode.user_id == user_id,
                OneTimeCode.code == code,
                OneTimeCode.purpose == purpose.value,
                OneTimeCode.is_used.is_(False),
                OneTimeCode.expires_at > datetime.utcnow(),
            )
            .order_by(OneTimeCode.created_at.desc())
            .first()
        )

    def claim(self, otp_id: str) -> bool:
        """
        Mark a code used with a conditional update.

        Only one caller can flip ``is_used`` from False to True; every other
        concurrent caller sees zero affected rows.

        Returns:
            True if this call consumed the code
        """
        result = self.db.execute(
            update(OneTimeCode)
            .where(
                OneTimeCode.id == otp_id,
                OneTimeCode.is_used.is_(False),
                OneTimeCode.expires_at > datetime.utcnow(),
            )
            .values(is_used=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
