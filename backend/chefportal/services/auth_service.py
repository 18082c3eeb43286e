import time
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.models.config import PortalConfig
from chefportal.models.otp import OtpSession
from chefportal.models.throttle import AuthThrottle
from chefportal.utils.security import generate_otp, generate_token, hash_secret, verify_secret
from chefportal.utils.timestamps import now_iso, parse_iso


# (failed attempts, lockout seconds), checked in order, first match wins.
THROTTLE_STEPS: tuple[tuple[int, float], ...] = (
    (10, 300.0),
    (5, 30.0),
    (3, 5.0),
)


def lockout_remaining(failed_attempts: int, last_failed_at: float, now: float) -> float:
    for attempts, lockout in THROTTLE_STEPS:
        if failed_attempts >= attempts:
            return max(0.0, lockout - (now - last_failed_at))
    return 0.0


class OtpError(ValueError):
    pass


class OtpThrottled(OtpError):
    def __init__(self, retry_after_seconds: float):
        super().__init__(f"Too many attempts, retry in {retry_after_seconds:.0f}s")
        self.retry_after_seconds = retry_after_seconds


class AuthService:
    def __init__(self):
        # token -> {"role": "admin" | "candidate", "subject": email or user id, "expires_at": ts}
        self._sessions: dict[str, dict] = {}

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {t: s for t, s in self._sessions.items() if s["expires_at"] > now}

    def _issue(self, role: str, subject: str) -> dict:
        token = generate_token()
        self._sessions[token] = {
            "role": role,
            "subject": subject,
            "expires_at": time.time() + settings.session_ttl_seconds,
        }
        return {"token": token, "expires_in_seconds": settings.session_ttl_seconds}

    def validate(self, token: str) -> dict | None:
        self._cleanup_expired()
        session = self._sessions.get(token)
        if session is None:
            return None
        session["expires_at"] = time.time() + settings.session_ttl_seconds
        return session

    def logout(self, token: str):
        self._sessions.pop(token, None)

    def logout_subject(self, subject: str):
        self._sessions = {t: s for t, s in self._sessions.items() if s["subject"] != subject}

    def clear(self):
        self._sessions.clear()

    # --- admin ---

    def admin_initialized(self, db: Session) -> bool:
        return db.query(PortalConfig).filter_by(key="admin_password_hash").first() is not None

    def setup_admin(self, db: Session, email: str, password: str):
        now = now_iso()
        for key, value in (
            ("admin_email", email.strip().lower()),
            ("admin_password_hash", hash_secret(password)),
            ("schema_version", "1"),
        ):
            db.merge(PortalConfig(key=key, value=value, updated_at=now))
        db.commit()

    def admin_login(self, db: Session, email: str, password: str) -> dict | None:
        """Failed attempts are throttled per submitted email."""
        email = email.strip().lower()
        throttle_key = f"admin:{email}"
        delay = self.throttle_delay(db, throttle_key)
        if delay > 0:
            return {"error": "too_many_attempts", "retry_after_seconds": delay}

        email_row = db.query(PortalConfig).filter_by(key="admin_email").first()
        hash_row = db.query(PortalConfig).filter_by(key="admin_password_hash").first()
        if not email_row or not hash_row:
            return None

        verified = email_row.value == email and verify_secret(hash_row.value, password)
        if not verified:
            self._register_failure(db, throttle_key)
            return None

        self._clear_failures(db, throttle_key)
        return self._issue("admin", email_row.value)

    # --- candidates ---

    def issue_otp(self, db: Session, email: str) -> str:
        email = email.strip().lower()
        db.query(OtpSession).filter(OtpSession.email == email).delete()
        code = generate_otp()
        now = datetime.now(timezone.utc)
        db.add(OtpSession(
            id=str(uuid.uuid4()),
            email=email,
            code_hash=hash_secret(code),
            expires_at=now_iso(now + timedelta(seconds=settings.otp_ttl_seconds)),
            verified=False,
            created_at=now_iso(now),
        ))
        db.commit()
        return code

    def verify_otp(self, db: Session, email: str, code: str) -> None:
        """Consume the latest OTP for `email`.

        Raises OtpError on any mismatch, and OtpThrottled once repeated
        failures for the same email have locked verification out.
        """
        email = email.strip().lower()
        throttle_key = f"otp:{email}"
        delay = self.throttle_delay(db, throttle_key)
        if delay > 0:
            raise OtpThrottled(delay)

        try:
            otp = self._matching_otp(db, email, code)
        except OtpError:
            self._register_failure(db, throttle_key)
            raise

        otp.verified = True
        db.commit()
        self._clear_failures(db, throttle_key)

    def _matching_otp(self, db: Session, email: str, code: str) -> OtpSession:
        otp = (
            db.query(OtpSession)
            .filter(OtpSession.email == email)
            .order_by(OtpSession.created_at.desc())
            .first()
        )
        if otp is None:
            raise OtpError("No OTP found for this email")
        if datetime.now(timezone.utc) > parse_iso(otp.expires_at):
            raise OtpError("OTP has expired")
        if otp.verified:
            raise OtpError("OTP already used")
        if not verify_secret(otp.code_hash, code):
            raise OtpError("Invalid OTP")
        return otp

    def candidate_session(self, user_id: str) -> dict:
        return self._issue("candidate", user_id)

    # --- throttling ---

    def throttle_delay(self, db: Session, key: str) -> float:
        row = db.get(AuthThrottle, key)
        if row is None:
            return 0.0
        return lockout_remaining(row.failed_attempts, row.last_failed_at, time.time())

    def _register_failure(self, db: Session, key: str):
        row = db.get(AuthThrottle, key)
        if row is None:
            row = AuthThrottle(key=key, failed_attempts=0)
            db.add(row)
        row.failed_attempts += 1
        row.last_failed_at = time.time()
        db.commit()

    def _clear_failures(self, db: Session, key: str):
        db.query(AuthThrottle).filter(AuthThrottle.key == key).delete()
        db.commit()


auth_service = AuthService()
