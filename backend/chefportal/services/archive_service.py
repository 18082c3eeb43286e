import logging
import math
import threading
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.models.user import User
from chefportal.services import audit_service
from chefportal.services.user_service import get_user
from chefportal.utils.timestamps import now_iso, parse_iso

logger = logging.getLogger(__name__)


class ArchiveStateError(ValueError):
    pass


def account_age_days(user, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    created = parse_iso(user.created_at)
    if created is None:
        return 0
    return math.ceil(abs((now - created).total_seconds()) / 86400)


def is_eligible(user, now: datetime | None = None) -> bool:
    """Active accounts at least `archive_after_days` old may be archived."""
    if user.archived:
        return False
    created = parse_iso(user.created_at)
    if created is None:
        return False
    now = now or datetime.now(timezone.utc)
    return now - created >= timedelta(days=settings.archive_after_days)


def eligible_users(db: Session, now: datetime | None = None) -> list[User]:
    active = db.query(User).filter(User.archived.is_(False)).order_by(User.created_at.asc()).all()
    return [u for u in active if is_eligible(u, now)]


class ArchiveService:
    def __init__(self):
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def run_auto_archive(self, db: Session, now: datetime | None = None) -> dict:
        if not self._lock.acquire(blocking=False):
            logger.warning("Auto-archive requested while a run is already in progress")
            return {
                "archived_count": 0,
                "errors": ["Archive service is already running"],
                "summary": "Archive service busy",
            }

        errors: list[str] = []
        archived_count = 0
        try:
            now = now or datetime.now(timezone.utc)
            candidates = eligible_users(db, now)
            if not candidates:
                logger.info("Auto-archive: no users eligible")
                return {"archived_count": 0, "errors": [], "summary": "No users eligible for archiving"}

            logger.info("Auto-archive: %d users eligible", len(candidates))
            for user in candidates:
                age = account_age_days(user, now)
                try:
                    self._archive(db, user, f"automatic_archive_{age}_days_old", now)
                    archived_count += 1
                except Exception as exc:
                    db.rollback()
                    msg = f"Failed to archive user {user.email}: {exc}"
                    logger.error(msg)
                    errors.append(msg)

            summary = f"Archived {archived_count} users out of {len(candidates)} eligible"
            logger.info("Auto-archive: %s", summary)
            return {"archived_count": archived_count, "errors": errors, "summary": summary}
        finally:
            self._lock.release()

    def archive_user(self, db: Session, user_id: str, reason: str, admin_email: str | None = None) -> User:
        user = get_user(db, user_id)
        if user.archived:
            raise ArchiveStateError(f"User {user.email} is already archived")
        self._archive(db, user, reason, admin_email=admin_email)
        return user

    def restore_user(self, db: Session, user_id: str, admin_email: str | None = None) -> User:
        user = get_user(db, user_id)
        if not user.archived:
            raise ArchiveStateError(f"User {user.email} is not archived")
        user.archived = False
        user.archived_at = None
        user.archived_reason = None
        user.updated_at = now_iso()
        db.commit()
        db.refresh(user)
        logger.info("Restored user %s from archive", user.email)
        audit_service.record(db, "UNARCHIVE", "user", entity_id=user.id, user_id=user.id,
                             admin_email=admin_email)
        return user

    def stats(self, db: Session, now: datetime | None = None) -> dict:
        now = now or datetime.now(timezone.utc)
        users = db.query(User).all()
        active = [u for u in users if not u.archived]
        oldest_age = max((account_age_days(u, now) for u in active), default=0)
        return {
            "total_users": len(users),
            "active_users": len(active),
            "archived_users": len(users) - len(active),
            "users_eligible_for_archive": sum(1 for u in active if is_eligible(u, now)),
            "oldest_user_age_days": oldest_age,
        }

    def _archive(self, db: Session, user: User, reason: str, now: datetime | None = None,
                 admin_email: str | None = None) -> None:
        stamp = now_iso(now)
        user.archived = True
        user.archived_at = stamp
        user.archived_reason = reason
        user.updated_at = stamp
        db.commit()
        logger.info("Archived user %s (%s)", user.email, reason)
        audit_service.record(db, "ARCHIVE", "user", entity_id=user.id, user_id=user.id,
                             admin_email=admin_email or "system", details={"reason": reason})


archive_service = ArchiveService()
