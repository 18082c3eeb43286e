import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.models.user import User
from chefportal.services import audit_service, notifier
from chefportal.services.docket_progress import calculate_progress, missing_items
from chefportal.utils.timestamps import parse_iso

logger = logging.getLogger(__name__)


def incomplete_users(db: Session) -> list[tuple[User, list[str]]]:
    users = db.query(User).filter(User.archived.is_(False)).all()
    result = []
    for user in users:
        progress = calculate_progress(user.docket)
        if progress.completed < progress.total:
            result.append((user, missing_items(user.docket)))
    return result


def send_docket_reminders(db: Session, now: datetime | None = None) -> dict:
    """Remind active candidates about missing docket items."""
    now = now or datetime.now(timezone.utc)
    grace = timedelta(seconds=settings.reminder_grace_seconds)
    sent = skipped = failed = 0

    pending = incomplete_users(db)
    logger.info("Docket reminders: %d users with incomplete dockets", len(pending))
    for user, missing in pending:
        created = parse_iso(user.created_at) or now
        if now - created < grace:
            skipped += 1
            continue
        name = user.display_name or user.phone or "User"
        if notifier.send_docket_reminder(user.email or "", name, missing):
            sent += 1
            audit_service.record(
                db, "REMINDER", "notification", user_id=user.id,
                description=f"Docket reminder sent to {user.email}",
                details={"reminder_type": "docket_incomplete", "missing_documents": missing},
            )
        else:
            failed += 1

    logger.info("Docket reminders: %d sent, %d skipped, %d failed", sent, skipped, failed)
    return {"checked": len(pending), "sent": sent, "skipped": skipped, "failed": failed}
