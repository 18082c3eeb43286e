import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chefportal.models.audit import AuditLog
from chefportal.utils.timestamps import ISO_FORMAT, now_iso

logger = logging.getLogger(__name__)

ACTIONS = {
    "CREATE", "UPDATE", "DELETE",
    "LOGIN", "LOGOUT", "LOGIN_FAILED",
    "UPLOAD", "DOWNLOAD",
    "STATUS_CHANGE", "ARCHIVE", "UNARCHIVE",
    "SYNC_COMPLETE", "REMINDER",
}


def record(
    db: Session,
    action: str,
    entity_type: str,
    *,
    entity_id: str | None = None,
    user_id: str | None = None,
    admin_email: str | None = None,
    description: str | None = None,
    severity: str = "info",
    details: dict | None = None,
) -> None:
    """Write an audit row in its own commit. Never raises.

    Callers commit their own changes first: a failed write rolls the session back.
    """
    entry = AuditLog(
        id=str(uuid.uuid4()),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        admin_email=admin_email,
        description=description or f"{action} {entity_type}" + (f" ({entity_id})" if entity_id else ""),
        severity=severity,
        details=details,
        created_at=now_iso(),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to write audit entry %s %s: %s", action, entity_type, exc)
        return
    logger.debug("AUDIT %s %s by %s", action, entity_type, admin_email or user_id or "system")


def list_entries(
    db: Session,
    action: str | None = None,
    entity_type: str | None = None,
    user_id: str | None = None,
    page: int = 1,
    per_page: int = 50,
) -> tuple[list[AuditLog], int]:
    query = db.query(AuditLog)
    if action:
        query = query.filter(AuditLog.action == action)
    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)
    if user_id:
        query = query.filter(AuditLog.user_id == user_id)
    total = query.count()
    rows = (
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return rows, total


def stats(db: Session, days: int = 30) -> dict:
    cutoff = (datetime.now(timezone.utc) - timedelta(days=days)).strftime(ISO_FORMAT)
    base = db.query(AuditLog).filter(AuditLog.created_at >= cutoff)
    by_action = dict(
        base.with_entities(AuditLog.action, func.count(AuditLog.id)).group_by(AuditLog.action).all()
    )
    by_severity = dict(
        base.with_entities(AuditLog.severity, func.count(AuditLog.id)).group_by(AuditLog.severity).all()
    )
    return {
        "days": days,
        "total": sum(by_action.values()),
        "by_action": by_action,
        "by_severity": by_severity,
    }
