"""
Work-permit lifecycle.

preparation -> applied -> awaiting_decision -> approved
                  \\               \\-> rejected
                   \\-> rejected

Admins may set any status from any other; the transition table only drives
the warnings returned with an update.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum

from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.models.work_permit import WorkPermit
from chefportal.utils.timestamps import now_iso


class WorkPermitStatus(str, Enum):
    PREPARATION = "preparation"
    APPLIED = "applied"
    AWAITING_DECISION = "awaiting_decision"
    APPROVED = "approved"
    REJECTED = "rejected"


VALID_STATUSES = {s.value for s in WorkPermitStatus}

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "preparation": {"applied"},
    "applied": {"awaiting_decision", "rejected"},
    "awaiting_decision": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}

FINAL_DOCKET_STATUSES = {"applied", "awaiting_decision", "approved"}
TRACKING_CODE_STATUSES = {"applied", "awaiting_decision", "approved"}


class FinalDocketNotAllowed(ValueError):
    pass


@dataclass
class TransitionCheck:
    current: str
    target: str
    warnings: list[str] = field(default_factory=list)

    @property
    def is_listed(self) -> bool:
        return self.target == self.current or self.target in ALLOWED_TRANSITIONS.get(self.current, set())


def can_upload_final_docket(status: str | None) -> bool:
    return status in FINAL_DOCKET_STATUSES


def needs_tracking_code(status: str | None, tracking_code: str | None) -> bool:
    return status in TRACKING_CODE_STATUSES and not tracking_code


def check_transition(current: str, target: str, tracking_code: str | None = None) -> TransitionCheck:
    result = TransitionCheck(current=current, target=target)
    if not result.is_listed:
        result.warnings.append("unusual_transition")
    if needs_tracking_code(target, tracking_code):
        result.warnings.append("tracking_code_required")
    return result


def new_work_permit(user_id: str, now: str | None = None) -> WorkPermit:
    now = now or now_iso()
    return WorkPermit(
        id=str(uuid.uuid4()),
        user_id=user_id,
        status=WorkPermitStatus.PREPARATION.value,
        created_at=now,
        last_updated=now,
    )


def get_or_create(db: Session, user_id: str) -> WorkPermit:
    permit = db.query(WorkPermit).filter(WorkPermit.user_id == user_id).first()
    if permit is None:
        permit = new_work_permit(user_id)
        db.add(permit)
        db.flush()
    return permit


def apply_update(
    permit: WorkPermit,
    status: str | None = None,
    tracking_code: str | None = None,
    notes: str | None = None,
    fields_set: set[str] | None = None,
) -> TransitionCheck:
    """Apply an admin update in place. Caller validates `status` and commits."""
    fields_set = fields_set if fields_set is not None else {"status", "tracking_code", "notes"}
    now = now_iso()

    if "tracking_code" in fields_set:
        permit.tracking_code = tracking_code or None
    if "notes" in fields_set:
        permit.notes = notes

    target = status if "status" in fields_set and status else permit.status
    check = check_transition(permit.status, target, permit.tracking_code)
    if target == WorkPermitStatus.APPLIED.value and not permit.application_date:
        permit.application_date = now
    permit.status = target
    permit.last_updated = now
    return check


def attach_final_docket(permit: WorkPermit, url: str) -> bool:
    """Store the final docket URL. Returns True when the status was advanced."""
    if not can_upload_final_docket(permit.status):
        raise FinalDocketNotAllowed(
            f"Final docket upload requires status applied or later (current: {permit.status})"
        )
    permit.final_docket_url = url
    permit.last_updated = now_iso()
    if settings.auto_approve_on_final_docket and permit.status != WorkPermitStatus.APPROVED.value:
        permit.status = WorkPermitStatus.APPROVED.value
        return True
    return False
